"""
Constants for the Menu Bulk Import service.

This module defines all system-wide constants including:
- Application metadata
- Spreadsheet sheet names and column headers
- Field limits shared by models and the structural validator
- Canned sample rows for the upload template
"""

from typing import Dict, List

# ============================================================================
# Application Metadata
# ============================================================================

APP_NAME = "Menu Bulk Import"
APP_VERSION = "0.1.0"
DATABASE_FILENAME = "menu_import.db"
DATABASE_VERSION = "1.0"

# ============================================================================
# Sections
# ============================================================================

SECTION_CATEGORIES = "categories"
SECTION_TAGS = "tags"
SECTION_MENU_ITEMS = "menuItems"

# Processing order matters: menu items reference categories and tags by name
SECTION_ORDER: List[str] = [SECTION_CATEGORIES, SECTION_TAGS, SECTION_MENU_ITEMS]

# Sheet names in the XLSX workbook
SHEET_NAMES: Dict[str, str] = {
    SECTION_CATEGORIES: "Categories",
    SECTION_TAGS: "Tags",
    SECTION_MENU_ITEMS: "Menu Items",
}

# Record labels used as error message prefixes
RECORD_LABELS: Dict[str, str] = {
    SECTION_CATEGORIES: "Category",
    SECTION_TAGS: "Tag",
    SECTION_MENU_ITEMS: "Menu Item",
}

# Optional CSV column routing rows to a section
CSV_SECTION_COLUMN = "Section"

# ============================================================================
# Column Headers
# ============================================================================

HEADER_NAME = "Name"
HEADER_SORT_ORDER = "Sort Order"
HEADER_COLOR = "Color"
HEADER_DESCRIPTION = "Description"
HEADER_PRICE = "Price"
HEADER_CATEGORIES = "Categories"
HEADER_TAGS = "Tags"
HEADER_FOOD_TYPE = "Food Type"
HEADER_IS_SPICY = "Is Spicy"
HEADER_SPICY_LEVEL = "Spicy Level"
HEADER_PREPARATION_TIME = "Preparation Time"
HEADER_IS_AVAILABLE = "Is Available"
HEADER_CALORIES = "Calories"
HEADER_PROTEIN = "Protein"
HEADER_CARBS = "Carbs"
HEADER_FAT = "Fat"
HEADER_ALLERGENS = "Allergens"

CATEGORY_HEADERS: List[str] = [HEADER_NAME, HEADER_SORT_ORDER]

TAG_HEADERS: List[str] = [HEADER_NAME, HEADER_COLOR]

MENU_ITEM_HEADERS: List[str] = [
    HEADER_NAME,
    HEADER_DESCRIPTION,
    HEADER_PRICE,
    HEADER_CATEGORIES,
    HEADER_TAGS,
    HEADER_FOOD_TYPE,
    HEADER_IS_SPICY,
    HEADER_SPICY_LEVEL,
    HEADER_PREPARATION_TIME,
    HEADER_IS_AVAILABLE,
    HEADER_CALORIES,
    HEADER_PROTEIN,
    HEADER_CARBS,
    HEADER_FAT,
    HEADER_ALLERGENS,
]

SECTION_HEADERS: Dict[str, List[str]] = {
    SECTION_CATEGORIES: CATEGORY_HEADERS,
    SECTION_TAGS: TAG_HEADERS,
    SECTION_MENU_ITEMS: MENU_ITEM_HEADERS,
}

# Nutrition headers map onto MenuItem columns
NUTRITION_FIELDS: Dict[str, str] = {
    HEADER_CALORIES: "calories",
    HEADER_PROTEIN: "protein",
    HEADER_CARBS: "carbs",
    HEADER_FAT: "fat",
}

# ============================================================================
# Field Limits
# ============================================================================

CATEGORY_NAME_MAX_LENGTH = 50
TAG_NAME_MAX_LENGTH = 30
MENU_ITEM_NAME_MAX_LENGTH = 100
MENU_ITEM_DESCRIPTION_MAX_LENGTH = 500

SPICY_LEVEL_MIN = 0
SPICY_LEVEL_MAX = 3

# Whole-number cells (Sort Order, Preparation Time) must fit a 32-bit column
MAX_INT_CELL = 2**31 - 1

# Numeric cells may carry at most this many digits before the decimal point
MAX_NUMBER_DIGITS = 15

DEFAULT_TAG_COLOR = "#3B82F6"

FOOD_TYPE_VEG = "veg"
FOOD_TYPE_NON_VEG = "non-veg"
FOOD_TYPES: List[str] = [FOOD_TYPE_VEG, FOOD_TYPE_NON_VEG]

# Accepted spellings for boolean cells (compared lowercase)
TRUE_VALUES = {"true", "yes", "y", "1"}
FALSE_VALUES = {"false", "no", "n", "0"}

# ============================================================================
# File Handling
# ============================================================================

DEFAULT_MAX_UPLOAD_BYTES = 10_000_000  # 10MB

CSV_MIME_TYPES = {"text/csv", "application/csv"}
XLSX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

FILE_TYPE_CSV = "csv"
FILE_TYPE_XLSX = "xlsx"

TEMPLATE_FILENAME = "menu_bulk_upload_template.xlsx"

# ============================================================================
# Template Sample Rows
# ============================================================================

SAMPLE_CATEGORY_ROWS: List[list] = [
    ["Appetizers", 1],
    ["Main Course", 2],
    ["Desserts", 3],
    ["Beverages", 4],
]

SAMPLE_TAG_ROWS: List[list] = [
    ["Spicy", "#FF4444"],
    ["Vegetarian", "#44FF44"],
    ["Popular", "#4444FF"],
    ["Chef Special", "#FFAA44"],
]

SAMPLE_MENU_ITEM_ROWS: List[list] = [
    [
        "Margherita Pizza",
        "Classic tomato and mozzarella pizza",
        299.99,
        "Main Course",
        "Popular,Vegetarian",
        FOOD_TYPE_VEG,
        False,
        0,
        20,
        True,
        800,
        25,
        80,
        30,
        "dairy,wheat",
    ],
    [
        "Chicken Tikka",
        "Spicy grilled chicken tikka",
        399.99,
        "Main Course",
        "Spicy",
        FOOD_TYPE_NON_VEG,
        True,
        2,
        25,
        True,
        650,
        35,
        15,
        25,
        "",
    ],
    [
        "Chocolate Cake",
        "Rich chocolate cake with cream",
        199.99,
        "Desserts",
        "Popular",
        FOOD_TYPE_VEG,
        False,
        0,
        5,
        True,
        450,
        8,
        60,
        20,
        "dairy,eggs,wheat",
    ],
]
