"""
Bulk Validation Service - structural checks over parsed upload rows.

Runs before any database work. Every rule is checked on every row and all
violations are collected, so one response lists everything wrong with the
file. Messages are prefixed with the record label and its 1-based index
within its section, e.g. "Menu Item 3: Price must be a positive number".

No I/O happens here; the functions only read the rows they are given.

Usage:
    from src.services.bulk_validation_service import validate_bulk_upload

    result = validate_bulk_upload(document)
    if not result.is_valid:
        for error in result.errors:
            print(error)
"""

from dataclasses import dataclass, field
from typing import Any, List

from src.services.dto import BulkUploadDocument, CategoryRow, MenuItemRow, TagRow, UploadRow
from src.utils import constants as c
from src.utils.validators import (
    cell_to_text,
    is_hex_color,
    parse_bool,
    parse_int,
    parse_number,
    validate_string_length,
)


# ============================================================================
# Dataclasses
# ============================================================================


@dataclass
class StructuralValidationResult:
    """Result of structural validation."""

    is_valid: bool
    errors: List[str] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return len(self.errors)


# ============================================================================
# Helper Functions
# ============================================================================


def _name_errors(row: UploadRow, max_length: int) -> List[str]:
    name = row.display_name
    if not name:
        return ["Name is required"]
    ok, message = validate_string_length(name, max_length, "Name")
    return [] if ok else [message]


def _is_non_negative_integer(value: Any) -> bool:
    number = parse_int(value)
    return number is not None and 0 <= number <= c.MAX_INT_CELL


def _is_non_negative_number(value: Any) -> bool:
    number = parse_number(value)
    return number is not None and number >= 0


# ============================================================================
# Section Validators
# ============================================================================


def validate_category_row(row: CategoryRow) -> List[str]:
    """
    Check one category row.

    Returns:
        Unprefixed error messages (empty if valid)
    """
    errors = _name_errors(row, c.CATEGORY_NAME_MAX_LENGTH)
    if row.sort_order is not None and not _is_non_negative_integer(row.sort_order):
        errors.append("Sort Order must be a non-negative integer")
    return errors


def validate_tag_row(row: TagRow) -> List[str]:
    """
    Check one tag row.

    Returns:
        Unprefixed error messages (empty if valid)
    """
    errors = _name_errors(row, c.TAG_NAME_MAX_LENGTH)
    if row.color is not None and not is_hex_color(cell_to_text(row.color)):
        errors.append("Invalid color format (use hex color)")
    return errors


def validate_menu_item_row(row: MenuItemRow) -> List[str]:
    """
    Check one menu item row.

    Optional columns are only checked when the cell has a value.

    Returns:
        Unprefixed error messages (empty if valid)
    """
    errors = _name_errors(row, c.MENU_ITEM_NAME_MAX_LENGTH)

    if row.description is not None:
        ok, message = validate_string_length(
            cell_to_text(row.description), c.MENU_ITEM_DESCRIPTION_MAX_LENGTH, "Description"
        )
        if not ok:
            errors.append(message)

    if row.price is None:
        errors.append("Price is required")
    else:
        price = parse_number(row.price)
        if price is None or price <= 0:
            errors.append("Price must be a positive number")

    if row.food_type is not None and cell_to_text(row.food_type).lower() not in c.FOOD_TYPES:
        errors.append("Food Type must be 'veg' or 'non-veg'")

    if row.is_spicy is not None and parse_bool(row.is_spicy) is None:
        errors.append(f"{c.HEADER_IS_SPICY} must be true or false")

    if row.spicy_level is not None:
        level = parse_int(row.spicy_level)
        if level is None or not c.SPICY_LEVEL_MIN <= level <= c.SPICY_LEVEL_MAX:
            errors.append(
                f"Spicy Level must be between {c.SPICY_LEVEL_MIN} and {c.SPICY_LEVEL_MAX}"
            )

    if row.preparation_time is not None and not _is_non_negative_integer(row.preparation_time):
        errors.append("Preparation Time must be a non-negative integer")

    if row.is_available is not None and parse_bool(row.is_available) is None:
        errors.append(f"{c.HEADER_IS_AVAILABLE} must be true or false")

    for header in c.NUTRITION_FIELDS:
        value = row.nutrition_cell(header)
        if value is not None and not _is_non_negative_number(value):
            errors.append(f"{header} must be a non-negative number")

    return errors


_ROW_VALIDATORS = {
    c.SECTION_CATEGORIES: validate_category_row,
    c.SECTION_TAGS: validate_tag_row,
    c.SECTION_MENU_ITEMS: validate_menu_item_row,
}


# ============================================================================
# Public API
# ============================================================================


def validate_bulk_upload(document: BulkUploadDocument) -> StructuralValidationResult:
    """
    Validate every row of every present section.

    Args:
        document: Format adapter output

    Returns:
        StructuralValidationResult; is_valid is True only when errors is empty
    """
    errors: List[str] = []
    for section in document.present_sections():
        validator = _ROW_VALIDATORS[section]
        for row in document.get_section(section):
            errors.extend(f"{row.label}: {message}" for message in validator(row))

    return StructuralValidationResult(is_valid=not errors, errors=errors)
