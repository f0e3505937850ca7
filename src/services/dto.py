"""Data Transfer Objects for the bulk upload pipeline.

The Format Adapter turns each spreadsheet row into one of three typed row
shapes. Field values stay exactly as the reader produced them (a price cell
may still hold "abc"); the structural validator judges them and the
reconciler parses them. Each row keeps its original header->value mapping
for error reporting.

Usage:
    from src.services.dto import BulkUploadDocument, CategoryRow

    row = CategoryRow.from_record(1, {"Name": "Starters", "Sort Order": 1})
    document = BulkUploadDocument(categories=[row])
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional

from src.utils import constants as c
from src.utils.validators import cell_to_text, is_blank


@dataclass
class UploadRow:
    """Base for one uploaded spreadsheet row.

    Attributes:
        index: 1-based position of the row within its section
        source: Original header -> cell value mapping (blank cells omitted)
        name: Raw Name cell
    """

    section: ClassVar[str] = ""

    index: int
    source: Dict[str, Any] = field(default_factory=dict)
    name: Any = None

    @property
    def label(self) -> str:
        """Error prefix such as "Menu Item 3"."""
        return f"{c.RECORD_LABELS[self.section]} {self.index}"

    @property
    def display_name(self) -> str:
        """Trimmed Name text ("" if missing)."""
        return cell_to_text(self.name)

    def has(self, header: str) -> bool:
        """Check if the source row carried a non-blank value for a column."""
        return not is_blank(self.source.get(header))


@dataclass
class CategoryRow(UploadRow):
    """Row from the Categories section."""

    section: ClassVar[str] = c.SECTION_CATEGORIES

    sort_order: Any = None

    @classmethod
    def from_record(cls, index: int, record: Dict[str, Any]) -> "CategoryRow":
        return cls(
            index=index,
            source=dict(record),
            name=record.get(c.HEADER_NAME),
            sort_order=record.get(c.HEADER_SORT_ORDER),
        )


@dataclass
class TagRow(UploadRow):
    """Row from the Tags section."""

    section: ClassVar[str] = c.SECTION_TAGS

    color: Any = None

    @classmethod
    def from_record(cls, index: int, record: Dict[str, Any]) -> "TagRow":
        return cls(
            index=index,
            source=dict(record),
            name=record.get(c.HEADER_NAME),
            color=record.get(c.HEADER_COLOR),
        )


@dataclass
class MenuItemRow(UploadRow):
    """Row from the Menu Items section.

    `categories` and `tags` hold the raw comma-separated name lists.
    """

    section: ClassVar[str] = c.SECTION_MENU_ITEMS

    description: Any = None
    price: Any = None
    categories: Any = None
    tags: Any = None
    food_type: Any = None
    is_spicy: Any = None
    spicy_level: Any = None
    preparation_time: Any = None
    is_available: Any = None
    calories: Any = None
    protein: Any = None
    carbs: Any = None
    fat: Any = None
    allergens: Any = None

    @classmethod
    def from_record(cls, index: int, record: Dict[str, Any]) -> "MenuItemRow":
        return cls(
            index=index,
            source=dict(record),
            name=record.get(c.HEADER_NAME),
            description=record.get(c.HEADER_DESCRIPTION),
            price=record.get(c.HEADER_PRICE),
            categories=record.get(c.HEADER_CATEGORIES),
            tags=record.get(c.HEADER_TAGS),
            food_type=record.get(c.HEADER_FOOD_TYPE),
            is_spicy=record.get(c.HEADER_IS_SPICY),
            spicy_level=record.get(c.HEADER_SPICY_LEVEL),
            preparation_time=record.get(c.HEADER_PREPARATION_TIME),
            is_available=record.get(c.HEADER_IS_AVAILABLE),
            calories=record.get(c.HEADER_CALORIES),
            protein=record.get(c.HEADER_PROTEIN),
            carbs=record.get(c.HEADER_CARBS),
            fat=record.get(c.HEADER_FAT),
            allergens=record.get(c.HEADER_ALLERGENS),
        )

    def nutrition_cell(self, header: str) -> Any:
        """Raw value of a nutrition column (Calories, Protein, Carbs, Fat)."""
        return getattr(self, c.NUTRITION_FIELDS[header])


ROW_TYPES = {
    c.SECTION_CATEGORIES: CategoryRow,
    c.SECTION_TAGS: TagRow,
    c.SECTION_MENU_ITEMS: MenuItemRow,
}


@dataclass
class BulkUploadDocument:
    """Adapter output: up to three sections of typed rows.

    A section the file did not contain is None, never an empty list.
    """

    categories: Optional[List[CategoryRow]] = None
    tags: Optional[List[TagRow]] = None
    menu_items: Optional[List[MenuItemRow]] = None

    @classmethod
    def from_records(cls, records: Dict[str, List[Dict[str, Any]]]) -> "BulkUploadDocument":
        """
        Build a document from header-keyed records grouped by section.

        Args:
            records: {"categories": [...], "tags": [...], "menuItems": [...]};
                     missing keys become absent sections

        Returns:
            BulkUploadDocument with 1-based row indexes per section
        """
        document = cls()
        for section, row_type in ROW_TYPES.items():
            if section in records:
                rows = [
                    row_type.from_record(i, record)
                    for i, record in enumerate(records[section], start=1)
                ]
                document.set_section(section, rows)
        return document

    def get_section(self, section: str) -> Optional[List[UploadRow]]:
        return getattr(self, _ATTRIBUTES[section])

    def set_section(self, section: str, rows: List[UploadRow]) -> None:
        setattr(self, _ATTRIBUTES[section], rows)

    def present_sections(self) -> List[str]:
        """Sections present in the file, in processing order."""
        return [s for s in c.SECTION_ORDER if self.get_section(s) is not None]


_ATTRIBUTES = {
    c.SECTION_CATEGORIES: "categories",
    c.SECTION_TAGS: "tags",
    c.SECTION_MENU_ITEMS: "menu_items",
}
