"""
Bulk Upload Service - reconcile uploaded menu rows with stored state.

Records are processed in dependency order: categories, then tags, then menu
items, so an item can reference a category or tag created earlier in the
same file. Each record is written in its own transaction; a failure rolls
back only that record and never aborts the batch.

Existing entities are matched by exact trimmed name within the restaurant:
- Found and update_existing: mutable fields are applied (counted as updated)
- Found otherwise: skipped with an '"<Name>" already exists' error
- Not found: created

Usage:
    from src.services.bulk_upload_service import run_bulk_upload

    result = run_bulk_upload(content, "menu.xlsx", None, restaurant_id=1)
    print(result.to_dict()["summary"])
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError

from src.models.menu_category import MenuCategory
from src.models.tag import Tag
from src.services import menu_category_service, menu_item_service, tag_service
from src.services.bulk_validation_service import validate_bulk_upload
from src.services.database import session_scope
from src.services.dto import BulkUploadDocument, CategoryRow, MenuItemRow, TagRow
from src.services.exceptions import StructuralValidationError, ValidationError
from src.services.logging_utils import get_service_logger, log_operation
from src.services.spreadsheet_adapter_service import parse_upload
from src.utils import constants as c
from src.utils.validators import (
    cell_to_text,
    parse_bool,
    parse_int,
    parse_number,
    split_name_list,
)

logger = get_service_logger(__name__)


# ============================================================================
# Result Classes
# ============================================================================


class RecordOutcome(str, Enum):
    """Final state of one uploaded record."""

    CREATED = "created"
    UPDATED = "updated"
    SKIPPED_DUPLICATE = "skipped_duplicate"
    ERRORED = "errored"


@dataclass
class SectionResult:
    """Per-section counters and error messages."""

    created: int = 0
    updated: int = 0
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"created": self.created, "updated": self.updated, "errors": list(self.errors)}


class BulkUploadResult:
    """
    Result of a bulk upload with per-section tracking.

    Sections absent from the file keep zero counters and no errors.
    """

    def __init__(self):
        self.sections: Dict[str, SectionResult] = {s: SectionResult() for s in c.SECTION_ORDER}

    @property
    def categories(self) -> SectionResult:
        return self.sections[c.SECTION_CATEGORIES]

    @property
    def tags(self) -> SectionResult:
        return self.sections[c.SECTION_TAGS]

    @property
    def menu_items(self) -> SectionResult:
        return self.sections[c.SECTION_MENU_ITEMS]

    @property
    def total_created(self) -> int:
        """Total records created across all sections."""
        return sum(s.created for s in self.sections.values())

    @property
    def total_updated(self) -> int:
        """Total records updated across all sections."""
        return sum(s.updated for s in self.sections.values())

    @property
    def total_errors(self) -> int:
        """Total error messages across all sections."""
        return sum(len(s.errors) for s in self.sections.values())

    def record(self, section: str, outcome: RecordOutcome) -> None:
        """Count a created or updated record; other outcomes carry errors instead."""
        if outcome is RecordOutcome.CREATED:
            self.sections[section].created += 1
        elif outcome is RecordOutcome.UPDATED:
            self.sections[section].updated += 1

    def add_error(self, section: str, message: str) -> None:
        self.sections[section].errors.append(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to the response shape.

        Returns:
            {"summary": {"totalCreated", "totalUpdated", "totalErrors"},
             "details": {"categories", "tags", "menuItems"}}
        """
        return {
            "summary": {
                "totalCreated": self.total_created,
                "totalUpdated": self.total_updated,
                "totalErrors": self.total_errors,
            },
            "details": {section: s.to_dict() for section, s in self.sections.items()},
        }


@dataclass
class LookupSnapshot:
    """Case-insensitive name -> id maps taken before the menu item pass."""

    categories: Dict[str, int] = field(default_factory=dict)
    tags: Dict[str, int] = field(default_factory=dict)


# ============================================================================
# Helpers
# ============================================================================


def _persistence_error(label: str, name: str, error: Exception) -> str:
    """Format a per-record persistence failure."""
    if isinstance(error, IntegrityError):
        return f'{label} "{name}" already exists'
    if isinstance(error, ValidationError):
        return f'{label} "{name}": {"; ".join(error.errors)}'
    return f'{label} "{name}": {error}'


def take_snapshot(restaurant_id: int) -> LookupSnapshot:
    """
    Read all of a restaurant's categories and tags into lookup maps.

    Names are lowercased; on a case-only collision the first stored row wins.
    """
    snapshot = LookupSnapshot()
    with session_scope() as session:
        for category_id, category_name in (
            session.query(MenuCategory.id, MenuCategory.name)
            .filter(MenuCategory.restaurant_id == restaurant_id)
            .order_by(MenuCategory.id)
        ):
            snapshot.categories.setdefault(category_name.lower(), category_id)
        for tag_id, tag_name in (
            session.query(Tag.id, Tag.name).filter(Tag.restaurant_id == restaurant_id).order_by(Tag.id)
        ):
            snapshot.tags.setdefault(tag_name.lower(), tag_id)
    return snapshot


def _resolve_names(
    names: List[str], lookup: Dict[str, int], item_name: str, label: str
) -> Tuple[List[int], List[str]]:
    """
    Resolve reference names against a snapshot map.

    Returns:
        Tuple of (resolved ids in file order, "not found" error messages)
    """
    ids: List[int] = []
    errors: List[str] = []
    for name in names:
        ref_id = lookup.get(name.lower())
        if ref_id is None:
            errors.append(f'Menu Item "{item_name}": {label} "{name}" not found')
        elif ref_id not in ids:
            ids.append(ref_id)
    return ids, errors


def _menu_item_values(row: MenuItemRow) -> Dict[str, Any]:
    """
    Parse a validated menu item row into store field values.

    Missing optional cells fall back to their defaults: veg, not spicy,
    level 0, available, no preparation time, no nutrition, no allergens.
    """
    values: Dict[str, Any] = {
        "name": row.display_name,
        "description": cell_to_text(row.description),
        "price": parse_number(row.price),
        "food_type": cell_to_text(row.food_type).lower() or c.FOOD_TYPE_VEG,
        "is_spicy": bool(parse_bool(row.is_spicy)),
        "spicy_level": parse_int(row.spicy_level) or 0,
        "preparation_time": parse_int(row.preparation_time),
        "allergens": split_name_list(row.allergens),
    }
    is_available = parse_bool(row.is_available)
    values["is_available"] = True if is_available is None else is_available

    for header, column in c.NUTRITION_FIELDS.items():
        number = parse_number(row.nutrition_cell(header))
        values[column] = float(number) if number is not None else None

    return values


# ============================================================================
# Section Passes
# ============================================================================


def _reconcile_category(row: CategoryRow, restaurant_id: int, update_existing: bool) -> RecordOutcome:
    name = row.display_name
    sort_order = parse_int(row.sort_order)

    with session_scope() as session:
        existing = menu_category_service.find_one(name, restaurant_id, session=session)
        if existing is None:
            menu_category_service.create_category(
                restaurant_id, name, sort_order=sort_order or 0, session=session
            )
            return RecordOutcome.CREATED
        if not update_existing:
            return RecordOutcome.SKIPPED_DUPLICATE
        if sort_order is not None:
            menu_category_service.update_category(existing.id, sort_order=sort_order, session=session)
        return RecordOutcome.UPDATED


def _reconcile_tag(row: TagRow, restaurant_id: int, update_existing: bool) -> RecordOutcome:
    name = row.display_name
    color = cell_to_text(row.color) or None

    with session_scope() as session:
        existing = tag_service.find_one(name, restaurant_id, session=session)
        if existing is None:
            tag_service.create_tag(restaurant_id, name, color=color, session=session)
            return RecordOutcome.CREATED
        if not update_existing:
            return RecordOutcome.SKIPPED_DUPLICATE
        if color is not None:
            tag_service.update_tag(existing.id, color=color, session=session)
        return RecordOutcome.UPDATED


def _reconcile_menu_item(
    row: MenuItemRow,
    restaurant_id: int,
    update_existing: bool,
    category_ids: Optional[List[int]],
    tag_ids: Optional[List[int]],
) -> RecordOutcome:
    values = _menu_item_values(row)

    with session_scope() as session:
        existing = menu_item_service.find_one(values["name"], restaurant_id, session=session)
        if existing is None:
            menu_item_service.create_menu_item(
                restaurant_id, values, category_ids=category_ids, tag_ids=tag_ids, session=session
            )
            return RecordOutcome.CREATED
        if not update_existing:
            return RecordOutcome.SKIPPED_DUPLICATE
        menu_item_service.update_menu_item(
            existing.id, values, category_ids=category_ids, tag_ids=tag_ids, session=session
        )
        return RecordOutcome.UPDATED


def _run_section(
    section: str,
    rows: List[Any],
    reconcile,
    result: BulkUploadResult,
    restaurant_id: int,
) -> None:
    """Apply a reconcile callable to each row, recording outcomes and errors."""
    label = c.RECORD_LABELS[section]
    section_result = result.sections[section]

    for row in rows:
        name = row.display_name
        try:
            outcome = reconcile(row)
        except (ValidationError, IntegrityError) as e:
            outcome = RecordOutcome.ERRORED
            result.add_error(section, _persistence_error(label, name, e))
        else:
            if outcome is RecordOutcome.SKIPPED_DUPLICATE:
                result.add_error(section, f'{label} "{name}" already exists')
            result.record(section, outcome)
        logger.debug(f"{row.label} '{name}': {outcome.value}")

    log_operation(
        logger,
        operation=f"reconcile_{section}",
        outcome="partial" if section_result.errors else "success",
        level=logging.WARNING if section_result.errors else logging.INFO,
        restaurant_id=restaurant_id,
        section=section,
        created_count=section_result.created,
        updated_count=section_result.updated,
        error_count=len(section_result.errors),
    )


# ============================================================================
# Public API
# ============================================================================


def process_bulk_upload(
    document: BulkUploadDocument,
    restaurant_id: int,
    update_existing: bool = False,
) -> BulkUploadResult:
    """
    Reconcile a structurally valid document with the restaurant's stored menu.

    Args:
        document: Adapter output that passed validate_bulk_upload
        restaurant_id: Tenant whose menu is written
        update_existing: If True, matching records are updated instead of
            reported as duplicates

    Returns:
        BulkUploadResult with per-section counters and errors
    """
    result = BulkUploadResult()

    if document.categories is not None:
        _run_section(
            c.SECTION_CATEGORIES,
            document.categories,
            lambda row: _reconcile_category(row, restaurant_id, update_existing),
            result,
            restaurant_id,
        )

    if document.tags is not None:
        _run_section(
            c.SECTION_TAGS,
            document.tags,
            lambda row: _reconcile_tag(row, restaurant_id, update_existing),
            result,
            restaurant_id,
        )

    if document.menu_items is not None:
        snapshot = take_snapshot(restaurant_id)

        def reconcile_item(row: MenuItemRow) -> RecordOutcome:
            category_ids = tag_ids = None
            if row.has(c.HEADER_CATEGORIES):
                category_ids, errors = _resolve_names(
                    split_name_list(row.categories),
                    snapshot.categories,
                    row.display_name,
                    c.RECORD_LABELS[c.SECTION_CATEGORIES],
                )
                for message in errors:
                    result.add_error(c.SECTION_MENU_ITEMS, message)
            if row.has(c.HEADER_TAGS):
                tag_ids, errors = _resolve_names(
                    split_name_list(row.tags),
                    snapshot.tags,
                    row.display_name,
                    c.RECORD_LABELS[c.SECTION_TAGS],
                )
                for message in errors:
                    result.add_error(c.SECTION_MENU_ITEMS, message)
            return _reconcile_menu_item(row, restaurant_id, update_existing, category_ids, tag_ids)

        _run_section(c.SECTION_MENU_ITEMS, document.menu_items, reconcile_item, result, restaurant_id)

    log_operation(
        logger,
        operation="bulk_upload",
        outcome="partial" if result.total_errors else "success",
        restaurant_id=restaurant_id,
        update_existing=update_existing,
        created_count=result.total_created,
        updated_count=result.total_updated,
        error_count=result.total_errors,
    )
    return result


def run_bulk_upload(
    content: bytes,
    filename: Optional[str],
    content_type: Optional[str],
    restaurant_id: int,
    update_existing: bool = False,
) -> BulkUploadResult:
    """
    Parse, validate and reconcile an uploaded spreadsheet.

    Args:
        content: Raw file bytes
        filename: Original filename
        content_type: Declared MIME type
        restaurant_id: Tenant whose menu is written
        update_existing: Update matching records instead of skipping them

    Returns:
        BulkUploadResult

    Raises:
        FileFormatError: If the file cannot be read
        StructuralValidationError: If any row breaks a field rule; nothing
            is written in that case
    """
    document = parse_upload(content, filename=filename, content_type=content_type)

    validation = validate_bulk_upload(document)
    if not validation.is_valid:
        log_operation(
            logger,
            operation="bulk_upload",
            outcome="rejected",
            level=logging.WARNING,
            restaurant_id=restaurant_id,
            error_count=validation.error_count,
        )
        raise StructuralValidationError(validation.errors)

    return process_bulk_upload(document, restaurant_id, update_existing=update_existing)
