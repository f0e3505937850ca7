"""
Menu Template Service - build the bulk upload XLSX template.

The template mirrors the upload format: sheets "Categories", "Tags" and
"Menu Items" with the canonical headers in a bold first row. Rows come from
the restaurant's current menu so a template downloaded, edited and uploaded
with updateExisting=true updates in place. Sections with no stored records
get sample rows instead.

Usage:
    from src.services.menu_template_service import generate_template

    content = generate_template(restaurant_id=1)
    Path("menu_bulk_upload_template.xlsx").write_bytes(content)
"""

import io
from typing import Any, Dict, List

import openpyxl
from openpyxl.styles import Font

from src.models.menu_category import MenuCategory
from src.models.menu_item import MenuItem
from src.models.tag import Tag
from src.services import menu_category_service, menu_item_service, tag_service
from src.services.database import session_scope
from src.services.logging_utils import get_service_logger, log_operation
from src.utils import constants as c

logger = get_service_logger(__name__)

HEADER_FONT = Font(bold=True)
MAX_COLUMN_WIDTH = 50


def _number_cell(value: Any) -> Any:
    """Render stored numbers as sheet values; whole floats become ints."""
    if value is None:
        return None
    value = float(value)
    return int(value) if value.is_integer() else value


def _category_row(category: MenuCategory) -> List[Any]:
    return [category.name, category.sort_order]


def _tag_row(tag: Tag) -> List[Any]:
    return [tag.name, tag.color]


def _menu_item_row(item: MenuItem) -> List[Any]:
    return [
        item.name,
        item.description or "",
        float(item.price),
        ",".join(sorted(category.name for category in item.categories)),
        ",".join(sorted(tag.name for tag in item.tags)),
        item.food_type,
        item.is_spicy,
        item.spicy_level,
        item.preparation_time,
        item.is_available,
        _number_cell(item.calories),
        _number_cell(item.protein),
        _number_cell(item.carbs),
        _number_cell(item.fat),
        ",".join(item.allergens or []),
    ]


def build_template_rows(restaurant_id: int) -> Dict[str, List[List[Any]]]:
    """
    Collect the data rows of each template sheet.

    Categories are ordered by sort order, then name; tags and menu items by
    name. An empty section falls back to its sample rows.

    Args:
        restaurant_id: Restaurant whose menu is exported

    Returns:
        Dict mapping section key to a list of rows in canonical column order
    """
    with session_scope() as session:
        categories = menu_category_service.find_by_restaurant(restaurant_id, session=session)
        tags = tag_service.find_by_restaurant(restaurant_id, session=session)
        items = menu_item_service.find_by_restaurant(restaurant_id, session=session)

        rows = {
            c.SECTION_CATEGORIES: [_category_row(category) for category in categories],
            c.SECTION_TAGS: [_tag_row(tag) for tag in tags],
            c.SECTION_MENU_ITEMS: [_menu_item_row(item) for item in items],
        }

    samples = {
        c.SECTION_CATEGORIES: c.SAMPLE_CATEGORY_ROWS,
        c.SECTION_TAGS: c.SAMPLE_TAG_ROWS,
        c.SECTION_MENU_ITEMS: c.SAMPLE_MENU_ITEM_ROWS,
    }
    for section, section_rows in rows.items():
        if not section_rows:
            rows[section] = [list(row) for row in samples[section]]

    return rows


def generate_template(restaurant_id: int) -> bytes:
    """
    Generate the XLSX upload template for a restaurant.

    Args:
        restaurant_id: Restaurant whose menu seeds the template

    Returns:
        Workbook file content
    """
    rows = build_template_rows(restaurant_id)

    wb = openpyxl.Workbook()
    wb.remove(wb.active)

    for section in c.SECTION_ORDER:
        ws = wb.create_sheet(title=c.SHEET_NAMES[section])
        headers = c.SECTION_HEADERS[section]

        for col, header in enumerate(headers, 1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = HEADER_FONT

        for row in rows[section]:
            ws.append(row)

        for column in ws.columns:
            width = max(len(str(cell.value)) for cell in column if cell.value is not None)
            ws.column_dimensions[column[0].column_letter].width = min(width + 2, MAX_COLUMN_WIDTH)

    buffer = io.BytesIO()
    wb.save(buffer)

    log_operation(
        logger,
        operation="generate_template",
        outcome="success",
        restaurant_id=restaurant_id,
        categories=len(rows[c.SECTION_CATEGORIES]),
        tags=len(rows[c.SECTION_TAGS]),
        menu_items=len(rows[c.SECTION_MENU_ITEMS]),
    )
    return buffer.getvalue()
