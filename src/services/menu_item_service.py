"""
Menu Item Service - store operations for menu items.

Menu items reference categories and tags by ID. References are checked
against the item's restaurant at write time, so an item can never point
at another tenant's category or tag.

Session Management Pattern:
- All functions accept optional `session` parameter
- If session is provided, use it directly (allows callers to manage transactions)
- If session is None, create a new session_scope for the operation
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from src.models.enums import FoodType
from src.models.menu_category import MenuCategory
from src.models.menu_item import MenuItem, menu_item_categories, menu_item_tags
from src.models.tag import Tag
from src.services.database import session_scope
from src.services.exceptions import MenuItemNotFound, ValidationError
from src.utils.constants import (
    MAX_INT_CELL,
    MENU_ITEM_DESCRIPTION_MAX_LENGTH,
    MENU_ITEM_NAME_MAX_LENGTH,
    SPICY_LEVEL_MAX,
    SPICY_LEVEL_MIN,
)
from src.utils.validators import validate_required_string, validate_string_length

# Fields a caller may set through create/update
MENU_ITEM_FIELDS = {
    "name",
    "description",
    "price",
    "food_type",
    "is_spicy",
    "spicy_level",
    "preparation_time",
    "is_available",
    "calories",
    "protein",
    "carbs",
    "fat",
    "allergens",
}

NUTRITION_COLUMNS = ("calories", "protein", "carbs", "fat")

PRICE_QUANTUM = Decimal("0.01")


# ============================================================================
# Validation
# ============================================================================


def _round_price(price: Any) -> Decimal:
    return Decimal(str(price)).quantize(PRICE_QUANTUM, rounding=ROUND_HALF_UP)


def _validate_menu_item_data(data: Dict[str, Any], partial: bool = False) -> List[str]:
    """
    Validate menu item fields.

    Args:
        data: Field values keyed by column name
        partial: If True, only validate keys that are present (updates)

    Returns:
        List of error messages (empty if valid)
    """
    errors = []

    unknown = set(data) - MENU_ITEM_FIELDS
    if unknown:
        errors.append(f"Unknown menu item field(s): {', '.join(sorted(unknown))}")

    if not partial or "name" in data:
        name = data.get("name")
        ok, message = validate_required_string(name, "Menu item name")
        if not ok:
            errors.append(message)
        else:
            ok, message = validate_string_length(
                name.strip(), MENU_ITEM_NAME_MAX_LENGTH, "Menu item name"
            )
            if not ok:
                errors.append(message)

    if data.get("description"):
        ok, message = validate_string_length(
            data["description"], MENU_ITEM_DESCRIPTION_MAX_LENGTH, "Description"
        )
        if not ok:
            errors.append(message)

    if not partial or "price" in data:
        price = data.get("price")
        if price is None:
            errors.append("Price is required")
        else:
            try:
                rounded = _round_price(price)
            except (InvalidOperation, ValueError):
                errors.append("Price must be a number")
            else:
                if rounded <= 0:
                    errors.append("Price must be greater than 0")

    if "food_type" in data and data["food_type"] not in {f.value for f in FoodType}:
        errors.append("Food type must be 'veg' or 'non-veg'")

    spicy_level = data.get("spicy_level")
    if spicy_level is not None and not SPICY_LEVEL_MIN <= spicy_level <= SPICY_LEVEL_MAX:
        errors.append(f"Spicy level must be between {SPICY_LEVEL_MIN} and {SPICY_LEVEL_MAX}")

    preparation_time = data.get("preparation_time")
    if preparation_time is not None and preparation_time < 0:
        errors.append("Preparation time cannot be negative")
    elif preparation_time is not None and preparation_time > MAX_INT_CELL:
        errors.append(f"Preparation time cannot exceed {MAX_INT_CELL}")

    for column in NUTRITION_COLUMNS:
        value = data.get(column)
        if value is not None and value < 0:
            errors.append(f"{column.capitalize()} cannot be negative")

    return errors


def _normalize(data: Dict[str, Any]) -> Dict[str, Any]:
    """Trim text fields and round price; returns a new dict."""
    normalized = dict(data)
    if normalized.get("name") is not None:
        normalized["name"] = normalized["name"].strip()
    if "description" in normalized:
        normalized["description"] = (normalized["description"] or "").strip()
    if normalized.get("price") is not None:
        normalized["price"] = _round_price(normalized["price"])
    for column in NUTRITION_COLUMNS:
        if normalized.get(column) is not None:
            normalized[column] = float(normalized[column])
    if "allergens" in normalized:
        normalized["allergens"] = list(normalized["allergens"] or [])
    return normalized


def _load_categories(
    category_ids: List[int], restaurant_id: int, session: Session
) -> List[MenuCategory]:
    """Load categories by ID, rejecting any outside the restaurant."""
    unique_ids = list(dict.fromkeys(category_ids))
    if not unique_ids:
        return []
    found = {
        c.id: c
        for c in session.query(MenuCategory)
        .filter(MenuCategory.id.in_(unique_ids), MenuCategory.restaurant_id == restaurant_id)
        .all()
    }
    missing = [str(i) for i in unique_ids if i not in found]
    if missing:
        raise ValidationError([f"Category ID(s) not found: {', '.join(missing)}"])
    return [found[i] for i in unique_ids]


def _load_tags(tag_ids: List[int], restaurant_id: int, session: Session) -> List[Tag]:
    """Load tags by ID, rejecting any outside the restaurant."""
    unique_ids = list(dict.fromkeys(tag_ids))
    if not unique_ids:
        return []
    found = {
        t.id: t
        for t in session.query(Tag)
        .filter(Tag.id.in_(unique_ids), Tag.restaurant_id == restaurant_id)
        .all()
    }
    missing = [str(i) for i in unique_ids if i not in found]
    if missing:
        raise ValidationError([f"Tag ID(s) not found: {', '.join(missing)}"])
    return [found[i] for i in unique_ids]


# ============================================================================
# Queries
# ============================================================================


def find_by_restaurant(
    restaurant_id: int,
    available_only: bool = False,
    session: Optional[Session] = None,
) -> List[MenuItem]:
    """
    List a restaurant's menu items ordered by name.

    Categories and tags are loaded eagerly so the items stay usable after
    the session closes.

    Args:
        restaurant_id: Owning restaurant
        available_only: If True, exclude unavailable items
        session: Optional database session

    Returns:
        List of MenuItem objects
    """

    def _impl(sess: Session) -> List[MenuItem]:
        query = sess.query(MenuItem).filter(MenuItem.restaurant_id == restaurant_id)
        if available_only:
            query = query.filter(MenuItem.is_available.is_(True))
        return query.order_by(MenuItem.name).all()

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def find_one(
    name: str,
    restaurant_id: int,
    session: Optional[Session] = None,
) -> Optional[MenuItem]:
    """
    Find a menu item by exact trimmed name within a restaurant.

    Args:
        name: Item name (surrounding whitespace ignored)
        restaurant_id: Owning restaurant
        session: Optional database session

    Returns:
        MenuItem or None if no match
    """

    def _impl(sess: Session) -> Optional[MenuItem]:
        return (
            sess.query(MenuItem)
            .filter(MenuItem.restaurant_id == restaurant_id, MenuItem.name == name.strip())
            .first()
        )

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def count_by_category(category_id: int, session: Optional[Session] = None) -> int:
    """
    Count menu items listed under a category.

    Args:
        category_id: Category ID
        session: Optional database session

    Returns:
        Number of linked menu items
    """

    def _impl(sess: Session) -> int:
        return (
            sess.query(menu_item_categories)
            .filter(menu_item_categories.c.category_id == category_id)
            .count()
        )

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def count_by_tag(tag_id: int, session: Optional[Session] = None) -> int:
    """
    Count menu items carrying a tag.

    Args:
        tag_id: Tag ID
        session: Optional database session

    Returns:
        Number of linked menu items
    """

    def _impl(sess: Session) -> int:
        return sess.query(menu_item_tags).filter(menu_item_tags.c.tag_id == tag_id).count()

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


# ============================================================================
# Mutations
# ============================================================================


def create_menu_item(
    restaurant_id: int,
    data: Dict[str, Any],
    category_ids: Optional[List[int]] = None,
    tag_ids: Optional[List[int]] = None,
    session: Optional[Session] = None,
) -> MenuItem:
    """
    Create a new menu item.

    Args:
        restaurant_id: Owning restaurant
        data: Field values keyed by column name (see MENU_ITEM_FIELDS);
              name and price are required
        category_ids: Categories to list the item under (same restaurant)
        tag_ids: Tags to attach (same restaurant)
        session: Optional database session

    Returns:
        Created MenuItem instance

    Raises:
        ValidationError: If a field is invalid, the name is taken, or a
            category/tag ID does not belong to the restaurant
    """
    errors = _validate_menu_item_data(data)
    if errors:
        raise ValidationError(errors)
    values = _normalize(data)

    def _impl(sess: Session) -> MenuItem:
        if find_one(values["name"], restaurant_id, session=sess) is not None:
            raise ValidationError([f"Menu item with name '{values['name']}' already exists"])

        item = MenuItem(restaurant_id=restaurant_id, **values)
        item.categories = _load_categories(category_ids or [], restaurant_id, sess)
        item.tags = _load_tags(tag_ids or [], restaurant_id, sess)
        sess.add(item)
        sess.flush()
        sess.refresh(item)
        return item

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def update_menu_item(
    menu_item_id: int,
    data: Dict[str, Any],
    category_ids: Optional[List[int]] = None,
    tag_ids: Optional[List[int]] = None,
    session: Optional[Session] = None,
) -> MenuItem:
    """
    Update a menu item.

    Only keys present in `data` are written. Passing None for category_ids
    or tag_ids leaves those links untouched; an empty list clears them.

    Args:
        menu_item_id: Menu item ID to update
        data: Field values keyed by column name
        category_ids: Replacement category IDs (optional)
        tag_ids: Replacement tag IDs (optional)
        session: Optional database session

    Returns:
        Updated MenuItem instance

    Raises:
        MenuItemNotFound: If the item doesn't exist
        ValidationError: If a field is invalid, the new name is taken, or a
            category/tag ID does not belong to the restaurant
    """
    errors = _validate_menu_item_data(data, partial=True)
    if errors:
        raise ValidationError(errors)
    values = _normalize(data)

    def _impl(sess: Session) -> MenuItem:
        item = sess.query(MenuItem).filter(MenuItem.id == menu_item_id).first()
        if item is None:
            raise MenuItemNotFound(menu_item_id)

        new_name = values.get("name")
        if new_name is not None and new_name != item.name:
            if find_one(new_name, item.restaurant_id, session=sess) is not None:
                raise ValidationError([f"Menu item with name '{new_name}' already exists"])

        item.update_from_dict(values)
        if category_ids is not None:
            item.categories = _load_categories(category_ids, item.restaurant_id, sess)
        if tag_ids is not None:
            item.tags = _load_tags(tag_ids, item.restaurant_id, sess)

        sess.flush()
        sess.refresh(item)
        return item

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)
