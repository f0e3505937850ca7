"""
Menu Category Service - store operations for restaurant menu categories.

Category names are unique per restaurant and matched exactly after
trimming. Categories are never deleted by the import pipeline.

Session Management Pattern:
- All functions accept optional `session` parameter
- If session is provided, use it directly (allows callers to manage transactions)
- If session is None, create a new session_scope for the operation
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from src.models.menu_category import MenuCategory
from src.services import menu_item_service
from src.services.database import session_scope
from src.services.exceptions import MenuCategoryNotFound, ValidationError
from src.utils.constants import CATEGORY_NAME_MAX_LENGTH, MAX_INT_CELL
from src.utils.validators import validate_required_string, validate_string_length


# ============================================================================
# Validation
# ============================================================================


def _validate_category_fields(name: Optional[str], sort_order: Optional[int]) -> None:
    """
    Validate category fields before writing.

    Raises:
        ValidationError: With every violated rule
    """
    errors = []
    if name is not None:
        ok, message = validate_required_string(name, "Category name")
        if not ok:
            errors.append(message)
        ok, message = validate_string_length(
            name.strip(), CATEGORY_NAME_MAX_LENGTH, "Category name"
        )
        if not ok:
            errors.append(message)
    if sort_order is not None and (isinstance(sort_order, bool) or sort_order < 0):
        errors.append("Sort order cannot be negative")
    elif sort_order is not None and sort_order > MAX_INT_CELL:
        errors.append(f"Sort order cannot exceed {MAX_INT_CELL}")
    if errors:
        raise ValidationError(errors)


# ============================================================================
# Queries
# ============================================================================


def find_by_restaurant(
    restaurant_id: int,
    active_only: bool = False,
    session: Optional[Session] = None,
) -> List[MenuCategory]:
    """
    List a restaurant's categories ordered by sort_order, then name.

    Args:
        restaurant_id: Owning restaurant
        active_only: If True, exclude inactive categories
        session: Optional database session

    Returns:
        List of MenuCategory objects
    """

    def _impl(sess: Session) -> List[MenuCategory]:
        query = sess.query(MenuCategory).filter(MenuCategory.restaurant_id == restaurant_id)
        if active_only:
            query = query.filter(MenuCategory.is_active.is_(True))
        return query.order_by(MenuCategory.sort_order, MenuCategory.name).all()

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def find_one(
    name: str,
    restaurant_id: int,
    session: Optional[Session] = None,
) -> Optional[MenuCategory]:
    """
    Find a category by exact trimmed name within a restaurant.

    Args:
        name: Category name (surrounding whitespace ignored)
        restaurant_id: Owning restaurant
        session: Optional database session

    Returns:
        MenuCategory or None if no match
    """

    def _impl(sess: Session) -> Optional[MenuCategory]:
        return (
            sess.query(MenuCategory)
            .filter(
                MenuCategory.restaurant_id == restaurant_id,
                MenuCategory.name == name.strip(),
            )
            .first()
        )

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


# ============================================================================
# Mutations
# ============================================================================


def create_category(
    restaurant_id: int,
    name: str,
    sort_order: int = 0,
    session: Optional[Session] = None,
) -> MenuCategory:
    """
    Create a new menu category.

    Args:
        restaurant_id: Owning restaurant
        name: Category display name (trimmed before storing)
        sort_order: Display ordering (default 0)
        session: Optional database session

    Returns:
        Created MenuCategory instance

    Raises:
        ValidationError: If name is empty, too long, duplicate, or sort_order negative
    """
    _validate_category_fields(name or "", sort_order)

    def _impl(sess: Session) -> MenuCategory:
        if find_one(name, restaurant_id, session=sess) is not None:
            raise ValidationError([f"Category with name '{name.strip()}' already exists"])

        category = MenuCategory(
            restaurant_id=restaurant_id,
            name=name.strip(),
            sort_order=sort_order,
        )
        sess.add(category)
        sess.flush()
        sess.refresh(category)
        return category

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def update_category(
    category_id: int,
    name: Optional[str] = None,
    sort_order: Optional[int] = None,
    is_active: Optional[bool] = None,
    session: Optional[Session] = None,
) -> MenuCategory:
    """
    Update a menu category's fields.

    Args:
        category_id: Category ID to update
        name: New name (optional)
        sort_order: New sort order (optional)
        is_active: New active flag (optional)
        session: Optional database session

    Returns:
        Updated MenuCategory instance

    Raises:
        MenuCategoryNotFound: If category doesn't exist
        ValidationError: If a field is invalid or the new name is taken
    """
    _validate_category_fields(name, sort_order)

    def _impl(sess: Session) -> MenuCategory:
        category = sess.query(MenuCategory).filter(MenuCategory.id == category_id).first()
        if category is None:
            raise MenuCategoryNotFound(category_id)

        if name is not None and name.strip() != category.name:
            existing = find_one(name, category.restaurant_id, session=sess)
            if existing is not None:
                raise ValidationError([f"Category with name '{name.strip()}' already exists"])
            category.name = name.strip()

        if sort_order is not None:
            category.sort_order = sort_order

        if is_active is not None:
            category.is_active = is_active

        sess.flush()
        sess.refresh(category)
        return category

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def count_menu_items(category_id: int, session: Optional[Session] = None) -> int:
    """
    Count menu items listed under a category.

    Args:
        category_id: Category ID
        session: Optional database session

    Returns:
        Number of linked menu items
    """
    return menu_item_service.count_by_category(category_id, session=session)
