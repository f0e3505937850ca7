"""
Tag Service - store operations for menu item tags.

Tags carry a display color and a slug derived from the name; both name
and slug are unique per restaurant.

Session Management Pattern:
- All functions accept optional `session` parameter
- If session is provided, use it directly (allows callers to manage transactions)
- If session is None, create a new session_scope for the operation
"""

import re
from typing import List, Optional

from sqlalchemy.orm import Session

from src.models.tag import Tag
from src.services import menu_item_service
from src.services.database import session_scope
from src.services.exceptions import TagNotFound, ValidationError
from src.utils.constants import DEFAULT_TAG_COLOR, TAG_NAME_MAX_LENGTH
from src.utils.validators import (
    is_hex_color,
    validate_required_string,
    validate_string_length,
)


# ============================================================================
# Utility Functions
# ============================================================================


def _slugify(name: str) -> str:
    """
    Convert a name to a URL-friendly slug.

    Args:
        name: Display name to convert

    Returns:
        Lowercase slug with hyphens (e.g., "Chef Special" -> "chef-special")
    """
    slug = name.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[\s_-]+", "-", slug)
    slug = slug.strip("-")
    return slug or "tag"


def _generate_unique_slug(
    base_slug: str,
    restaurant_id: int,
    session: Session,
    exclude_id: Optional[int] = None,
) -> str:
    """
    Generate a slug unique within the restaurant by appending a number suffix.

    Args:
        base_slug: The base slug to make unique
        restaurant_id: Owning restaurant
        session: Database session
        exclude_id: ID to exclude from uniqueness check (for updates)

    Returns:
        Unique slug (e.g., "spicy" or "spicy-2")
    """
    slug = base_slug
    counter = 1

    while True:
        query = session.query(Tag).filter(Tag.restaurant_id == restaurant_id, Tag.slug == slug)
        if exclude_id is not None:
            query = query.filter(Tag.id != exclude_id)

        if query.first() is None:
            return slug

        counter += 1
        slug = f"{base_slug}-{counter}"


def _validate_tag_fields(name: Optional[str], color: Optional[str]) -> None:
    errors = []
    if name is not None:
        ok, message = validate_required_string(name, "Tag name")
        if not ok:
            errors.append(message)
        ok, message = validate_string_length(name.strip(), TAG_NAME_MAX_LENGTH, "Tag name")
        if not ok:
            errors.append(message)
    if color is not None and not is_hex_color(color):
        errors.append("Please provide a valid hex color")
    if errors:
        raise ValidationError(errors)


# ============================================================================
# Queries
# ============================================================================


def find_by_restaurant(
    restaurant_id: int,
    active_only: bool = False,
    session: Optional[Session] = None,
) -> List[Tag]:
    """
    List a restaurant's tags ordered by name.

    Args:
        restaurant_id: Owning restaurant
        active_only: If True, exclude inactive tags
        session: Optional database session

    Returns:
        List of Tag objects
    """

    def _impl(sess: Session) -> List[Tag]:
        query = sess.query(Tag).filter(Tag.restaurant_id == restaurant_id)
        if active_only:
            query = query.filter(Tag.is_active.is_(True))
        return query.order_by(Tag.name).all()

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def find_one(
    name: str,
    restaurant_id: int,
    session: Optional[Session] = None,
) -> Optional[Tag]:
    """
    Find a tag by exact trimmed name within a restaurant.

    Args:
        name: Tag name (surrounding whitespace ignored)
        restaurant_id: Owning restaurant
        session: Optional database session

    Returns:
        Tag or None if no match
    """

    def _impl(sess: Session) -> Optional[Tag]:
        return (
            sess.query(Tag)
            .filter(Tag.restaurant_id == restaurant_id, Tag.name == name.strip())
            .first()
        )

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


# ============================================================================
# Mutations
# ============================================================================


def create_tag(
    restaurant_id: int,
    name: str,
    color: Optional[str] = None,
    session: Optional[Session] = None,
) -> Tag:
    """
    Create a new tag.

    Args:
        restaurant_id: Owning restaurant
        name: Tag display name (trimmed before storing)
        color: Hex color; defaults to DEFAULT_TAG_COLOR
        session: Optional database session

    Returns:
        Created Tag instance

    Raises:
        ValidationError: If name is empty, too long, duplicate, or color invalid
    """
    color = color.strip() if color else DEFAULT_TAG_COLOR
    _validate_tag_fields(name or "", color)

    def _impl(sess: Session) -> Tag:
        if find_one(name, restaurant_id, session=sess) is not None:
            raise ValidationError([f"Tag with name '{name.strip()}' already exists"])

        tag = Tag(
            restaurant_id=restaurant_id,
            name=name.strip(),
            slug=_generate_unique_slug(_slugify(name), restaurant_id, sess),
            color=color,
        )
        sess.add(tag)
        sess.flush()
        sess.refresh(tag)
        return tag

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def update_tag(
    tag_id: int,
    name: Optional[str] = None,
    color: Optional[str] = None,
    is_active: Optional[bool] = None,
    session: Optional[Session] = None,
) -> Tag:
    """
    Update a tag's fields.

    Renaming regenerates the slug.

    Args:
        tag_id: Tag ID to update
        name: New name (optional)
        color: New hex color (optional)
        is_active: New active flag (optional)
        session: Optional database session

    Returns:
        Updated Tag instance

    Raises:
        TagNotFound: If tag doesn't exist
        ValidationError: If a field is invalid or the new name is taken
    """
    if color is not None:
        color = color.strip()
    _validate_tag_fields(name, color)

    def _impl(sess: Session) -> Tag:
        tag = sess.query(Tag).filter(Tag.id == tag_id).first()
        if tag is None:
            raise TagNotFound(tag_id)

        if name is not None and name.strip() != tag.name:
            if find_one(name, tag.restaurant_id, session=sess) is not None:
                raise ValidationError([f"Tag with name '{name.strip()}' already exists"])
            tag.name = name.strip()
            tag.slug = _generate_unique_slug(
                _slugify(name), tag.restaurant_id, sess, exclude_id=tag.id
            )

        if color is not None:
            tag.color = color

        if is_active is not None:
            tag.is_active = is_active

        sess.flush()
        sess.refresh(tag)
        return tag

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def count_menu_items(tag_id: int, session: Optional[Session] = None) -> int:
    """Count menu items carrying a tag."""
    return menu_item_service.count_by_tag(tag_id, session=session)
