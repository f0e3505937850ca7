"""
Restaurant Service - tenant lookup and creation.

Session Management Pattern:
- All functions accept optional `session` parameter
- If session is provided, use it directly (allows callers to manage transactions)
- If session is None, create a new session_scope for the operation
"""

from typing import Optional

from sqlalchemy.orm import Session

from src.models.restaurant import Restaurant
from src.services.database import session_scope
from src.services.exceptions import RestaurantNotFound, ValidationError
from src.utils.validators import validate_required_string


def create_restaurant(
    name: str,
    is_active: bool = True,
    session: Optional[Session] = None,
) -> Restaurant:
    """
    Create a new restaurant.

    Args:
        name: Restaurant display name
        is_active: Whether the restaurant can use the menu services
        session: Optional database session

    Returns:
        Created Restaurant instance

    Raises:
        ValidationError: If name is empty
    """
    ok, message = validate_required_string(name, "Restaurant name")
    if not ok:
        raise ValidationError([message])

    def _impl(sess: Session) -> Restaurant:
        restaurant = Restaurant(name=name.strip(), is_active=is_active)
        sess.add(restaurant)
        sess.flush()
        sess.refresh(restaurant)
        return restaurant

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def get_restaurant(
    restaurant_id: int,
    session: Optional[Session] = None,
) -> Restaurant:
    """
    Get an active restaurant by ID.

    Args:
        restaurant_id: Restaurant ID
        session: Optional database session

    Returns:
        Restaurant instance

    Raises:
        RestaurantNotFound: If the restaurant doesn't exist or is inactive
    """

    def _impl(sess: Session) -> Restaurant:
        restaurant = sess.query(Restaurant).filter(Restaurant.id == restaurant_id).first()
        if restaurant is None or not restaurant.is_active:
            raise RestaurantNotFound(restaurant_id)
        return restaurant

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)
