"""Request dependencies shared by the API routes."""

from typing import Optional

from fastapi import Header

from src.models.restaurant import Restaurant
from src.services import restaurant_service
from src.services.exceptions import RestaurantContextRequired

RESTAURANT_HEADER = "X-Restaurant-Id"


def get_current_restaurant(
    x_restaurant_id: Optional[str] = Header(None, alias=RESTAURANT_HEADER),
) -> Restaurant:
    """
    Resolve the requesting restaurant from the X-Restaurant-Id header.

    Stands in for the authentication layer, which attaches the restaurant
    to each request in production deployments.

    Raises:
        RestaurantContextRequired: Header missing or not an integer (401)
        RestaurantNotFound: Restaurant unknown or inactive (404)
    """
    if x_restaurant_id is None or not x_restaurant_id.strip():
        raise RestaurantContextRequired()
    try:
        restaurant_id = int(x_restaurant_id.strip())
    except ValueError:
        raise RestaurantContextRequired(f"Invalid {RESTAURANT_HEADER} header")
    return restaurant_service.get_restaurant(restaurant_id)
