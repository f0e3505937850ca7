"""
Database models package.

This package contains all SQLAlchemy ORM models for the application.
"""

from .base import Base, BaseModel
from .enums import FoodType
from .restaurant import Restaurant
from .menu_category import MenuCategory
from .tag import Tag
from .menu_item import MenuItem, menu_item_categories, menu_item_tags

__all__ = [
    "Base",
    "BaseModel",
    "FoodType",
    "Restaurant",
    "MenuCategory",
    "Tag",
    "MenuItem",
    "menu_item_categories",
    "menu_item_tags",
]
