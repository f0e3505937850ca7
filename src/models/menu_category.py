"""
MenuCategory model for grouping menu items.

Categories are flat and scoped to one restaurant (e.g., "Starters",
"Main Course"). A menu item can belong to several categories.
"""

from sqlalchemy import (
    Column,
    String,
    Integer,
    Boolean,
    ForeignKey,
    Index,
    CheckConstraint,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import BaseModel
from src.utils.constants import CATEGORY_NAME_MAX_LENGTH


class MenuCategory(BaseModel):
    """
    MenuCategory model representing a section of the menu.

    Attributes:
        restaurant_id: Owning restaurant
        name: Category display name, unique per restaurant
        sort_order: Display ordering (default 0)
        is_active: Hidden from the public menu when False

    Relationships:
        restaurant: Owning Restaurant
        menu_items: Items listed under this category
    """

    __tablename__ = "menu_categories"

    restaurant_id = Column(
        Integer, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False
    )
    name = Column(String(CATEGORY_NAME_MAX_LENGTH), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    restaurant = relationship("Restaurant", back_populates="categories")
    menu_items = relationship(
        "MenuItem", secondary="menu_item_categories", back_populates="categories"
    )

    __table_args__ = (
        UniqueConstraint("restaurant_id", "name", name="uq_menu_category_restaurant_name"),
        CheckConstraint("sort_order >= 0", name="ck_menu_category_sort_order_non_negative"),
        Index("idx_menu_category_restaurant_sort", "restaurant_id", "sort_order"),
    )

    def __repr__(self) -> str:
        """String representation of menu category."""
        return f"<MenuCategory(name='{self.name}', sort_order={self.sort_order})>"
