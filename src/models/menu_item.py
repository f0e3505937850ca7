"""
Menu item models.

This module contains:
- MenuItem: A dish or drink on a restaurant's menu
- menu_item_categories: Junction table linking items to categories
- menu_item_tags: Junction table linking items to tags
"""

from sqlalchemy import (
    Column,
    String,
    Integer,
    Float,
    Numeric,
    Text,
    Boolean,
    JSON,
    ForeignKey,
    Table,
    Index,
    CheckConstraint,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import Base, BaseModel
from .enums import FoodType
from src.utils.constants import MENU_ITEM_NAME_MAX_LENGTH


menu_item_categories = Table(
    "menu_item_categories",
    Base.metadata,
    Column(
        "menu_item_id", Integer, ForeignKey("menu_items.id", ondelete="CASCADE"), primary_key=True
    ),
    Column(
        "category_id",
        Integer,
        ForeignKey("menu_categories.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)

menu_item_tags = Table(
    "menu_item_tags",
    Base.metadata,
    Column(
        "menu_item_id", Integer, ForeignKey("menu_items.id", ondelete="CASCADE"), primary_key=True
    ),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class MenuItem(BaseModel):
    """
    MenuItem model representing one orderable dish.

    Attributes:
        restaurant_id: Owning restaurant
        name: Item name, unique per restaurant
        description: Optional description (max 500 chars)
        price: Price, always > 0, two decimal places
        food_type: "veg" or "non-veg"
        is_spicy: Spicy flag shown on the card
        spicy_level: Chili rating 0-3
        preparation_time: Minutes to prepare (optional)
        is_available: Item can currently be ordered
        calories, protein, carbs, fat: Nutrition info, each optional
        allergens: List of free-text allergen names

    Relationships:
        categories: Categories the item is listed under
        tags: Tags attached to the item
    """

    __tablename__ = "menu_items"

    restaurant_id = Column(
        Integer, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False
    )
    name = Column(String(MENU_ITEM_NAME_MAX_LENGTH), nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Numeric(10, 2), nullable=False)

    food_type = Column(String(10), nullable=False, default=FoodType.VEG.value)
    is_spicy = Column(Boolean, nullable=False, default=False)
    spicy_level = Column(Integer, nullable=False, default=0)
    preparation_time = Column(Integer, nullable=True)
    is_available = Column(Boolean, nullable=False, default=True)

    # Nutrition info
    calories = Column(Float, nullable=True)
    protein = Column(Float, nullable=True)
    carbs = Column(Float, nullable=True)
    fat = Column(Float, nullable=True)

    allergens = Column(JSON, nullable=False, default=list)

    restaurant = relationship("Restaurant", back_populates="menu_items")
    categories = relationship(
        "MenuCategory",
        secondary=menu_item_categories,
        back_populates="menu_items",
        lazy="selectin",
    )
    tags = relationship(
        "Tag", secondary=menu_item_tags, back_populates="menu_items", lazy="selectin"
    )

    __table_args__ = (
        UniqueConstraint("restaurant_id", "name", name="uq_menu_item_restaurant_name"),
        CheckConstraint("price > 0", name="ck_menu_item_price_positive"),
        CheckConstraint(
            "spicy_level >= 0 AND spicy_level <= 3", name="ck_menu_item_spicy_level_range"
        ),
        CheckConstraint(
            "food_type IN ('veg', 'non-veg')", name="ck_menu_item_food_type"
        ),
        Index("idx_menu_item_restaurant_available", "restaurant_id", "is_available"),
    )

    @property
    def nutrition_info(self) -> dict:
        """Nutrition values keyed by name; missing values are None."""
        return {
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
        }

    def to_dict(self, include_relationships: bool = False) -> dict:
        """
        Convert menu item to dictionary.

        Args:
            include_relationships: If True, include category and tag names

        Returns:
            Dictionary representation
        """
        result = super().to_dict(include_relationships=False)
        result["nutrition_info"] = self.nutrition_info
        if include_relationships:
            result["categories"] = [c.name for c in self.categories]
            result["tags"] = [t.name for t in self.tags]
        return result

    def __repr__(self) -> str:
        """String representation of menu item."""
        return f"MenuItem(id={self.id}, name='{self.name}', price={self.price})"
