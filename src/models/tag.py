"""
Tag model for labelling menu items (e.g., "Spicy", "Chef Special").
"""

from sqlalchemy import Column, String, Integer, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import BaseModel
from src.utils.constants import DEFAULT_TAG_COLOR, TAG_NAME_MAX_LENGTH


class Tag(BaseModel):
    """
    Tag model representing a colored label attached to menu items.

    Attributes:
        restaurant_id: Owning restaurant
        name: Tag display name, unique per restaurant
        slug: URL-friendly identifier derived from name, unique per restaurant
        color: Hex color "#RRGGBB" or "#RGB"
        is_active: Hidden from the public menu when False
    """

    __tablename__ = "tags"

    restaurant_id = Column(
        Integer, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False
    )
    name = Column(String(TAG_NAME_MAX_LENGTH), nullable=False)
    slug = Column(String(TAG_NAME_MAX_LENGTH + 10), nullable=False)
    color = Column(String(7), nullable=False, default=DEFAULT_TAG_COLOR)
    is_active = Column(Boolean, nullable=False, default=True)

    restaurant = relationship("Restaurant", back_populates="tags")
    menu_items = relationship("MenuItem", secondary="menu_item_tags", back_populates="tags")

    __table_args__ = (
        UniqueConstraint("restaurant_id", "name", name="uq_tag_restaurant_name"),
        UniqueConstraint("restaurant_id", "slug", name="uq_tag_restaurant_slug"),
    )

    def __repr__(self) -> str:
        """String representation of tag."""
        return f"<Tag(name='{self.name}', color='{self.color}')>"
