"""
Restaurant model - the tenant every menu record belongs to.
"""

from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship

from .base import BaseModel


class Restaurant(BaseModel):
    """
    Restaurant model representing one tenant.

    Only the fields the menu pipeline needs are modeled here; profile,
    address and branding live with the external account service.

    Attributes:
        name: Restaurant display name
        is_active: Inactive restaurants cannot import or download templates

    Relationships:
        categories: Menu categories owned by the restaurant
        tags: Tags owned by the restaurant
        menu_items: Menu items owned by the restaurant
    """

    __tablename__ = "restaurants"

    name = Column(String(100), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    categories = relationship(
        "MenuCategory", back_populates="restaurant", cascade="all, delete-orphan"
    )
    tags = relationship("Tag", back_populates="restaurant", cascade="all, delete-orphan")
    menu_items = relationship(
        "MenuItem", back_populates="restaurant", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        """String representation of restaurant."""
        return f"Restaurant(id={self.id}, name='{self.name}')"
