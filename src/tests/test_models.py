"""Tests for menu models and their database constraints."""

from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from src.models import MenuCategory, MenuItem, Restaurant, Tag


@pytest.fixture
def session(test_db):
    sess = test_db()
    yield sess
    sess.rollback()


@pytest.fixture
def owner(session):
    restaurant = Restaurant(name="Model Kitchen")
    session.add(restaurant)
    session.flush()
    return restaurant


class TestConstraints:
    def test_category_name_unique_per_restaurant(self, session, owner):
        session.add(MenuCategory(restaurant_id=owner.id, name="Mains"))
        session.flush()
        session.add(MenuCategory(restaurant_id=owner.id, name="Mains"))
        with pytest.raises(IntegrityError):
            session.flush()

    def test_negative_sort_order_rejected(self, session, owner):
        session.add(MenuCategory(restaurant_id=owner.id, name="Mains", sort_order=-1))
        with pytest.raises(IntegrityError):
            session.flush()

    def test_menu_item_price_must_be_positive(self, session, owner):
        session.add(MenuItem(restaurant_id=owner.id, name="Free", price=Decimal("0")))
        with pytest.raises(IntegrityError):
            session.flush()

    def test_menu_item_food_type_checked(self, session, owner):
        session.add(MenuItem(restaurant_id=owner.id, name="Tea", price=2, food_type="vegan"))
        with pytest.raises(IntegrityError):
            session.flush()


class TestDefaults:
    def test_tag_defaults(self, session, owner):
        tag = Tag(restaurant_id=owner.id, name="Spicy", slug="spicy")
        session.add(tag)
        session.flush()
        assert tag.color == "#3B82F6"
        assert tag.is_active is True

    def test_menu_item_defaults_and_to_dict(self, session, owner):
        item = MenuItem(restaurant_id=owner.id, name="Tea", price=Decimal("2.50"))
        session.add(item)
        session.flush()

        data = item.to_dict()

        assert data["price"] == 2.5
        assert data["food_type"] == "veg"
        assert data["allergens"] == []
        assert data["nutrition_info"]["calories"] is None
        assert data["uuid"]

    def test_deleting_restaurant_cascades(self, session, owner):
        session.add(MenuCategory(restaurant_id=owner.id, name="Mains"))
        session.flush()

        session.delete(owner)
        session.flush()

        assert session.query(MenuCategory).count() == 0
