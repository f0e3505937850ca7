"""Tests for bulk_upload_service: dependency-ordered reconciliation.

Covers create/update/skip semantics per section, reference resolution for
menu items, error aggregation and the end-to-end parse-validate-reconcile
entry point.
"""

from decimal import Decimal

import pytest

from src.services import (
    bulk_upload_service,
    menu_category_service,
    menu_item_service,
    tag_service,
)
from src.services.bulk_upload_service import (
    BulkUploadResult,
    process_bulk_upload,
    run_bulk_upload,
)
from src.services.dto import BulkUploadDocument
from src.services.exceptions import FileFormatError, StructuralValidationError
from src.services.menu_template_service import generate_template
from src.utils import constants as c


def _document(categories=None, tags=None, menu_items=None):
    records = {}
    if categories is not None:
        records["categories"] = categories
    if tags is not None:
        records["tags"] = tags
    if menu_items is not None:
        records["menuItems"] = menu_items
    return BulkUploadDocument.from_records(records)


# ============================================================================
# Result aggregation
# ============================================================================


class TestBulkUploadResult:
    def test_empty_result_wire_shape(self):
        assert BulkUploadResult().to_dict() == {
            "summary": {"totalCreated": 0, "totalUpdated": 0, "totalErrors": 0},
            "details": {
                "categories": {"created": 0, "updated": 0, "errors": []},
                "tags": {"created": 0, "updated": 0, "errors": []},
                "menuItems": {"created": 0, "updated": 0, "errors": []},
            },
        }

    def test_totals_sum_sections(self):
        result = BulkUploadResult()
        result.categories.created = 2
        result.tags.updated = 1
        result.add_error(c.SECTION_MENU_ITEMS, "a")
        result.add_error(c.SECTION_TAGS, "b")

        assert result.total_created == 2
        assert result.total_updated == 1
        assert result.total_errors == 2


# ============================================================================
# Categories and tags
# ============================================================================


class TestCategoryPass:
    def test_creates_categories(self, restaurant):
        result = process_bulk_upload(
            _document(categories=[{"Name": " Starters ", "Sort Order": 2}, {"Name": "Mains"}]),
            restaurant.id,
        )

        assert result.categories.created == 2
        starters = menu_category_service.find_one("Starters", restaurant.id)
        assert starters.name == "Starters"
        assert starters.sort_order == 2
        assert menu_category_service.find_one("Mains", restaurant.id).sort_order == 0

    def test_existing_category_skipped_without_update(self, restaurant):
        menu_category_service.create_category(restaurant.id, "Starters", sort_order=1)

        result = process_bulk_upload(
            _document(categories=[{"Name": "Starters", "Sort Order": 5}]), restaurant.id
        )

        assert result.categories.created == 0
        assert result.categories.errors == ['Category "Starters" already exists']
        assert menu_category_service.find_one("Starters", restaurant.id).sort_order == 1

    def test_existing_category_updated(self, restaurant):
        menu_category_service.create_category(restaurant.id, "Starters", sort_order=4)

        result = process_bulk_upload(
            _document(categories=[{"Name": "Starters", "Sort Order": 0}]),
            restaurant.id,
            update_existing=True,
        )

        assert result.categories.updated == 1
        assert menu_category_service.find_one("Starters", restaurant.id).sort_order == 0

    def test_update_without_sort_order_keeps_value(self, restaurant):
        menu_category_service.create_category(restaurant.id, "Starters", sort_order=4)

        result = process_bulk_upload(
            _document(categories=[{"Name": "Starters"}]), restaurant.id, update_existing=True
        )

        assert result.categories.updated == 1
        assert menu_category_service.find_one("Starters", restaurant.id).sort_order == 4

    def test_name_match_is_exact(self, restaurant):
        menu_category_service.create_category(restaurant.id, "Starters")

        result = process_bulk_upload(_document(categories=[{"Name": "starters"}]), restaurant.id)

        assert result.categories.created == 1
        assert result.categories.errors == []

    def test_other_restaurant_names_do_not_collide(self, restaurant, other_restaurant):
        menu_category_service.create_category(other_restaurant.id, "Starters")

        result = process_bulk_upload(_document(categories=[{"Name": "Starters"}]), restaurant.id)

        assert result.categories.created == 1


class TestTagPass:
    def test_creates_tag_with_default_color(self, restaurant):
        result = process_bulk_upload(_document(tags=[{"Name": "Chef Special"}]), restaurant.id)

        assert result.tags.created == 1
        tag = tag_service.find_one("Chef Special", restaurant.id)
        assert tag.color == c.DEFAULT_TAG_COLOR
        assert tag.slug == "chef-special"

    def test_update_changes_color_only_when_given(self, restaurant):
        tag_service.create_tag(restaurant.id, "Spicy", color="#FF0000")
        tag_service.create_tag(restaurant.id, "Popular", color="#00FF00")

        result = process_bulk_upload(
            _document(tags=[{"Name": "Spicy", "Color": "#AA0000"}, {"Name": "Popular"}]),
            restaurant.id,
            update_existing=True,
        )

        assert result.tags.updated == 2
        assert tag_service.find_one("Spicy", restaurant.id).color == "#AA0000"
        assert tag_service.find_one("Popular", restaurant.id).color == "#00FF00"

    def test_duplicate_tag_error(self, restaurant):
        tag_service.create_tag(restaurant.id, "Spicy")

        result = process_bulk_upload(_document(tags=[{"Name": "Spicy"}]), restaurant.id)

        assert result.tags.errors == ['Tag "Spicy" already exists']


# ============================================================================
# Menu items
# ============================================================================


class TestMenuItemPass:
    def test_creates_item_with_parsed_fields(self, restaurant):
        process_bulk_upload(
            _document(
                categories=[{"Name": "Mains"}],
                tags=[{"Name": "Spicy"}],
                menu_items=[
                    {
                        "Name": "Chicken Tikka",
                        "Description": " Grilled ",
                        "Price": "399.999",
                        "Categories": "mains",
                        "Tags": "SPICY",
                        "Food Type": "Non-Veg",
                        "Is Spicy": "yes",
                        "Spicy Level": 2.0,
                        "Preparation Time": "25",
                        "Is Available": "false",
                        "Calories": 650,
                        "Protein": "35.5",
                        "Allergens": "dairy, ,nuts",
                    }
                ],
            ),
            restaurant.id,
        )

        item = menu_item_service.find_one("Chicken Tikka", restaurant.id)
        assert item.description == "Grilled"
        assert item.price == Decimal("400.00")
        assert item.food_type == "non-veg"
        assert item.is_spicy is True
        assert item.spicy_level == 2
        assert item.preparation_time == 25
        assert item.is_available is False
        assert item.calories == 650.0
        assert item.protein == 35.5
        assert item.carbs is None
        assert item.allergens == ["dairy", "nuts"]
        assert [cat.name for cat in item.categories] == ["Mains"]
        assert [tag.name for tag in item.tags] == ["Spicy"]

    def test_defaults_for_missing_cells(self, restaurant):
        process_bulk_upload(_document(menu_items=[{"Name": "Tea", "Price": 2}]), restaurant.id)

        item = menu_item_service.find_one("Tea", restaurant.id)
        assert item.description == ""
        assert item.food_type == "veg"
        assert item.is_spicy is False
        assert item.spicy_level == 0
        assert item.is_available is True
        assert item.preparation_time is None
        assert item.allergens == []
        assert item.categories == []

    def test_partial_reference_resolution(self, restaurant):
        """Unknown names are reported; the item keeps the resolved subset."""
        menu_category_service.create_category(restaurant.id, "Mains")

        result = process_bulk_upload(
            _document(
                menu_items=[
                    {"Name": "Biryani", "Price": 12, "Categories": "Mains, Specials", "Tags": "Hot"}
                ]
            ),
            restaurant.id,
        )

        assert result.menu_items.created == 1
        assert result.menu_items.errors == [
            'Menu Item "Biryani": Category "Specials" not found',
            'Menu Item "Biryani": Tag "Hot" not found',
        ]
        item = menu_item_service.find_one("Biryani", restaurant.id)
        assert [cat.name for cat in item.categories] == ["Mains"]
        assert item.tags == []

    def test_same_file_category_visible_to_items(self, restaurant):
        result = process_bulk_upload(
            _document(
                categories=[{"Name": "Desserts"}],
                menu_items=[{"Name": "Kulfi", "Price": 3, "Categories": "Desserts"}],
            ),
            restaurant.id,
        )

        assert result.total_errors == 0
        item = menu_item_service.find_one("Kulfi", restaurant.id)
        assert [cat.name for cat in item.categories] == ["Desserts"]

    def test_categories_of_other_restaurant_not_resolved(self, restaurant, other_restaurant):
        menu_category_service.create_category(other_restaurant.id, "Mains")

        result = process_bulk_upload(
            _document(menu_items=[{"Name": "Dal", "Price": 5, "Categories": "Mains"}]),
            restaurant.id,
        )

        assert result.menu_items.errors == ['Menu Item "Dal": Category "Mains" not found']

    def test_duplicate_item_skipped(self, restaurant):
        menu_item_service.create_menu_item(restaurant.id, {"name": "Tea", "price": 2})

        result = process_bulk_upload(
            _document(menu_items=[{"Name": "Tea", "Price": 3}]), restaurant.id
        )

        assert result.menu_items.errors == ['Menu Item "Tea" already exists']
        assert menu_item_service.find_one("Tea", restaurant.id).price == Decimal("2.00")

    def test_update_applies_fields_and_keeps_links_when_column_absent(self, restaurant):
        mains = menu_category_service.create_category(restaurant.id, "Mains")
        menu_item_service.create_menu_item(
            restaurant.id,
            {"name": "Dal", "price": 5, "is_spicy": True},
            category_ids=[mains.id],
        )

        result = process_bulk_upload(
            _document(menu_items=[{"Name": "Dal", "Price": 6.5}]),
            restaurant.id,
            update_existing=True,
        )

        assert result.menu_items.updated == 1
        item = menu_item_service.find_one("Dal", restaurant.id)
        assert item.price == Decimal("6.50")
        assert item.is_spicy is False
        assert [cat.name for cat in item.categories] == ["Mains"]

    def test_update_replaces_links_when_column_present(self, restaurant):
        mains = menu_category_service.create_category(restaurant.id, "Mains")
        menu_category_service.create_category(restaurant.id, "Sides")
        menu_item_service.create_menu_item(
            restaurant.id, {"name": "Dal", "price": 5}, category_ids=[mains.id]
        )

        process_bulk_upload(
            _document(menu_items=[{"Name": "Dal", "Price": 5, "Categories": "Sides"}]),
            restaurant.id,
            update_existing=True,
        )

        item = menu_item_service.find_one("Dal", restaurant.id)
        assert [cat.name for cat in item.categories] == ["Sides"]

    def test_store_rejection_recorded_per_record(self, restaurant):
        """A price that rounds to zero passes structure but fails the store."""
        result = process_bulk_upload(
            _document(
                menu_items=[{"Name": "Mint", "Price": "0.001"}, {"Name": "Tea", "Price": 2}]
            ),
            restaurant.id,
        )

        assert result.menu_items.created == 1
        assert result.menu_items.errors == ['Menu Item "Mint": Price must be greater than 0']
        assert menu_item_service.find_one("Mint", restaurant.id) is None


# ============================================================================
# Batch-level properties
# ============================================================================


class TestBatchProperties:
    def test_example_scenario(self, restaurant):
        result = process_bulk_upload(
            _document(
                categories=[{"Name": "Starters", "Sort Order": 1}],
                tags=[{"Name": "Spicy", "Color": "#FF0000"}],
                menu_items=[
                    {"Name": "Samosa", "Price": 4.5, "Categories": "Starters", "Tags": "Spicy"}
                ],
            ),
            restaurant.id,
        )

        assert result.to_dict()["summary"] == {
            "totalCreated": 3,
            "totalUpdated": 0,
            "totalErrors": 0,
        }

    def test_duplicate_in_same_file_reports_one_error(self, restaurant):
        result = process_bulk_upload(
            _document(categories=[{"Name": "Starters"}, {"Name": "Starters"}]), restaurant.id
        )

        assert result.categories.created == 1
        assert result.categories.errors == ['Category "Starters" already exists']

    def test_total_errors_equals_sum_of_sections(self, restaurant):
        menu_category_service.create_category(restaurant.id, "Starters")
        tag_service.create_tag(restaurant.id, "Spicy")

        result = process_bulk_upload(
            _document(
                categories=[{"Name": "Starters"}],
                tags=[{"Name": "Spicy"}],
                menu_items=[{"Name": "Dal", "Price": 5, "Categories": "Nope"}],
            ),
            restaurant.id,
        )

        summary = result.to_dict()
        assert summary["summary"]["totalErrors"] == sum(
            len(detail["errors"]) for detail in summary["details"].values()
        )
        assert result.total_errors == 3

    def test_template_reupload_is_idempotent(self, restaurant, make_xlsx):
        run_bulk_upload(
            make_xlsx(
                {
                    c.SECTION_CATEGORIES: [["Starters", 1]],
                    c.SECTION_TAGS: [["Spicy", "#FF0000"]],
                    c.SECTION_MENU_ITEMS: [
                        ["Samosa", "Crispy", 4.5, "Starters", "Spicy", "veg", False, 0, 10, True,
                         120, 3, 15, 6, "wheat"]
                    ],
                }
            ),
            "menu.xlsx",
            None,
            restaurant.id,
        )

        result = run_bulk_upload(
            generate_template(restaurant.id), "template.xlsx", None, restaurant.id, True
        )

        assert result.total_created == 0
        assert result.total_updated == 3
        assert result.total_errors == 0


class TestRunBulkUpload:
    def test_structural_errors_block_all_writes(self, restaurant, make_xlsx):
        content = make_xlsx(
            {
                c.SECTION_CATEGORIES: [["Starters", 1]],
                c.SECTION_MENU_ITEMS: [["Samosa", "", "abc"]],
            }
        )

        with pytest.raises(StructuralValidationError) as exc_info:
            run_bulk_upload(content, "menu.xlsx", None, restaurant.id)

        assert exc_info.value.errors == ["Menu Item 1: Price must be a positive number"]
        assert menu_category_service.find_by_restaurant(restaurant.id) == []

    def test_oversized_integers_rejected_before_writes(self, restaurant, make_csv):
        content = make_csv(
            ["Section", "Name", "Sort Order", "Price", "Preparation Time"],
            [
                ["Categories", "Starters", "99999999999999999999", "", ""],
                ["Menu Items", "Soup", "", "5", "1e50000000"],
            ],
        )

        with pytest.raises(StructuralValidationError) as exc_info:
            run_bulk_upload(content, "menu.csv", "text/csv", restaurant.id)

        assert exc_info.value.errors == [
            "Category 1: Sort Order must be a non-negative integer",
            "Menu Item 1: Preparation Time must be a non-negative integer",
        ]
        assert menu_category_service.find_by_restaurant(restaurant.id) == []

    def test_bad_file_raises_before_reconcile(self, restaurant, monkeypatch):
        def fail(*args, **kwargs):
            raise AssertionError("reconciler must not run")

        monkeypatch.setattr(bulk_upload_service, "process_bulk_upload", fail)

        with pytest.raises(FileFormatError):
            run_bulk_upload(b"garbage", "menu.xlsx", None, restaurant.id)

    def test_csv_upload(self, restaurant, make_csv):
        content = make_csv(["Name", "Sort Order"], [["Starters", "1"], ["Mains", "2"]])

        result = run_bulk_upload(content, "categories.csv", "text/csv", restaurant.id)

        assert result.categories.created == 2
