"""Tests for cell parsing and string validation helpers."""

from decimal import Decimal

import pytest

from src.utils.validators import (
    cell_to_text,
    is_blank,
    is_hex_color,
    parse_bool,
    parse_int,
    parse_number,
    split_name_list,
    validate_required_string,
    validate_string_length,
)


class TestStringValidation:
    def test_required_string_rejects_whitespace(self):
        assert validate_required_string("   ", "Name") == (False, "Name is required")

    def test_required_string_accepts_text(self):
        assert validate_required_string("Soup", "Name") == (True, "")

    def test_length_limit_message(self):
        ok, message = validate_string_length("x" * 31, 30, "Name")
        assert not ok
        assert message == "Name cannot exceed 30 characters"

    @pytest.mark.parametrize("color", ["#FF4444", "#abc", " #3B82F6 "])
    def test_hex_colors_accepted(self, color):
        assert is_hex_color(color)

    @pytest.mark.parametrize("color", ["red", "#GG0000", "#1234", "FF4444", 123])
    def test_non_hex_colors_rejected(self, color):
        assert not is_hex_color(color)


class TestCellText:
    def test_blank_values(self):
        assert is_blank(None)
        assert is_blank("  ")
        assert not is_blank(0)
        assert not is_blank(False)

    def test_whole_float_drops_fraction(self):
        assert cell_to_text(101.0) == "101"
        assert cell_to_text(2.5) == "2.5"


class TestParseNumber:
    def test_parses_numeric_text(self):
        assert parse_number(" 12.50 ") == Decimal("12.50")

    def test_parses_float_cell(self):
        assert parse_number(299.99) == Decimal("299.99")

    @pytest.mark.parametrize("value", ["abc", "", None, True, "nan", "inf"])
    def test_rejects_non_numbers(self, value):
        assert parse_number(value) is None

    def test_rejects_huge_exponent(self):
        assert parse_number("1e50000000") is None

    def test_accepts_largest_allowed_magnitude(self):
        assert parse_number("999999999999999") == Decimal("999999999999999")
        assert parse_number("1000000000000000") is None


class TestParseInt:
    def test_whole_float_is_int(self):
        assert parse_int(3.0) == 3

    def test_numeric_text(self):
        assert parse_int("20") == 20

    def test_fraction_rejected(self):
        assert parse_int("3.5") is None

    def test_small_exponent_form(self):
        assert parse_int("1e3") == 1000

    @pytest.mark.parametrize("value", ["1e50000000", "99999999999999999999", 10**20, 1e300])
    def test_too_many_digits_rejected(self, value):
        assert parse_int(value) is None


class TestParseBool:
    @pytest.mark.parametrize("value", [True, 1, "true", "TRUE", "yes", "Y", "1"])
    def test_true_values(self, value):
        assert parse_bool(value) is True

    @pytest.mark.parametrize("value", [False, 0, "false", "No", "n", "0"])
    def test_false_values(self, value):
        assert parse_bool(value) is False

    @pytest.mark.parametrize("value", ["maybe", 2, None, ""])
    def test_unrecognized_values(self, value):
        assert parse_bool(value) is None


class TestSplitNameList:
    def test_trims_and_drops_empty_names(self):
        assert split_name_list(" Starters, ,Mains ,") == ["Starters", "Mains"]

    def test_blank_cell(self):
        assert split_name_list(None) == []
