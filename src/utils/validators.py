"""
Input validation and cell parsing functions for the menu import service.

This module provides:
- String validation (required, length, hex color)
- Strict parsers for spreadsheet cell values (numbers, integers, booleans)

Cells arrive as whatever the reader produced: openpyxl yields int, float,
bool and str; the CSV reader yields str only. Parsers return None when a
value cannot be interpreted instead of guessing a default.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional, Tuple

from .constants import FALSE_VALUES, MAX_NUMBER_DIGITS, TRUE_VALUES

HEX_COLOR_PATTERN = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")


# ============================================================================
# String Validation
# ============================================================================


def validate_required_string(value: Optional[str], field_name: str = "Field") -> Tuple[bool, str]:
    """
    Validate that a string field is not empty.

    Args:
        value: The string value to validate
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message)
    """
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return False, f"{field_name} is required"
    return True, ""


def validate_string_length(
    value: Optional[str], max_length: int, field_name: str = "Field"
) -> Tuple[bool, str]:
    """
    Validate that a string doesn't exceed maximum length.

    Args:
        value: The string value to validate
        max_length: Maximum allowed length
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message)
    """
    if value and len(value) > max_length:
        return False, f"{field_name} cannot exceed {max_length} characters"
    return True, ""


def is_hex_color(value: Any) -> bool:
    """Check if value is a "#RRGGBB" or "#RGB" color string."""
    return isinstance(value, str) and bool(HEX_COLOR_PATTERN.match(value.strip()))


# ============================================================================
# Cell Parsing
# ============================================================================


def is_blank(value: Any) -> bool:
    """Check if a cell value is missing or whitespace-only."""
    if value is None:
        return True
    return isinstance(value, str) and value.strip() == ""


def cell_to_text(value: Any) -> str:
    """
    Render a cell value as trimmed text.

    Whole floats lose their ".0" so a numeric name cell like 101 reads "101".

    Args:
        value: Raw cell value

    Returns:
        Trimmed string ("" for None)
    """
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def parse_number(value: Any) -> Optional[Decimal]:
    """
    Parse a cell value as a finite decimal number.

    Values with more than MAX_NUMBER_DIGITS integer digits are rejected, so
    exponent forms such as "1e50000000" never expand into huge integers.

    Args:
        value: Raw cell value

    Returns:
        Decimal value, or None if blank, boolean, out of range or not a number
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        text = repr(value)
    elif isinstance(value, Decimal):
        text = str(value)
    elif isinstance(value, str):
        text = value.strip()
    else:
        return None

    if not text:
        return None

    try:
        number = Decimal(text)
    except (InvalidOperation, ValueError):
        return None

    if not number.is_finite():
        return None
    if number.adjusted() >= MAX_NUMBER_DIGITS:
        return None
    return number


def parse_int(value: Any) -> Optional[int]:
    """
    Parse a cell value as a whole number.

    Accepts 3, 3.0 and "3"; rejects "3.5".

    Args:
        value: Raw cell value

    Returns:
        Integer value, or None if blank or not a whole number
    """
    number = parse_number(value)
    if number is None or number != number.to_integral_value():
        return None
    return int(number)


def parse_bool(value: Any) -> Optional[bool]:
    """
    Parse a boolean-ish cell value.

    Args:
        value: Raw cell value (True/False, 1/0, "yes"/"no", "true"/"false")

    Returns:
        Boolean value, or None if blank or not recognizable
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        if value in (0, 1):
            return bool(value)
        return None
    if isinstance(value, str):
        text = value.strip().lower()
        if text in TRUE_VALUES:
            return True
        if text in FALSE_VALUES:
            return False
    return None


def split_name_list(value: Any) -> List[str]:
    """
    Split a comma-separated cell into trimmed, non-empty names.

    Args:
        value: Raw cell value such as "Starters, Mains"

    Returns:
        List of names in their original order
    """
    text = cell_to_text(value)
    if not text:
        return []
    return [part.strip() for part in text.split(",") if part.strip()]
