"""Service layer exception classes for the menu import service.

This module defines all custom exceptions used by the service layer to provide
consistent error handling across the application. Each exception carries the
HTTP status the API layer answers with.

Exception Hierarchy:
    ServiceError (base)
    ├── FileFormatError
    │   └── UnknownSectionError
    ├── StructuralValidationError
    ├── ValidationError
    ├── RestaurantContextRequired
    ├── RestaurantNotFound
    ├── MenuCategoryNotFound
    ├── TagNotFound
    └── MenuItemNotFound
"""

from typing import List


class ServiceError(Exception):
    """Base exception for all service layer errors.

    All service-specific exceptions inherit from this class.

    HTTP Status: 500 Internal Server Error (unless overridden)
    """

    http_status_code = 500


class FileFormatError(ServiceError):
    """Raised when an uploaded file cannot be read as a spreadsheet.

    Covers corrupt or unparsable bytes, unsupported file types and
    oversized uploads. No records are examined.

    Example:
        >>> raise FileFormatError("Unsupported file type: menu.xls")
        FileFormatError: Unsupported file type: menu.xls

    HTTP Status: 400 Bad Request
    """

    http_status_code = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UnknownSectionError(FileFormatError):
    """Raised when CSV rows cannot be assigned to a section unambiguously.

    Args:
        detail: What could not be routed (header set or Section value)

    Example:
        >>> raise UnknownSectionError("Section value 'Drinks' on row 4")
        UnknownSectionError: Cannot determine upload section: Section value 'Drinks' on row 4
    """

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Cannot determine upload section: {detail}")


class StructuralValidationError(ServiceError):
    """Raised when field-level rules reject an upload before persistence.

    Args:
        errors: Every violation found, e.g. "Menu Item 3: Price must be a positive number"

    HTTP Status: 400 Bad Request
    """

    http_status_code = 400

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__(f"Invalid data structure: {len(errors)} error(s)")


class ValidationError(ServiceError):
    """Raised when data validation fails in a store service.

    HTTP Status: 400 Bad Request
    """

    http_status_code = 400

    def __init__(self, errors: list):
        self.errors = errors
        error_msg = "; ".join(errors)
        super().__init__(f"Validation failed: {error_msg}")


class RestaurantContextRequired(ServiceError):
    """Raised when a request does not identify its restaurant.

    HTTP Status: 401 Unauthorized
    """

    http_status_code = 401

    def __init__(self, message: str = "Restaurant context required"):
        super().__init__(message)


class RestaurantNotFound(ServiceError):
    """Raised when a restaurant cannot be found or is inactive.

    Example:
        >>> raise RestaurantNotFound(42)
        RestaurantNotFound: Restaurant with ID 42 not found

    HTTP Status: 404 Not Found
    """

    http_status_code = 404

    def __init__(self, restaurant_id: int):
        self.restaurant_id = restaurant_id
        super().__init__(f"Restaurant with ID {restaurant_id} not found")


class MenuCategoryNotFound(ServiceError):
    """Raised when a menu category cannot be found by ID.

    HTTP Status: 404 Not Found
    """

    http_status_code = 404

    def __init__(self, category_id: int):
        self.category_id = category_id
        super().__init__(f"Category with ID {category_id} not found")


class TagNotFound(ServiceError):
    """Raised when a tag cannot be found by ID.

    HTTP Status: 404 Not Found
    """

    http_status_code = 404

    def __init__(self, tag_id: int):
        self.tag_id = tag_id
        super().__init__(f"Tag with ID {tag_id} not found")


class MenuItemNotFound(ServiceError):
    """Raised when a menu item cannot be found by ID.

    HTTP Status: 404 Not Found
    """

    http_status_code = 404

    def __init__(self, menu_item_id: int):
        self.menu_item_id = menu_item_id
        super().__init__(f"Menu item with ID {menu_item_id} not found")
