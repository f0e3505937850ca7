"""Services package - Business logic layer for Menu Bulk Import.

This package contains all service modules that provide business logic
and database operations for the application.

Architecture:
- Services: Stateless functions organized by domain (restaurant, category, tag, menu item)
- Transactions: Managed via session_scope() context manager
- Exceptions: Consistent error handling via ServiceError hierarchy
- Validation: Input validation before database operations

Service Modules:
- restaurant_service: Tenant lookup and creation
- menu_category_service: Menu category store operations
- tag_service: Tag store operations with slug generation
- menu_item_service: Menu item store operations
- spreadsheet_adapter_service: XLSX/CSV bytes to typed upload rows
- bulk_validation_service: Structural checks before persistence
- bulk_upload_service: Dependency-ordered reconciliation and result aggregation
- menu_template_service: XLSX upload template generation

Infrastructure:
- exceptions: Custom exception classes for service layer errors
- database: Session management and database utilities
- logging_utils: Structured operation logging
"""

# Service modules
from . import (
    database,
    restaurant_service,
    menu_item_service,
    menu_category_service,
    tag_service,
    spreadsheet_adapter_service,
    bulk_validation_service,
    bulk_upload_service,
    menu_template_service,
)
