"""Service layer logging utilities.

Provides structured logging functions for service operations, enabling
consistent log format and context across the import pipeline.

Usage:
    from src.services.logging_utils import get_service_logger, log_operation

    logger = get_service_logger(__name__)

    log_operation(
        logger,
        operation="reconcile_categories",
        outcome="success",
        restaurant_id=7,
        created_count=3,
        updated_count=1,
    )
"""

import logging
from typing import Any


def get_service_logger(name: str) -> logging.Logger:
    """
    Get a logger configured for service operations.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Logger under the 'menu_import.services' prefix.

    Example:
        >>> logger = get_service_logger(__name__)
        >>> logger.name
        'menu_import.services.bulk_upload_service'
    """
    if "." in name:
        name = name.split(".")[-1]
    return logging.getLogger(f"menu_import.services.{name}")


def log_operation(
    logger: logging.Logger,
    operation: str,
    outcome: str,
    level: int = logging.INFO,
    **context: Any,
) -> None:
    """
    Log a service operation with structured context.

    The context is passed via the 'extra' parameter for structured logging.

    Args:
        logger: Logger instance to use
        operation: Operation name (e.g., "bulk_upload", "reconcile_tags")
        outcome: Outcome description (e.g., "success", "rejected", "partial")
        level: Log level (default: INFO). Use DEBUG for per-record logs.
        **context: Additional context fields
            Common fields:
            - restaurant_id: Tenant being processed
            - section: "categories", "tags" or "menuItems"
            - created_count / updated_count / error_count: Section counters
            (never "created" or "name", which LogRecord reserves)
            - error: Error message if outcome is "error"
    """
    extra = {
        "operation": operation,
        "outcome": outcome,
        **context,
    }
    logger.log(level, f"{operation}: {outcome}", extra=extra)
