"""Timezone-aware UTC timestamps for model columns.

Usage:
    from src.utils.datetime_utils import utc_now

    created_at = Column(DateTime, default=utc_now)
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)
