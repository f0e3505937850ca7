"""Root logging setup for the service process."""

import logging
from typing import Optional

from .config import get_config

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging once for the process.

    Args:
        level: Level name override. If None, uses the configured log level.
    """
    level_name = (level or get_config().log_level).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)
    # SQL echo is controlled by the engine, keep the library logger quiet
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
