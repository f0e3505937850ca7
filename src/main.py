"""
Main entry point for the Menu Bulk Import service.

This module initializes logging and the database, then serves the API
with uvicorn.
"""

import logging
import sys
import traceback

import uvicorn

from src.api import create_app
from src.services.database import close_connections, initialize_app_database
from src.utils.config import get_config
from src.utils.logging_config import configure_logging

logger = logging.getLogger(__name__)


def initialize_application() -> bool:
    """
    Initialize the application.

    Sets up the database and performs any necessary startup checks.

    Returns:
        True if initialization successful, False otherwise
    """
    try:
        initialize_app_database()
        return True
    except Exception as e:
        logger.error(f"Failed to initialize application: {e}")
        traceback.print_exc()
        return False


def main():
    """
    Main application entry point.

    Initializes the application and serves the API until interrupted.
    """
    configure_logging()

    config = get_config()
    logger.info(f"Starting {config.app_name} v{config.app_version}")
    logger.info(f"Environment: {config.environment}")

    if not initialize_application():
        logger.error("Application initialization failed. Exiting.")
        sys.exit(1)

    try:
        uvicorn.run(create_app(), host=config.host, port=config.port, log_config=None)
    finally:
        close_connections()

    logger.info("Server stopped")


if __name__ == "__main__":
    main()
