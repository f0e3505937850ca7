"""
Configuration management for the Menu Bulk Import service.

This module handles:
- Database location (file path or explicit URL)
- Environment-specific configuration (development vs. production)
- Upload limits, logging level and server address
"""

import logging
import os
from pathlib import Path
from typing import Optional

from .constants import (
    APP_NAME,
    APP_VERSION,
    DATABASE_FILENAME,
    DATABASE_VERSION,
    DEFAULT_MAX_UPLOAD_BYTES,
)

ENV_ENVIRONMENT = "MENU_IMPORT_ENV"
ENV_DATABASE_URL = "MENU_IMPORT_DATABASE_URL"
ENV_MAX_FILE_SIZE = "MENU_IMPORT_MAX_FILE_SIZE"
ENV_LOG_LEVEL = "MENU_IMPORT_LOG_LEVEL"
ENV_HOST = "MENU_IMPORT_HOST"
ENV_PORT = "MENU_IMPORT_PORT"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


class Config:
    """
    Application configuration manager.

    Handles database location, upload limits and logging settings. Values
    come from the environment, falling back to defaults per environment mode.
    """

    def __init__(self, environment: str = "production"):
        """
        Initialize configuration.

        Args:
            environment: Environment mode - 'production' or 'development'
        """
        self.environment = environment
        self._app_name = APP_NAME
        self._app_version = APP_VERSION
        self._database_version = DATABASE_VERSION

        if environment == "development":
            # Use project data/ directory for development
            self._base_dir = self._get_project_data_dir()
        else:
            self._base_dir = self._get_user_data_dir()

        self._database_dir = self._base_dir
        self._database_path = self._database_dir / DATABASE_FILENAME
        self._database_url_override = os.environ.get(ENV_DATABASE_URL)

        self._max_upload_bytes = self._read_int(ENV_MAX_FILE_SIZE, DEFAULT_MAX_UPLOAD_BYTES)
        self._log_level = os.environ.get(
            ENV_LOG_LEVEL, "DEBUG" if environment == "development" else "INFO"
        ).upper()
        self._host = os.environ.get(ENV_HOST, DEFAULT_HOST)
        self._port = self._read_int(ENV_PORT, DEFAULT_PORT)

    def _get_project_data_dir(self) -> Path:
        """
        Get the project's data directory for development.

        Returns:
            Path to project data/ directory
        """
        project_root = Path(__file__).parent.parent.parent
        return project_root / "data"

    def _get_user_data_dir(self) -> Path:
        """
        Get the per-user data directory for production.

        Returns:
            Path to ~/.menu_import
        """
        return Path.home() / ".menu_import"

    @staticmethod
    def _read_int(name: str, default: int) -> int:
        raw = os.environ.get(name)
        if raw is None or not raw.strip():
            return default
        try:
            return int(raw)
        except ValueError:
            logging.getLogger(__name__).warning(
                f"Ignoring non-integer {name}={raw!r}; using {default}"
            )
            return default

    def ensure_directories(self):
        """Create the database directory if it doesn't exist."""
        self._database_dir.mkdir(parents=True, exist_ok=True)

    @property
    def app_name(self) -> str:
        """Application name."""
        return self._app_name

    @property
    def app_version(self) -> str:
        """Application version."""
        return self._app_version

    @property
    def database_version(self) -> str:
        """Database schema version."""
        return self._database_version

    @property
    def database_path(self) -> Path:
        """Full path to the database file."""
        return self._database_path

    @property
    def database_url(self) -> str:
        """
        SQLAlchemy database URL.

        Returns:
            MENU_IMPORT_DATABASE_URL if set, otherwise a SQLite URL for database_path
        """
        if self._database_url_override:
            return self._database_url_override
        # Use forward slashes for SQLite URL
        db_path_str = str(self._database_path).replace("\\", "/")
        return f"sqlite:///{db_path_str}"

    @property
    def max_upload_bytes(self) -> int:
        """Largest accepted bulk upload file, in bytes."""
        return self._max_upload_bytes

    @property
    def log_level(self) -> str:
        """Root logging level name."""
        return self._log_level

    @property
    def host(self) -> str:
        """Interface the API server binds to."""
        return self._host

    @property
    def port(self) -> int:
        """Port the API server listens on."""
        return self._port

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    def database_exists(self) -> bool:
        """
        Check if database file exists.

        Returns:
            True if database file exists (always True for an explicit URL)
        """
        if self._database_url_override:
            return True
        return self._database_path.exists()

    def __repr__(self) -> str:
        """String representation of config."""
        return f"Config(environment='{self.environment}', database_url='{self.database_url}')"


# Global configuration instance
_config_instance: Optional[Config] = None


def get_config(environment: Optional[str] = None) -> Config:
    """
    Get the global configuration instance.

    Once created, the singleton's environment cannot be changed by passing
    a different environment argument.

    Args:
        environment: Optional environment for initial creation. If None, uses
                    MENU_IMPORT_ENV or defaults to production. Ignored if
                    singleton already exists.

    Returns:
        Config instance
    """
    global _config_instance

    if _config_instance is None:
        if environment is None:
            environment = os.environ.get(ENV_ENVIRONMENT, "production")
        _config_instance = Config(environment)
    elif environment is not None and environment != _config_instance.environment:
        logging.getLogger(__name__).warning(
            f"get_config() called with environment='{environment}' but singleton "
            f"already exists with environment='{_config_instance.environment}'. "
            f"Returning existing singleton."
        )

    return _config_instance


def reset_config():
    """
    Reset the global configuration instance.

    Useful for testing.
    """
    global _config_instance
    _config_instance = None


def get_database_url() -> str:
    """
    Get the database URL.

    Returns:
        SQLAlchemy database URL string
    """
    return get_config().database_url
