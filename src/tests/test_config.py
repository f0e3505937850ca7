"""Tests for configuration loading from the environment."""

from src.utils.config import Config, get_config, reset_config
from src.utils.constants import DEFAULT_MAX_UPLOAD_BYTES


class TestConfig:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("MENU_IMPORT_DATABASE_URL", raising=False)
        monkeypatch.delenv("MENU_IMPORT_LOG_LEVEL", raising=False)

        config = Config("production")

        assert config.max_upload_bytes == DEFAULT_MAX_UPLOAD_BYTES
        assert config.log_level == "INFO"
        assert config.database_url.startswith("sqlite:///")
        assert config.database_url.endswith("menu_import.db")

    def test_development_logs_debug_in_project_data_dir(self, monkeypatch):
        monkeypatch.delenv("MENU_IMPORT_LOG_LEVEL", raising=False)

        config = Config("development")

        assert config.is_development
        assert config.log_level == "DEBUG"
        assert config.database_path.parent.name == "data"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("MENU_IMPORT_DATABASE_URL", "sqlite:///:memory:")
        monkeypatch.setenv("MENU_IMPORT_MAX_FILE_SIZE", "2048")
        monkeypatch.setenv("MENU_IMPORT_LOG_LEVEL", "warning")

        config = Config("production")

        assert config.database_url == "sqlite:///:memory:"
        assert config.database_exists()
        assert config.max_upload_bytes == 2048
        assert config.log_level == "WARNING"

    def test_non_integer_size_falls_back(self, monkeypatch):
        monkeypatch.setenv("MENU_IMPORT_MAX_FILE_SIZE", "ten megabytes")
        assert Config("production").max_upload_bytes == DEFAULT_MAX_UPLOAD_BYTES

    def test_singleton_reads_env_mode(self, monkeypatch):
        monkeypatch.setenv("MENU_IMPORT_ENV", "development")
        reset_config()
        assert get_config().is_development
        assert get_config() is get_config()
