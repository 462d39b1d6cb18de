"""
Tests for configuration validation.

Ensures environment variables are validated at startup.
"""

import pytest
from pydantic import ValidationError

from ftp_user_svc.core.config import Settings


class TestDatabaseURL:
    """Test DBCON / DATABASE_URL handling."""

    def test_dbcon_variable(self, monkeypatch):
        """Test the historical DBCON variable is read."""
        monkeypatch.setenv("DBCON", "postgres://ftpsvc:svcpass@db:5432/ftpusers")

        settings = Settings()
        assert settings.database_url == "postgres://ftpsvc:svcpass@db:5432/ftpusers"

    def test_database_url_variable(self, monkeypatch):
        """Test DATABASE_URL is accepted when DBCON is absent."""
        monkeypatch.delenv("DBCON", raising=False)
        monkeypatch.setenv("DATABASE_URL", "mysql://u:p@db:3306/ftpusers")

        settings = Settings()
        assert settings.database_url == "mysql://u:p@db:3306/ftpusers"

    def test_driver_suffix_allowed(self, monkeypatch):
        monkeypatch.setenv("DBCON", "mysql+pymysql://u:p@db:3306/ftpusers")

        settings = Settings()
        assert settings.database_url == "mysql+pymysql://u:p@db:3306/ftpusers"

    def test_empty(self, monkeypatch):
        """Test DBCON cannot be empty."""
        monkeypatch.setenv("DBCON", "")

        with pytest.raises(ValidationError) as exc_info:
            Settings()

        assert "cannot be empty" in str(exc_info.value)

    def test_missing_protocol(self, monkeypatch):
        monkeypatch.setenv("DBCON", "host=db user=ftpsvc")

        with pytest.raises(ValidationError) as exc_info:
            Settings()

        assert "must specify a protocol" in str(exc_info.value)

    def test_unsupported_protocol(self, monkeypatch):
        """Test only MySQL and PostgreSQL are accepted."""
        monkeypatch.setenv("DBCON", "sqlite:///tmp/ftp.db")

        with pytest.raises(ValidationError) as exc_info:
            Settings()

        error_msg = str(exc_info.value)
        assert "mysql" in error_msg
        assert "Got: sqlite" in error_msg


class TestLoggingSettings:
    """Test LOG_LEVEL and LOG_JSON."""

    def test_level_is_uppercased(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "warning")

        assert Settings().log_level == "WARNING"

    def test_invalid_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "CHATTY")

        with pytest.raises(ValidationError) as exc_info:
            Settings()

        assert "LOG_LEVEL must be a standard logging level" in str(exc_info.value)

    def test_json_flag(self, monkeypatch):
        monkeypatch.setenv("LOG_JSON", "true")

        assert Settings().log_json is True

    def test_create_schema_default_off(self, monkeypatch):
        monkeypatch.delenv("CREATE_SCHEMA", raising=False)

        assert Settings().create_schema is False


class TestLoginSystem:
    """Test LOGIN_SYSTEM."""

    def test_default(self, monkeypatch):
        monkeypatch.delenv("LOGIN_SYSTEM", raising=False)

        assert Settings().login_system == "BillSys1"

    def test_override(self, monkeypatch):
        monkeypatch.setenv("LOGIN_SYSTEM", "BillSys2")

        assert Settings().login_system == "BillSys2"
