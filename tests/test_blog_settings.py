"""Tests for quire.blog.settings — environment configuration."""

import logging

import pytest

from quire.blog.settings import MIGRATIONS_DIR, PUBLIC_DIR, TEMPLATES_DIR, load_config
from quire.errors import ConfigurationError


class TestLoadConfig:
    def test_defaults(self) -> None:
        settings = load_config({"QUIRE_SECRET_KEY": "s3cret"})
        assert settings.app.host == "127.0.0.1"
        assert settings.app.port == 3000
        assert settings.app.debug is False
        assert settings.app.secret_key == "s3cret"
        assert settings.app.log_level == "info"
        assert settings.database_url == "sqlite:///blog.db"

    def test_bundled_directories(self) -> None:
        settings = load_config({"QUIRE_SECRET_KEY": "s3cret"})
        assert settings.app.template_dir == TEMPLATES_DIR
        assert settings.app.static_dir == PUBLIC_DIR
        assert settings.migrations_dir == MIGRATIONS_DIR
        assert (TEMPLATES_DIR / "layouts" / "app.html").is_file()
        assert (MIGRATIONS_DIR / "001_create_users.sql").is_file()

    def test_overrides(self) -> None:
        settings = load_config(
            {
                "QUIRE_HOST": "0.0.0.0",
                "QUIRE_PORT": "8080",
                "QUIRE_DEBUG": "true",
                "QUIRE_SECRET_KEY": "s3cret",
                "QUIRE_DATABASE_URL": "sqlite:///:memory:",
                "QUIRE_LOG_LEVEL": "DEBUG",
            }
        )
        assert settings.app.host == "0.0.0.0"
        assert settings.app.port == 8080
        assert settings.app.debug is True
        assert settings.app.log_level == "debug"
        assert settings.database_url == "sqlite:///:memory:"

    @pytest.mark.parametrize("value", ["0", "false", "no", ""])
    def test_debug_falsy(self, value: str) -> None:
        assert load_config({"QUIRE_DEBUG": value, "QUIRE_SECRET_KEY": "x"}).app.debug is False

    def test_bad_port(self) -> None:
        with pytest.raises(ConfigurationError, match="QUIRE_PORT"):
            load_config({"QUIRE_PORT": "eighty"})

    def test_missing_secret_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="quire.blog"):
            settings = load_config({})
        assert settings.app.secret_key
        assert "QUIRE_SECRET_KEY" in caplog.text
