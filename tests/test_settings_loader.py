from __future__ import annotations

import logging

import pytest

from config import settings_loader
from config.logging_config import configure_logging

ENV_KEYS = (
    "DB_HOST", "DB_PORT", "DB_USER", "DB_PASSWORD", "DB_NAME", "POOL_NAME", "POOL_SIZE",
    "API_HOST", "API_PORT", "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(settings_loader, "load_dotenv", lambda *args, **kwargs: False)


def test_database_defaults():
    config = settings_loader.load_settings()

    assert config.host == "localhost"
    assert config.port == 3306
    assert config.database == "fleet_office"
    assert config.pool_name == "fleet_pool"
    assert config.pool_size == 5


def test_database_from_environment(monkeypatch):
    monkeypatch.setenv("DB_HOST", "db.internal")
    monkeypatch.setenv("DB_PORT", "3307")
    monkeypatch.setenv("DB_PASSWORD", "secret")
    monkeypatch.setenv("POOL_SIZE", "10")

    config = settings_loader.load_settings()

    assert config.host == "db.internal"
    assert config.port == 3307
    assert config.password == "secret"
    assert config.pool_size == 10


def test_app_settings(monkeypatch):
    monkeypatch.setenv("API_PORT", "9000")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = settings_loader.load_app_settings()

    assert settings.api_host == "127.0.0.1"
    assert settings.api_port == 9000
    assert settings.log_level == "DEBUG"


def test_mysql_connector_logger_stays_quiet():
    configure_logging("DEBUG")

    assert logging.getLogger("mysql.connector").level == logging.WARNING
