"""Tests for environment-driven configuration."""

import pytest

from phonebook.config import (
    ADAPTER_MYSQL,
    ADAPTER_SQLITE,
    DatabaseConfig,
    load_database_config,
    load_settings,
)


def test_defaults():
    config = load_database_config({})
    assert config.adapter == ADAPTER_SQLITE
    assert config.sqlite_path == "./phonebook.db"
    assert config.local_storage_path is None
    assert config.mysql.host == "localhost"
    assert config.mysql.port == 3306
    assert config.mysql.user == "phonebook_user"
    assert config.mysql.password == "phonebook_pass"
    assert config.mysql.database == "phonebook"
    assert config.mysql.pool_size == 10


def test_environment_overrides():
    config = load_database_config(
        {
            "DB_ADAPTER": "MySQL",
            "SQLITE_PATH": "/tmp/other.db",
            "LOCAL_STORAGE_PATH": "/tmp/storage.json",
            "MYSQL_HOST": "db.internal",
            "MYSQL_PORT": "3307",
            "MYSQL_USER": "admin",
            "MYSQL_PASSWORD": "secret",
            "MYSQL_DATABASE": "contacts",
            "MYSQL_POOL_SIZE": "4",
        }
    )
    assert config.adapter == ADAPTER_MYSQL
    assert config.sqlite_path == "/tmp/other.db"
    assert config.local_storage_path == "/tmp/storage.json"
    assert config.mysql.host == "db.internal"
    assert config.mysql.port == 3307
    assert config.mysql.user == "admin"
    assert config.mysql.password == "secret"
    assert config.mysql.database == "contacts"
    assert config.mysql.pool_size == 4


def test_empty_values_fall_back_to_defaults():
    config = load_database_config({"DB_ADAPTER": "", "MYSQL_PORT": ""})
    assert config.adapter == ADAPTER_SQLITE
    assert config.mysql.port == 3306


def test_unknown_adapter_rejected():
    with pytest.raises(ValueError, match="Unsupported database adapter"):
        load_database_config({"DB_ADAPTER": "postgres"})
    with pytest.raises(ValueError):
        DatabaseConfig(adapter="mongodb")


def test_non_integer_port_rejected():
    with pytest.raises(ValueError, match="MYSQL_PORT"):
        load_database_config({"MYSQL_PORT": "abc"})


@pytest.mark.parametrize("size", ["0", "-3"])
def test_pool_size_below_one_rejected(size):
    with pytest.raises(ValueError, match="MYSQL_POOL_SIZE"):
        load_database_config({"MYSQL_POOL_SIZE": size})


def test_reads_os_environ_by_default(monkeypatch):
    monkeypatch.setenv("DB_ADAPTER", "localstorage")
    monkeypatch.setenv("PHONE_DEFAULT_REGION", "it")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    settings = load_settings()
    assert settings.database.adapter == "localstorage"
    assert settings.phone_default_region == "IT"
    assert settings.log_level == "DEBUG"
