"""Configuration read from the environment (a .env file is loaded by the entry points)."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

ADAPTER_SQLITE = "sqlite"
ADAPTER_LOCALSTORAGE = "localstorage"
ADAPTER_MYSQL = "mysql"
ADAPTERS = (ADAPTER_SQLITE, ADAPTER_LOCALSTORAGE, ADAPTER_MYSQL)


@dataclass(frozen=True)
class MysqlSettings:
    host: str = "localhost"
    port: int = 3306
    user: str = "phonebook_user"
    password: str = "phonebook_pass"
    database: str = "phonebook"
    pool_size: int = 10


@dataclass(frozen=True)
class DatabaseConfig:
    """
    Selects one storage adapter plus its connection parameters.
    local_storage_path None means a process-local MemoryStorage.
    """

    adapter: str = ADAPTER_SQLITE
    sqlite_path: str = "./phonebook.db"
    local_storage_path: str | None = None
    mysql: MysqlSettings = field(default_factory=MysqlSettings)

    def __post_init__(self):
        if self.adapter not in ADAPTERS:
            raise ValueError(
                f"Unsupported database adapter: {self.adapter!r} "
                f"(expected one of {', '.join(ADAPTERS)})"
            )


@dataclass(frozen=True)
class AppSettings:
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    phone_default_region: str | None = "US"
    log_level: str = "INFO"


def _get(environ: Mapping[str, str], key: str, default: str) -> str:
    return (environ.get(key) or default).strip()


def _get_int(
    environ: Mapping[str, str], key: str, default: int, *, minimum: int | None = None
) -> int:
    raw = _get(environ, key, str(default))
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None
    if minimum is not None and value < minimum:
        raise ValueError(f"{key} must be at least {minimum}, got {value}")
    return value


def load_database_config(environ: Mapping[str, str] | None = None) -> DatabaseConfig:
    """Build DatabaseConfig from DB_ADAPTER, SQLITE_PATH, LOCAL_STORAGE_PATH and MYSQL_* variables."""
    env = os.environ if environ is None else environ
    return DatabaseConfig(
        adapter=_get(env, "DB_ADAPTER", ADAPTER_SQLITE).lower(),
        sqlite_path=_get(env, "SQLITE_PATH", "./phonebook.db"),
        local_storage_path=_get(env, "LOCAL_STORAGE_PATH", "") or None,
        mysql=MysqlSettings(
            host=_get(env, "MYSQL_HOST", "localhost"),
            port=_get_int(env, "MYSQL_PORT", 3306),
            user=_get(env, "MYSQL_USER", "phonebook_user"),
            password=_get(env, "MYSQL_PASSWORD", "phonebook_pass"),
            database=_get(env, "MYSQL_DATABASE", "phonebook"),
            pool_size=_get_int(env, "MYSQL_POOL_SIZE", 10, minimum=1),
        ),
    )


def load_settings(environ: Mapping[str, str] | None = None) -> AppSettings:
    env = os.environ if environ is None else environ
    return AppSettings(
        database=load_database_config(env),
        phone_default_region=_get(env, "PHONE_DEFAULT_REGION", "US").upper() or None,
        log_level=_get(env, "LOG_LEVEL", "INFO").upper(),
    )
