"""Infrastructure layer: concrete implementations of application ports."""

from phonebook.infrastructure.factory import RepositoryFactory, build_repository
from phonebook.infrastructure.local_storage_repository import (
    STORAGE_KEY,
    LocalStorageContactRepository,
)
from phonebook.infrastructure.persistence import (
    MysqlContactRepository,
    SqliteContactRepository,
)
from phonebook.infrastructure.phone import to_e164
from phonebook.infrastructure.storage import (
    JsonFileStorage,
    KeyValueStorage,
    MemoryStorage,
)

__all__ = [
    "STORAGE_KEY",
    "JsonFileStorage",
    "KeyValueStorage",
    "LocalStorageContactRepository",
    "MemoryStorage",
    "MysqlContactRepository",
    "RepositoryFactory",
    "SqliteContactRepository",
    "build_repository",
    "to_e164",
]
