"""Adapter selection: one ContactRepository per factory, built on first use."""

import logging

from phonebook.application.ports import ContactRepository
from phonebook.config import (
    ADAPTER_LOCALSTORAGE,
    ADAPTER_MYSQL,
    ADAPTER_SQLITE,
    DatabaseConfig,
)
from phonebook.infrastructure.local_storage_repository import (
    LocalStorageContactRepository,
)
from phonebook.infrastructure.persistence.mysql_repository import (
    MysqlContactRepository,
)
from phonebook.infrastructure.persistence.sqlite_repository import (
    SqliteContactRepository,
)
from phonebook.infrastructure.storage import JsonFileStorage, MemoryStorage

logger = logging.getLogger(__name__)


def build_repository(config: DatabaseConfig) -> ContactRepository:
    """Construct the adapter named by config.adapter."""
    if config.adapter == ADAPTER_SQLITE:
        return SqliteContactRepository(config.sqlite_path)
    if config.adapter == ADAPTER_LOCALSTORAGE:
        if config.local_storage_path:
            return LocalStorageContactRepository(JsonFileStorage(config.local_storage_path))
        return LocalStorageContactRepository(MemoryStorage())
    if config.adapter == ADAPTER_MYSQL:
        settings = config.mysql
        return MysqlContactRepository.from_settings(
            settings.host,
            settings.port,
            settings.user,
            settings.password,
            settings.database,
            pool_size=settings.pool_size,
        )
    raise ValueError(f"Unsupported database adapter: {config.adapter!r}")


class RepositoryFactory:
    """
    Holds the process's single repository. Create one at startup and pass it
    to whatever builds the ContactService; get() returns the same instance
    until reset(). reset() is meant for tests and must not race in-flight calls.
    """

    def __init__(self, config: DatabaseConfig) -> None:
        self._config = config
        self._repository: ContactRepository | None = None

    @property
    def config(self) -> DatabaseConfig:
        return self._config

    def get(self) -> ContactRepository:
        if self._repository is None:
            self._repository = build_repository(self._config)
            logger.info("Using %s contact repository", self._config.adapter)
        return self._repository

    def reset(self) -> None:
        """Close and forget the current repository; the next get() builds a new one."""
        self.close()

    def close(self) -> None:
        if self._repository is not None:
            self._repository.close()
            self._repository = None
