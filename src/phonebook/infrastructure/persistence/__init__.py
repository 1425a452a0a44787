"""SQL-backed ContactRepository adapters."""

from phonebook.infrastructure.persistence.mysql_repository import MysqlContactRepository
from phonebook.infrastructure.persistence.sqlite_repository import SqliteContactRepository

__all__ = ["MysqlContactRepository", "SqliteContactRepository"]
