"""
Phonebook core: clean-architecture layout.

- domain: Contact entity and PhoneNumber value object. No outer dependencies.
- application: use cases (ContactService), ports (ContactRepository), DTOs.
- infrastructure: adapters (LocalStorage, SQLite, MySQL) and RepositoryFactory.
"""

from phonebook.application import (
    ContactPage,
    ContactRepository,
    ContactService,
    NewContact,
)
from phonebook.domain import Contact, PhoneNumber
from phonebook.errors import (
    ContactError,
    DeleteFailed,
    DuplicatePhoneNumber,
    InvalidFormat,
    NotFound,
    StorageFailure,
    UpdateFailed,
    ValidationError,
)
from phonebook.infrastructure import (
    LocalStorageContactRepository,
    MysqlContactRepository,
    RepositoryFactory,
    SqliteContactRepository,
)

__all__ = [
    "Contact",
    "ContactError",
    "ContactPage",
    "ContactRepository",
    "ContactService",
    "DeleteFailed",
    "DuplicatePhoneNumber",
    "InvalidFormat",
    "LocalStorageContactRepository",
    "MysqlContactRepository",
    "NewContact",
    "NotFound",
    "PhoneNumber",
    "RepositoryFactory",
    "SqliteContactRepository",
    "StorageFailure",
    "UpdateFailed",
    "ValidationError",
]
