"""Application ports (interfaces). Implemented by infrastructure adapters."""

from collections.abc import Mapping
from typing import Protocol

from phonebook.domain import Contact


class ContactRepository(Protocol):
    """Persists and queries contacts. Every method may raise StorageFailure."""

    def find_all(self) -> list[Contact]:
        """Return all contacts ordered by first name, then last name (case-insensitive)."""
        ...

    def find_by_id(self, contact_id: str) -> Contact | None:
        """Return the contact with the given id, or None."""
        ...

    def find_by_phone_number(self, phone_number: str) -> Contact | None:
        """Return the contact whose normalized phone number matches, or None."""
        ...

    def search(self, query: str) -> list[Contact]:
        """Return contacts whose names, phone or email contain query (case-insensitive)."""
        ...

    def save(self, contact: Contact) -> Contact:
        """Store a new contact, assigning an id if it has none. Returns the stored contact."""
        ...

    def update(
        self, contact_id: str, changes: Mapping[str, str | None]
    ) -> Contact | None:
        """Merge changes into the stored contact. Returns the updated contact, or None if not found."""
        ...

    def delete(self, contact_id: str) -> bool:
        """Remove the contact. Returns True if a record was removed."""
        ...

    def count(self) -> int:
        """Return the number of stored contacts."""
        ...

    def close(self) -> None:
        """Release the underlying handle (file, connection, pool)."""
        ...
