"""Key/value-store implementation of ContactRepository.

The whole contact set is one JSON array under STORAGE_KEY. Every operation
reads the array, works on it in memory and writes it back.

Two policies are specific to this adapter:
- no storage (storage=None): reads return empty, writes are dropped;
- corrupt stored data reads as an empty set and is logged, never raised.
"""

import json
import logging
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime

from phonebook.domain import Contact, utcnow
from phonebook.errors import StorageFailure
from phonebook.infrastructure.records import (
    from_document,
    matches,
    new_id,
    sort_key,
    to_document,
)
from phonebook.infrastructure.storage import KeyValueStorage

logger = logging.getLogger(__name__)

STORAGE_KEY = "phonebook_contacts"


@contextmanager
def _storage_errors() -> Iterator[None]:
    try:
        yield
    except OSError as exc:
        raise StorageFailure(f"Contact storage failed: {exc}") from exc


class LocalStorageContactRepository:
    """Stores contacts as one JSON document in a KeyValueStorage."""

    def __init__(
        self,
        storage: KeyValueStorage | None = None,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._storage = storage
        self._clock = clock

    def _load(self) -> list[Contact]:
        if self._storage is None:
            return []
        with _storage_errors():
            data = self._storage.get_item(STORAGE_KEY)
        if not data:
            return []
        try:
            documents = json.loads(data)
            if not isinstance(documents, list):
                raise ValueError("stored contacts are not a list")
            return [from_document(doc) for doc in documents]
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("Discarding corrupt contact data under %r: %s", STORAGE_KEY, exc)
            return []

    def _store(self, contacts: list[Contact]) -> None:
        if self._storage is None:
            return
        payload = json.dumps([to_document(c) for c in contacts])
        with _storage_errors():
            self._storage.set_item(STORAGE_KEY, payload)

    def find_all(self) -> list[Contact]:
        return sorted(self._load(), key=sort_key)

    def find_by_id(self, contact_id: str) -> Contact | None:
        return next((c for c in self._load() if c.id == contact_id), None)

    def find_by_phone_number(self, phone_number: str) -> Contact | None:
        return next((c for c in self._load() if c.phone_number == phone_number), None)

    def search(self, query: str) -> list[Contact]:
        return sorted((c for c in self._load() if matches(c, query)), key=sort_key)

    def save(self, contact: Contact) -> Contact:
        stored = contact if contact.id else replace(contact, id=new_id())
        contacts = self._load()
        contacts.append(stored)
        self._store(contacts)
        return stored

    def update(
        self, contact_id: str, changes: Mapping[str, str | None]
    ) -> Contact | None:
        contacts = self._load()
        for index, contact in enumerate(contacts):
            if contact.id == contact_id:
                updated = contact.with_updates(changes, self._clock())
                contacts[index] = updated
                self._store(contacts)
                return updated
        return None

    def delete(self, contact_id: str) -> bool:
        contacts = self._load()
        remaining = [c for c in contacts if c.id != contact_id]
        if len(remaining) == len(contacts):
            return False
        self._store(remaining)
        return True

    def count(self) -> int:
        return len(self._load())

    def close(self) -> None:
        """Nothing to release; the storage object belongs to the caller."""
