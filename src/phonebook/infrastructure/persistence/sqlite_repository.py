"""SQLite (single-file) implementation of ContactRepository.
Timestamps are stored as ISO-8601 text; names and phone use the camelCase columns of the shared schema.
"""

import logging
import sqlite3
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime
from pathlib import Path

from phonebook.domain import Contact, utcnow
from phonebook.errors import StorageFailure
from phonebook.infrastructure.records import (
    COLUMNS,
    escape_like,
    fold_case,
    from_document,
    new_id,
    to_document,
)

logger = logging.getLogger(__name__)

DEFAULT_PATH = "./phonebook.db"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS contacts (
    id TEXT PRIMARY KEY,
    firstName TEXT NOT NULL,
    lastName TEXT NOT NULL,
    phoneNumber TEXT NOT NULL,
    email TEXT,
    address TEXT,
    notes TEXT,
    createdAt TEXT NOT NULL,
    updatedAt TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_phone ON contacts(phoneNumber);
CREATE INDEX IF NOT EXISTS idx_name ON contacts(firstName, lastName);
"""

_ORDER_BY = "ORDER BY lower(firstName), lower(lastName), createdAt, id"

_SEARCH_QUERY = f"""
SELECT * FROM contacts
WHERE lower(firstName) LIKE :pattern ESCAPE '\\'
   OR lower(lastName) LIKE :pattern ESCAPE '\\'
   OR lower(phoneNumber) LIKE :pattern ESCAPE '\\'
   OR lower(email) LIKE :pattern ESCAPE '\\'
{_ORDER_BY}
"""

_INSERT_QUERY = f"""
INSERT INTO contacts ({", ".join(COLUMNS)})
VALUES ({", ".join(":" + c for c in COLUMNS)})
"""

_UPDATE_QUERY = """
UPDATE contacts
SET firstName = :firstName, lastName = :lastName, phoneNumber = :phoneNumber,
    email = :email, address = :address, notes = :notes, updatedAt = :updatedAt
WHERE id = :id
"""


@contextmanager
def _sqlite_errors() -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as exc:
        raise StorageFailure(f"SQLite operation failed: {exc}") from exc


def _row_to_contact(row: sqlite3.Row) -> Contact:
    return from_document(dict(row))


class SqliteContactRepository:
    """Stores contacts in a local SQLite file, created on first open."""

    def __init__(
        self,
        path: str | Path = DEFAULT_PATH,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._path = str(path)
        self._clock = clock
        if self._path != ":memory:":
            Path(self._path).parent.mkdir(parents=True, exist_ok=True)
        with _sqlite_errors():
            # Shared with FastAPI's worker threads; sqlite serializes access itself.
            self._conn = sqlite3.connect(self._path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.create_function("lower", 1, fold_case, deterministic=True)
            self._conn.executescript(_SCHEMA)
        logger.info("SQLite contacts database ready at %s", self._path)

    def _fetch_all(self, query: str, params: Mapping | tuple = ()) -> list[Contact]:
        with _sqlite_errors():
            rows = self._conn.execute(query, params).fetchall()
        return [_row_to_contact(row) for row in rows]

    def _fetch_one(self, query: str, params: Mapping | tuple = ()) -> Contact | None:
        with _sqlite_errors():
            row = self._conn.execute(query, params).fetchone()
        return _row_to_contact(row) if row is not None else None

    def find_all(self) -> list[Contact]:
        return self._fetch_all(f"SELECT * FROM contacts {_ORDER_BY}")

    def find_by_id(self, contact_id: str) -> Contact | None:
        return self._fetch_one("SELECT * FROM contacts WHERE id = ?", (contact_id,))

    def find_by_phone_number(self, phone_number: str) -> Contact | None:
        return self._fetch_one(
            "SELECT * FROM contacts WHERE phoneNumber = ? LIMIT 1", (phone_number,)
        )

    def search(self, query: str) -> list[Contact]:
        pattern = f"%{escape_like(fold_case(query))}%"
        return self._fetch_all(_SEARCH_QUERY, {"pattern": pattern})

    def save(self, contact: Contact) -> Contact:
        stored = contact if contact.id else replace(contact, id=new_id())
        with _sqlite_errors(), self._conn:
            self._conn.execute(_INSERT_QUERY, to_document(stored))
        return self.find_by_id(stored.id)

    def update(
        self, contact_id: str, changes: Mapping[str, str | None]
    ) -> Contact | None:
        existing = self.find_by_id(contact_id)
        if existing is None:
            return None
        updated = existing.with_updates(changes, self._clock())
        with _sqlite_errors(), self._conn:
            self._conn.execute(_UPDATE_QUERY, to_document(updated))
        return self.find_by_id(contact_id)

    def delete(self, contact_id: str) -> bool:
        with _sqlite_errors(), self._conn:
            cursor = self._conn.execute("DELETE FROM contacts WHERE id = ?", (contact_id,))
        return cursor.rowcount > 0

    def count(self) -> int:
        with _sqlite_errors():
            (total,) = self._conn.execute("SELECT COUNT(*) FROM contacts").fetchone()
        return total

    def close(self) -> None:
        self._conn.close()
