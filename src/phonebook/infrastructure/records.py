"""Mapping between Contact and the camelCase documents/rows every adapter persists."""

import uuid
from datetime import datetime, timezone
from typing import Any

from phonebook.domain import Contact

# Column names shared by the JSON documents and both SQL schemas.
COLUMNS = (
    "id",
    "firstName",
    "lastName",
    "phoneNumber",
    "email",
    "address",
    "notes",
    "createdAt",
    "updatedAt",
)

# Contact attribute -> persisted column.
FIELD_TO_COLUMN = {
    "first_name": "firstName",
    "last_name": "lastName",
    "phone_number": "phoneNumber",
    "email": "email",
    "address": "address",
    "notes": "notes",
}


def new_id() -> str:
    return str(uuid.uuid4())


def datetime_to_iso(dt: datetime) -> str:
    return as_utc(dt).isoformat(timespec="microseconds")


def as_utc(dt: datetime) -> datetime:
    """Naive values are taken to be UTC (MySQL DATETIME drops the offset)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, str):
        return as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    raise ValueError(f"Not a timestamp: {value!r}")


def to_document(contact: Contact) -> dict[str, Any]:
    """JSON-ready document with ISO-8601 timestamps."""
    return {
        "id": contact.id,
        "firstName": contact.first_name,
        "lastName": contact.last_name,
        "phoneNumber": contact.phone_number,
        "email": contact.email,
        "address": contact.address,
        "notes": contact.notes,
        "createdAt": datetime_to_iso(contact.created_at),
        "updatedAt": datetime_to_iso(contact.updated_at),
    }


def from_document(doc: Any) -> Contact:
    """Build a Contact from a document or row mapping. Raises KeyError/ValueError on malformed input."""
    return Contact(
        id=str(doc["id"]),
        first_name=str(doc["firstName"]),
        last_name=str(doc["lastName"]),
        phone_number=str(doc["phoneNumber"]),
        email=doc.get("email") or None,
        address=doc.get("address") or None,
        notes=doc.get("notes") or None,
        created_at=parse_timestamp(doc["createdAt"]),
        updated_at=parse_timestamp(doc["updatedAt"]),
    )


def fold_case(value: Any) -> Any:
    """The lower-casing every adapter sorts and searches by. Non-strings (SQL NULL) pass through.
    The SQLite connections register it as their lower() function.
    """
    return value.lower() if isinstance(value, str) else value


def sort_key(contact: Contact) -> tuple:
    return (
        fold_case(contact.first_name),
        fold_case(contact.last_name),
        contact.created_at,
        contact.id,
    )


def matches(contact: Contact, query: str) -> bool:
    """Case-insensitive substring match on names, phone and email."""
    needle = fold_case(query)
    return any(
        needle in fold_case(value)
        for value in (
            contact.first_name,
            contact.last_name,
            contact.phone_number,
            contact.email or "",
        )
    )


def escape_like(query: str) -> str:
    """Escape LIKE wildcards so the query matches literally (escape char is backslash)."""
    return query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
