"""Domain entity: Contact."""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

# Fields a caller may change after creation. id and the timestamps are managed.
UPDATABLE_FIELDS = frozenset(
    {"first_name", "last_name", "phone_number", "email", "address", "notes"}
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Contact:
    """
    One phonebook entry.
    id is empty until a repository stores the contact for the first time.
    phone_number holds the normalized (digits only) form.
    """

    first_name: str
    last_name: str
    phone_number: str
    email: str | None = None
    address: str | None = None
    notes: str | None = None
    id: str = ""
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def with_updates(
        self, changes: Mapping[str, str | None], now: datetime | None = None
    ) -> "Contact":
        """Return a copy with changes applied and updated_at stamped, even for empty changes."""
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
        return replace(self, **dict(changes), updated_at=now or utcnow())
