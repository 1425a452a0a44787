"""Input and result types for the contact use cases."""

from dataclasses import dataclass

from phonebook.domain import Contact


@dataclass(frozen=True)
class NewContact:
    """Data for a contact to create. phone_number is raw user input."""

    first_name: str
    last_name: str
    phone_number: str
    email: str | None = None
    address: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class ContactPage:
    """Result of list_contacts. total is the full repository size, not the match count."""

    records: list[Contact]
    total: int
