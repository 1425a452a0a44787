"""Contact use cases: create, get, update, delete, list/search."""

import logging
from collections.abc import Mapping

from phonebook.application.dto import ContactPage, NewContact
from phonebook.application.ports import ContactRepository
from phonebook.domain import UPDATABLE_FIELDS, Contact, PhoneNumber, utcnow
from phonebook.errors import (
    DeleteFailed,
    DuplicatePhoneNumber,
    NotFound,
    UpdateFailed,
    ValidationError,
)

logger = logging.getLogger(__name__)

_NAME_FIELDS = ("first_name", "last_name")
_OPTIONAL_FIELDS = ("email", "address", "notes")


def _optional(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


class ContactService:
    """Validation and uniqueness rules in front of a ContactRepository. No retries."""

    def __init__(self, repository: ContactRepository) -> None:
        self._repo = repository

    def create_contact(self, data: NewContact) -> Contact:
        """Validate, check phone uniqueness and store a new contact."""
        first_name = (data.first_name or "").strip()
        last_name = (data.last_name or "").strip()
        if not first_name or not last_name:
            raise ValidationError("First name and last name are required")

        phone = PhoneNumber(data.phone_number)
        if self._repo.find_by_phone_number(str(phone)) is not None:
            raise DuplicatePhoneNumber(str(phone))

        now = utcnow()
        contact = Contact(
            first_name=first_name,
            last_name=last_name,
            phone_number=str(phone),
            email=_optional(data.email),
            address=_optional(data.address),
            notes=_optional(data.notes),
            created_at=now,
            updated_at=now,
        )
        saved = self._repo.save(contact)
        logger.info("Created contact %s", saved.id)
        return saved

    def get_contact(self, contact_id: str) -> Contact:
        contact = self._repo.find_by_id(contact_id)
        if contact is None:
            raise NotFound(contact_id)
        return contact

    def update_contact(
        self, contact_id: str, changes: Mapping[str, str | None]
    ) -> Contact:
        """Apply a partial update. A phone number already owned by this contact is allowed."""
        if self._repo.find_by_id(contact_id) is None:
            raise NotFound(contact_id)

        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(
                f"Fields cannot be updated: {', '.join(sorted(unknown))}"
            )

        patch: dict[str, str | None] = {}
        for name in _NAME_FIELDS:
            if name in changes:
                value = (changes[name] or "").strip()
                if not value:
                    raise ValidationError("First name and last name are required")
                patch[name] = value
        for name in _OPTIONAL_FIELDS:
            if name in changes:
                patch[name] = _optional(changes[name])

        if "phone_number" in changes:
            phone = PhoneNumber(changes["phone_number"] or "")
            owner = self._repo.find_by_phone_number(str(phone))
            if owner is not None and owner.id != contact_id:
                raise DuplicatePhoneNumber(str(phone))
            patch["phone_number"] = str(phone)

        updated = self._repo.update(contact_id, patch)
        if updated is None:
            raise UpdateFailed("Failed to update contact")
        logger.info(
            "Updated contact %s (%s)", contact_id, ", ".join(sorted(patch)) or "no fields"
        )
        return updated

    def delete_contact(self, contact_id: str) -> None:
        if self._repo.find_by_id(contact_id) is None:
            raise NotFound(contact_id)
        if not self._repo.delete(contact_id):
            raise DeleteFailed("Failed to delete contact")
        logger.info("Deleted contact %s", contact_id)

    def list_contacts(self, query: str | None = None) -> ContactPage:
        """Search when query is non-blank, otherwise list everything. total is always unfiltered."""
        needle = (query or "").strip()
        records = self._repo.search(needle) if needle else self._repo.find_all()
        return ContactPage(records=records, total=self._repo.count())
