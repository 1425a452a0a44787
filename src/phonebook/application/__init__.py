"""Application layer: use cases, ports, and DTOs. Depends only on domain."""

from phonebook.application.contact_service import ContactService
from phonebook.application.dto import ContactPage, NewContact
from phonebook.application.ports import ContactRepository

__all__ = [
    "ContactPage",
    "ContactRepository",
    "ContactService",
    "NewContact",
]
