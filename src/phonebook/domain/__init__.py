"""Domain layer: entities and value objects. No dependencies on outer layers."""

from phonebook.domain.entities import UPDATABLE_FIELDS, Contact, utcnow
from phonebook.domain.phone import PhoneNumber

__all__ = ["UPDATABLE_FIELDS", "Contact", "PhoneNumber", "utcnow"]
