"""Error taxonomy shared by the domain, application and infrastructure layers."""


class ContactError(Exception):
    """Base class for every failure the phonebook core reports."""


class ValidationError(ContactError, ValueError):
    """A required field is missing or a field is not allowed."""


class InvalidFormat(ContactError, ValueError):
    """A phone number is malformed."""


class DuplicatePhoneNumber(ContactError):
    """The normalized phone number already belongs to another contact."""

    def __init__(self, phone_number: str) -> None:
        super().__init__(f"A contact with phone number {phone_number} already exists.")
        self.phone_number = phone_number


class NotFound(ContactError):
    """No contact exists for the given id."""

    def __init__(self, contact_id: str) -> None:
        super().__init__("Contact not found")
        self.contact_id = contact_id


class UpdateFailed(ContactError):
    """The repository reported no record updated after the existence check passed."""


class DeleteFailed(ContactError):
    """The repository reported no record removed after the existence check passed."""


class StorageFailure(ContactError):
    """The storage backend failed (connectivity, I/O, SQL error)."""
