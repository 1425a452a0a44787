"""Phone number value object: validation, digit-only normalization, display format."""

import re

from phonebook.errors import InvalidFormat

MIN_DIGITS = 10
MAX_DIGITS = 15

_ALLOWED = re.compile(r"[0-9\s\-()+]+")
_NON_DIGIT = re.compile(r"[^0-9]")


class PhoneNumber:
    """
    A validated phone number. The canonical form is digits only.
    Accepts digits, whitespace, hyphens, parentheses and plus signs; the digit
    count must be between MIN_DIGITS and MAX_DIGITS.
    """

    __slots__ = ("_digits",)

    def __init__(self, raw: str) -> None:
        raw = raw if isinstance(raw, str) else ""
        digits = _NON_DIGIT.sub("", raw)
        if not _ALLOWED.fullmatch(raw) or not MIN_DIGITS <= len(digits) <= MAX_DIGITS:
            raise InvalidFormat("Invalid phone number format")
        self._digits = digits

    def __str__(self) -> str:
        return self._digits

    def __repr__(self) -> str:
        return f"PhoneNumber({self._digits!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PhoneNumber):
            return NotImplemented
        return self._digits == other._digits

    def __hash__(self) -> int:
        return hash(self._digits)

    def format(self) -> str:
        """(XXX) XXX-XXXX for 10-digit numbers, the bare digits otherwise."""
        return format_digits(self._digits)


def format_digits(digits: str) -> str:
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    return digits
