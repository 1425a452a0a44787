"""E.164 rendering of stored (digit-only) phone numbers."""

import phonenumbers


def to_e164(digits: str, default_region: str | None = "US") -> str | None:
    """Return the E.164 form of a normalized number, or None if it is not a valid number.

    The digits are first read as a national number of default_region
    ("2025551234" with "US"); when that is not valid they are read as
    international digits with a country code ("393123456789" -> "+393123456789").
    """
    if not digits or not str(digits).strip():
        return None
    digits = str(digits).strip()
    candidates = []
    if default_region:
        candidates.append((digits, default_region))
    candidates.append(("+" + digits.lstrip("+"), None))
    for raw, region in candidates:
        try:
            parsed = phonenumbers.parse(raw, region)
        except phonenumbers.NumberParseException:
            continue
        if phonenumbers.is_valid_number(parsed):
            return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)
    return None
