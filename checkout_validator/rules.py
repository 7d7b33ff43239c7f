"""Pure validation predicates for card numbers, ISBNs, country and postal codes, and card expiry."""
import re
from datetime import date
from typing import Optional

from .countries import ISO3166_ALPHA3

# Card brand prefixes and lengths, checked after spaces and dashes are stripped
CARD_BRAND_PATTERNS = {
    "visa": re.compile(r"^4[0-9]{12}(?:[0-9]{3,6})?$"),
    "mastercard": re.compile(r"^(?:5[1-5][0-9]{2}|222[1-9]|22[3-9][0-9]|2[3-6][0-9]{2}|27[01][0-9]|2720)[0-9]{12}$"),
    "amex": re.compile(r"^3[47][0-9]{13}$"),
    "discover": re.compile(r"^6(?:011|5[0-9][0-9])[0-9]{12,15}$"),
    "diners": re.compile(r"^3(?:0[0-5]|[68][0-9])[0-9]{11}$"),
    "jcb": re.compile(r"^(?:2131|1800|35[0-9]{3})[0-9]{11}$"),
    "unionpay": re.compile(r"^(?:6[27][0-9]{14}|81[0-9]{14,17})$"),
}

_CARD_SEPARATORS = re.compile(r"[- ]+")
_DIGITS = re.compile(r"[0-9]+")
_ISBN_SEPARATORS = re.compile(r"[\s-]+")
_ISBN10_SHAPE = re.compile(r"^[0-9]{9}[0-9X]$")
_ISBN13_SHAPE = re.compile(r"^[0-9]{13}$")
_EXPIRATION_SHAPE = re.compile(r"[0-9]{2}/[0-9]{2}")

POSTAL_CODE_PATTERNS = {
    "US": re.compile(r"[0-9]{5}(?:-[0-9]{4})?"),
}


def _strip_card(number: str) -> str:
    return _CARD_SEPARATORS.sub("", number)


def is_luhn_valid(number: str) -> bool:
    """Luhn mod-10 checksum over the digits of ``number``."""
    digits = _strip_card(number)
    if not _DIGITS.fullmatch(digits):
        return False

    total = 0
    for i, char in enumerate(reversed(digits)):
        digit = int(char)
        if i % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def card_brand(number: str) -> Optional[str]:
    """Return the card brand whose number pattern matches, or None."""
    digits = _strip_card(number)
    for brand, pattern in CARD_BRAND_PATTERNS.items():
        if pattern.fullmatch(digits):
            return brand
    return None


def is_credit_card(number: str) -> bool:
    """A known brand's number shape plus a passing Luhn checksum."""
    return card_brand(number) is not None and is_luhn_valid(number)


def _is_isbn10(value: str) -> bool:
    if not _ISBN10_SHAPE.fullmatch(value):
        return False
    checksum = sum((i + 1) * int(value[i]) for i in range(9))
    checksum += 100 if value[9] == "X" else 10 * int(value[9])
    return checksum % 11 == 0


def _is_isbn13(value: str) -> bool:
    if not _ISBN13_SHAPE.fullmatch(value):
        return False
    checksum = sum((3 if i % 2 else 1) * int(value[i]) for i in range(12))
    return int(value[12]) == (10 - checksum % 10) % 10


def is_isbn(value: str, version: Optional[int] = None) -> bool:
    """
    Validate an ISBN-10 or ISBN-13.

    Whitespace and hyphens are ignored. ``version`` restricts the check to
    one of the two formats; by default either is accepted.
    """
    sanitized = _ISBN_SEPARATORS.sub("", value)
    if version is None:
        return _is_isbn10(sanitized) or _is_isbn13(sanitized)
    if version == 10:
        return _is_isbn10(sanitized)
    if version == 13:
        return _is_isbn13(sanitized)
    raise ValueError(f"Unsupported ISBN version: {version}")


def is_iso3166_alpha3(code: str) -> bool:
    return code.upper() in ISO3166_ALPHA3


def is_postal_code(value: str, locale: str = "US") -> bool:
    pattern = POSTAL_CODE_PATTERNS.get(locale)
    if pattern is None:
        raise ValueError(f"Unsupported postal code locale: {locale}")
    return bool(pattern.fullmatch(value))


def is_expiration_format(value: str) -> bool:
    return bool(_EXPIRATION_SHAPE.fullmatch(value))


def parse_expiration(value: str) -> tuple[int, int]:
    """Split ``MM/YY`` into ``(month, two_digit_year)``."""
    month, year = value.split("/")
    return int(month), int(year)


def is_expiration_date_valid(value: str, today: date) -> bool:
    """
    True when the ``MM/YY`` expiry is the current month or later.

    Compares month and two-digit year only; ``today.year % 100`` is used
    as-is, so ``01/00`` counts as before ``12/99``.
    """
    month, year = parse_expiration(value)
    if month < 1 or month > 12:
        return False

    current_month, current_year = today.month, today.year % 100
    return year > current_year or (year == current_year and month >= current_month)
