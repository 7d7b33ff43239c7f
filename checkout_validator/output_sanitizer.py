"""Output sanitization: redact card numbers, CVVs and customer PII before a checkout leaves the process."""
import re

from .rules import card_brand, is_credit_card
from .schema import CheckoutRequest

# Candidate card numbers (13-19 digits, optionally separated); only real cards are redacted
_CARD_NUMBER_PATTERN = re.compile(
    r"\b(?:\d{4}[-\s]?){2,4}\d{1,4}\b"
)

# CVV values inside echoed JSON payloads
_CVV_FIELD_PATTERN = re.compile(r'("cvv"\s*:\s*)"[^"]*"')

# ANSI escape codes
_ANSI_PATTERN = re.compile(r"\x1b\[[0-9;]*m")


def redact_card_number(number: str) -> str:
    """Mask every digit but the last four, keeping the number's length."""
    digits = re.sub(r"[^0-9]", "", number)
    if len(digits) <= 4:
        return "*" * len(digits)
    return "*" * (len(digits) - 4) + digits[-4:]


def redact_email(email: str) -> str:
    """Partially redact an email address."""
    if "@" not in email:
        return email
    local, domain = email.split("@", 1)
    return f"{local[0]}***@{domain}"


def redact_phone_number(phone: str) -> str:
    digits = re.sub(r"\D", "", phone)
    if len(digits) < 4:
        return "***"
    return f"***-***-{digits[-4:]}"


def _redact_name(name: str) -> str:
    parts = name.split()
    if len(parts) > 1:
        return f"{parts[0]} {parts[-1][0]}."
    return parts[0] if parts else name


def summarize_checkout(request: CheckoutRequest) -> dict:
    """Return a summary of an accepted checkout that is safe to log or display."""
    customer = request.customer_info
    shipping = request.shipping_address
    payment = request.payment_details

    return {
        "customer": {
            "name": _redact_name(customer.name),
            "email": redact_email(customer.email),
            "phone": redact_phone_number(customer.phone_number),
        },
        "shipping": {
            "city": shipping.city,
            "state": shipping.state,
            "postal_code": shipping.postal_code[:3] + "**",
            "country": shipping.country.upper(),
        },
        "payment": {
            "brand": (card_brand(payment.card_number) or "unknown").title(),
            "card": redact_card_number(payment.card_number),
            "expires": payment.expiration_date,
        },
        "items": [{"isbn": item.isbn, "quantity": item.quantity} for item in request.items],
        "total_quantity": sum(item.quantity for item in request.items),
    }


def _redact_card_match(match: re.Match) -> str:
    if is_credit_card(match.group(0)):
        return "[CARD REDACTED]"
    return match.group(0)


def sanitize_output(text: str, max_chars: int = 50000) -> str:
    """
    Sanitize text before returning it to a tool client or the debug log.

    - Strips ANSI escape codes
    - Redacts digit runs that are valid card numbers
    - Redacts "cvv" values in JSON text
    - Truncates to max_chars
    """
    text = _ANSI_PATTERN.sub("", text)
    text = _CARD_NUMBER_PATTERN.sub(_redact_card_match, text)
    text = _CVV_FIELD_PATTERN.sub(r'\1"[CVV REDACTED]"', text)

    if len(text) > max_chars:
        text = text[:max_chars] + f"\n\n[... truncated at {max_chars} chars]"

    return text
