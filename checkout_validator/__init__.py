"""Checkout form validation: customer info, shipping address, payment details, and cart items."""
from .schema import CheckoutRequest, CustomerInfo, LineItem, PaymentDetails, ShippingAddress
from .validator import CheckoutValidator, FieldViolation, ValidationResult, validate_checkout

__all__ = [
    "CheckoutRequest",
    "CheckoutValidator",
    "CustomerInfo",
    "FieldViolation",
    "LineItem",
    "PaymentDetails",
    "ShippingAddress",
    "ValidationResult",
    "validate_checkout",
]
