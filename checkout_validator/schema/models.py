"""Pydantic models for the checkout form."""
import re
from datetime import date

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from ..rules import (
    is_credit_card,
    is_expiration_date_valid,
    is_expiration_format,
    is_isbn,
    is_iso3166_alpha3,
    is_postal_code,
)

_PHONE_NUMBER = re.compile(r"[0-9]{10}")
_CVV = re.compile(r"[0-9]{3}")

# Postal codes are always checked against this locale
POSTAL_CODE_LOCALE = "US"


def _today(info: ValidationInfo) -> date:
    """Reference date from the validation context, falling back to the system clock."""
    context = info.context or {}
    return context.get("today") or date.today()


class CheckoutModel(BaseModel):
    """Immutable base: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class CustomerInfo(CheckoutModel):
    """Who is buying."""
    name: StrictStr = Field(min_length=4, max_length=50)
    email: StrictStr
    phone_number: StrictStr

    @field_validator("email")
    @classmethod
    def validate_email_shape(cls, v: str) -> str:
        try:
            validate_email(v, check_deliverability=False, test_environment=True)
        except EmailNotValidError:
            raise PydanticCustomError("invalid_email", "Invalid email")
        return v

    @field_validator("phone_number")
    @classmethod
    def validate_phone_number(cls, v: str) -> str:
        if not _PHONE_NUMBER.fullmatch(v):
            raise PydanticCustomError("invalid_phone_number", "Invalid phone number")
        return v


class ShippingAddress(CheckoutModel):
    """Shipping address fields."""
    address_line1: StrictStr = Field(min_length=5, max_length=100)
    address_line2: StrictStr = Field(max_length=100)
    city: StrictStr = Field(min_length=2, max_length=50)
    state: StrictStr = Field(min_length=2, max_length=50)
    postal_code: StrictStr
    country: StrictStr  # ISO 3166-1 alpha-3

    @field_validator("postal_code")
    @classmethod
    def validate_postal_code(cls, v: str) -> str:
        if not is_postal_code(v, POSTAL_CODE_LOCALE):
            raise PydanticCustomError("invalid_postal_code", "Invalid postal code")
        return v

    @field_validator("country")
    @classmethod
    def validate_country(cls, v: str) -> str:
        if not is_iso3166_alpha3(v):
            raise PydanticCustomError("invalid_country_code", "Invalid country code")
        return v


class PaymentDetails(CheckoutModel):
    """Card details as typed into the form."""
    card_number: StrictStr
    expiration_date: StrictStr  # MM/YY
    cvv: StrictStr

    @field_validator("card_number")
    @classmethod
    def validate_card_number(cls, v: str) -> str:
        if not is_credit_card(v):
            raise PydanticCustomError("invalid_card_number", "Invalid credit card number")
        return v

    @field_validator("expiration_date")
    @classmethod
    def validate_expiration_date(cls, v: str, info: ValidationInfo) -> str:
        """Shape first, then the month/year comparison against the reference date."""
        if not is_expiration_format(v):
            raise PydanticCustomError(
                "invalid_expiration_format", "Expiration date must be in MM/YY format"
            )
        if not is_expiration_date_valid(v, _today(info)):
            raise PydanticCustomError("expired_card", "Invalid or past expiration date")
        return v

    @field_validator("cvv")
    @classmethod
    def validate_cvv(cls, v: str) -> str:
        if not _CVV.fullmatch(v):
            raise PydanticCustomError("invalid_cvv", "Invalid CVV")
        return v


class LineItem(CheckoutModel):
    """One book in the cart."""
    isbn: StrictStr
    quantity: StrictInt = Field(ge=1, le=5)

    @field_validator("isbn")
    @classmethod
    def validate_isbn(cls, v: str) -> str:
        if not is_isbn(v):
            raise PydanticCustomError("invalid_isbn", "Invalid ISBN")
        return v


class CheckoutRequest(CheckoutModel):
    """Complete checkout form: customer, shipping, payment, and cart."""
    customer_info: CustomerInfo
    shipping_address: ShippingAddress
    payment_details: PaymentDetails
    items: tuple[LineItem, ...] = Field(min_length=1)

    @field_validator("items", mode="before")
    @classmethod
    def require_ordered_items(cls, v):
        """Only lists and tuples keep the cart order; sets, dicts and iterators are rejected."""
        if not isinstance(v, (list, tuple)):
            raise PydanticCustomError("list_type", "Expected array")
        return v
