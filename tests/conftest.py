"""Shared test fixtures."""
import pytest
from datetime import date

from checkout_validator.validator import CheckoutValidator

TODAY = date(2024, 6, 15)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def validator():
    return CheckoutValidator(clock=lambda: TODAY)


@pytest.fixture
def customer_info():
    return {
        "name": "Jane Doe",
        "email": "jane.doe@example.com",
        "phoneNumber": "4155550100",
    }


@pytest.fixture
def shipping_address():
    return {
        "addressLine1": "123 Main Street",
        "addressLine2": "Apt 4B",
        "city": "San Francisco",
        "state": "CA",
        "postalCode": "94102",
        "country": "USA",
    }


@pytest.fixture
def payment_details():
    return {
        "cardNumber": "4111111111111111",
        "expirationDate": "12/27",
        "cvv": "123",
    }


@pytest.fixture
def checkout_payload(customer_info, shipping_address, payment_details):
    """A checkout record that passes every rule on TODAY."""
    return {
        "customerInfo": customer_info,
        "shippingAddress": shipping_address,
        "paymentDetails": payment_details,
        "items": [
            {"isbn": "9780306406157", "quantity": 2},
            {"isbn": "0306406152", "quantity": 1},
        ],
    }
