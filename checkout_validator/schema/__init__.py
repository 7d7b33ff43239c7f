"""Checkout form schema: customer, shipping, payment, and cart models."""
from .models import CheckoutRequest, CustomerInfo, LineItem, PaymentDetails, ShippingAddress

__all__ = ["CheckoutRequest", "CustomerInfo", "LineItem", "PaymentDetails", "ShippingAddress"]
