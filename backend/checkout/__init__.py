"""Hosted payment checkout."""

from backend.checkout.processor import PaymentProcessor, StripeCheckoutProcessor
from backend.checkout.service import CheckoutService, build_line_item, build_line_items

__all__ = [
    "CheckoutService",
    "PaymentProcessor",
    "StripeCheckoutProcessor",
    "build_line_item",
    "build_line_items",
]
