"""Hosted checkout session creation.

Payments are optional: without a processor the service still exists, and
every call fails with :class:`~backend.errors.ConfigurationError`.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Any, Optional

from backend.checkout.processor import PaymentProcessor
from backend.errors import ConfigurationError, PaymentError, ValidationError

logger = logging.getLogger(__name__)

FALLBACK_PRODUCT_NAME = "Product"
# Stripe substitutes this placeholder with the real session id.
SESSION_ID_PLACEHOLDER = "{CHECKOUT_SESSION_ID}"


def _quantity(raw: Any) -> int:
    if isinstance(raw, bool) or raw is None:
        return 1
    try:
        qty = int(float(raw))
    except (TypeError, ValueError, OverflowError):
        return 1
    return max(1, qty)


def _unit_amount(raw: Any) -> int:
    """Price in major units -> minor units (cents), rounding half up."""
    if isinstance(raw, bool) or raw is None:
        return 0
    try:
        price = float(raw)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(price) or price < 0:
        return 0
    return int(math.floor(price * 100 + 0.5))


def build_line_item(item: Any, currency: str = "usd") -> dict[str, Any]:
    """Translate one cart item into a processor line item.

    Raises:
        ValidationError: *item* is not a JSON object.
    """
    if not isinstance(item, dict):
        raise ValidationError("Each cart item must be an object")

    product_data: dict[str, Any] = {
        "name": str(item.get("title") or FALLBACK_PRODUCT_NAME),
    }
    if item.get("image"):
        product_data["images"] = [str(item["image"])]

    return {
        "quantity": _quantity(item.get("qty")),
        "price_data": {
            "currency": currency,
            "product_data": product_data,
            "unit_amount": _unit_amount(item.get("price")),
        },
    }


def build_line_items(cart_items: Any, currency: str = "usd") -> list[dict[str, Any]]:
    """Validate *cart_items* and map each entry with :func:`build_line_item`.

    Raises:
        ValidationError: Missing, not a list, or empty.
    """
    if not isinstance(cart_items, list) or not cart_items:
        raise ValidationError("Cart is empty")
    return [build_line_item(item, currency) for item in cart_items]


class CheckoutService:
    """Builds checkout requests and delegates them to the payment processor."""

    def __init__(
        self,
        processor: Optional[PaymentProcessor],
        frontend_url: str,
        currency: str = "usd",
        timeout: float = 20.0,
    ) -> None:
        self.processor = processor
        self.frontend_url = frontend_url.rstrip("/")
        self.currency = currency
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return self.processor is not None

    def session_params(
        self, claims: dict[str, Any], line_items: list[dict[str, Any]]
    ) -> dict[str, Any]:
        params: dict[str, Any] = {
            "mode": "payment",
            "line_items": line_items,
            "success_url": f"{self.frontend_url}/success?session_id={SESSION_ID_PLACEHOLDER}",
            "cancel_url": f"{self.frontend_url}/cart",
        }
        if claims.get("id"):
            params["metadata"] = {"user_id": str(claims["id"])}
        return params

    async def create_session(self, claims: dict[str, Any], cart_items: Any) -> str:
        """Create a checkout session for *cart_items* and return its URL.

        Raises:
            ConfigurationError: No payment processor configured.
            ValidationError: Cart missing, not a list, empty, or malformed.
            PaymentError: The processor failed or timed out.
        """
        if self.processor is None:
            raise ConfigurationError(
                "Stripe key missing. Add STRIPE_SECRET_KEY in environment."
            )

        line_items = build_line_items(cart_items, self.currency)
        params = self.session_params(claims, line_items)

        try:
            url = await asyncio.wait_for(
                asyncio.to_thread(self.processor.create_checkout_session, params),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as exc:
            logger.error("Payment session creation timed out after %gs", self.timeout)
            raise PaymentError("Payment processor timed out", url="checkout.sessions", code="Timeout") from exc
        except Exception as exc:
            logger.exception("Payment session creation failed")
            raise PaymentError(str(exc), url="checkout.sessions", code=type(exc).__name__) from exc

        logger.info("Created checkout session for user %s", claims.get("id"))
        return url
