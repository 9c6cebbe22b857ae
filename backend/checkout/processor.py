"""Payment processor adapters.

The checkout service only needs one capability from the processor: create a
hosted checkout session and hand back its URL.
"""

from __future__ import annotations

from typing import Any, Protocol

import stripe


class PaymentProcessor(Protocol):
    def create_checkout_session(self, params: dict[str, Any]) -> str:
        """Create a hosted checkout session and return its redirect URL."""
        ...


class StripeCheckoutProcessor:
    """Creates Stripe Checkout sessions with a per-instance secret key.

    The HTTP timeout matches the checkout service's bound and retries are off,
    so the worker thread gives up when the caller does.
    """

    def __init__(self, api_key: str, timeout: float = 20.0) -> None:
        self.timeout = timeout
        self._client = stripe.StripeClient(
            api_key,
            http_client=stripe.RequestsClient(timeout=timeout),
            max_network_retries=0,
        )

    def create_checkout_session(self, params: dict[str, Any]) -> str:
        session = self._client.checkout.sessions.create(params=params)
        if not session.url:
            raise stripe.StripeError("Checkout session has no redirect URL")
        return session.url
