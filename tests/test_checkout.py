"""Tests for the checkout service.

The payment processor is replaced by a recording fake, so no Stripe calls are
made.  The Stripe adapter itself is exercised against a patched SDK.
"""

from __future__ import annotations

import time
from types import SimpleNamespace
from typing import Any
from unittest.mock import patch

import pytest

from backend.checkout.processor import StripeCheckoutProcessor
from backend.checkout.service import CheckoutService, build_line_item, build_line_items
from backend.errors import ConfigurationError, PaymentError, ValidationError

_CLAIMS = {"id": "42", "name": "Ada", "email": "ada@example.com"}


class FakeProcessor:
    def __init__(self, url: str = "https://pay.test/session/abc", error: Exception | None = None):
        self.url = url
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def create_checkout_session(self, params: dict[str, Any]) -> str:
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        return self.url


class SlowProcessor(FakeProcessor):
    def create_checkout_session(self, params: dict[str, Any]) -> str:
        time.sleep(1.0)
        return self.url


def _service(processor=None, **kwargs) -> CheckoutService:
    return CheckoutService(processor, frontend_url="http://shop.test/", **kwargs)


# ---------------------------------------------------------------------------
# Line items
# ---------------------------------------------------------------------------

class TestBuildLineItem:
    def test_shoe_example(self) -> None:
        line = build_line_item({"title": "Shoe", "price": 19.99, "qty": 2})
        assert line["quantity"] == 2
        assert line["price_data"]["unit_amount"] == 1999
        assert line["price_data"]["currency"] == "usd"
        assert line["price_data"]["product_data"] == {"name": "Shoe"}

    def test_qty_defaults_to_one(self) -> None:
        assert build_line_item({"title": "Shoe", "price": 5})["quantity"] == 1

    def test_price_defaults_to_zero(self) -> None:
        assert build_line_item({"title": "Shoe", "qty": 3})["price_data"]["unit_amount"] == 0

    @pytest.mark.parametrize("qty,expected", [
        (0, 1), (-4, 1), ("3", 3), (2.9, 2), ("abc", 1), (None, 1), (True, 1), (float("nan"), 1),
    ])
    def test_quantity_coercion(self, qty, expected) -> None:
        assert build_line_item({"qty": qty})["quantity"] == expected

    @pytest.mark.parametrize("price,expected", [
        (0.1, 10), ("12.5", 1250), (0.005, 1), (0.125, 13), (-3, 0), ("free", 0),
        (float("inf"), 0), (None, 0),
    ])
    def test_unit_amount(self, price, expected) -> None:
        assert build_line_item({"price": price})["price_data"]["unit_amount"] == expected

    def test_fallback_name_and_image(self) -> None:
        line = build_line_item({"title": "", "image": "https://img.test/1.png"})
        product = line["price_data"]["product_data"]
        assert product["name"] == "Product"
        assert product["images"] == ["https://img.test/1.png"]

    def test_currency_passed_through(self) -> None:
        assert build_line_item({}, currency="eur")["price_data"]["currency"] == "eur"

    def test_non_object_item_rejected(self) -> None:
        with pytest.raises(ValidationError):
            build_line_item("shoe")


class TestBuildLineItems:
    @pytest.mark.parametrize("cart", [None, [], {}, "items", 3])
    def test_missing_or_empty_rejected(self, cart) -> None:
        with pytest.raises(ValidationError, match="Cart is empty"):
            build_line_items(cart)

    def test_maps_every_item(self) -> None:
        lines = build_line_items([{"title": "A"}, {"title": "B", "qty": 2}])
        assert [line["quantity"] for line in lines] == [1, 2]


# ---------------------------------------------------------------------------
# CheckoutService
# ---------------------------------------------------------------------------

class TestCheckoutService:
    async def test_unconfigured_raises_configuration_error(self) -> None:
        service = _service(None)
        assert service.configured is False
        with pytest.raises(ConfigurationError):
            await service.create_session(_CLAIMS, [{"title": "Shoe"}])

    async def test_success_returns_url_only(self) -> None:
        processor = FakeProcessor()
        url = await _service(processor).create_session(
            _CLAIMS, [{"title": "Shoe", "price": 19.99, "qty": 2}]
        )
        assert url == "https://pay.test/session/abc"

        params = processor.calls[0]
        assert params["mode"] == "payment"
        assert params["success_url"] == "http://shop.test/success?session_id={CHECKOUT_SESSION_ID}"
        assert params["cancel_url"] == "http://shop.test/cart"
        assert "customer_email" not in params
        assert params["metadata"] == {"user_id": "42"}
        assert params["line_items"][0]["quantity"] == 2
        assert params["line_items"][0]["price_data"]["unit_amount"] == 1999

    @pytest.mark.parametrize("cart", [None, []])
    async def test_empty_cart_never_reaches_processor(self, cart) -> None:
        processor = FakeProcessor()
        with pytest.raises(ValidationError):
            await _service(processor).create_session(_CLAIMS, cart)
        assert processor.calls == []

    async def test_processor_failure_maps_to_payment_error(self, caplog) -> None:
        processor = FakeProcessor(error=RuntimeError("card network down"))
        with pytest.raises(PaymentError) as info:
            await _service(processor).create_session(_CLAIMS, [{"title": "Shoe"}])

        assert info.value.status_code == 500
        assert info.value.to_payload() == {"message": "Payment session creation failed"}
        assert "Payment session creation failed" in caplog.text

    async def test_processor_timeout(self) -> None:
        with pytest.raises(PaymentError) as info:
            await _service(SlowProcessor(), timeout=0.1).create_session(_CLAIMS, [{"title": "Shoe"}])
        assert info.value.code == "Timeout"


# ---------------------------------------------------------------------------
# Stripe adapter
# ---------------------------------------------------------------------------

class TestStripeCheckoutProcessor:
    def test_passes_key_and_params(self) -> None:
        with patch("backend.checkout.processor.stripe.StripeClient") as client_cls:
            create = client_cls.return_value.checkout.sessions.create
            create.return_value = SimpleNamespace(url="https://checkout.stripe.test/c/1")
            url = StripeCheckoutProcessor("sk_test_123").create_checkout_session({"mode": "payment"})

        assert url == "https://checkout.stripe.test/c/1"
        assert client_cls.call_args.args == ("sk_test_123",)
        create.assert_called_once_with(params={"mode": "payment"})

    def test_http_timeout_matches_bound_without_retries(self) -> None:
        with patch("backend.checkout.processor.stripe.StripeClient") as client_cls, patch(
            "backend.checkout.processor.stripe.RequestsClient"
        ) as http_cls:
            processor = StripeCheckoutProcessor("sk_test_123", timeout=7.5)

        assert processor.timeout == 7.5
        http_cls.assert_called_once_with(timeout=7.5)
        kwargs = client_cls.call_args.kwargs
        assert kwargs["http_client"] is http_cls.return_value
        assert kwargs["max_network_retries"] == 0

    def test_missing_url_is_an_error(self) -> None:
        with patch("backend.checkout.processor.stripe.StripeClient") as client_cls:
            client_cls.return_value.checkout.sessions.create.return_value = SimpleNamespace(url=None)
            with pytest.raises(Exception):
                StripeCheckoutProcessor("sk_test_123").create_checkout_session({})
