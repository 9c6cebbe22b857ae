"""Checkout endpoints.

Routes
------
POST /api/checkout/create-session    Bearer token required.
                                     Body: {"cartItems": [{title, price, qty, image}]}
                                     Returns {"url": "<hosted checkout URL>"}
"""

from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from backend.api.deps import get_checkout, require_user
from backend.checkout.service import CheckoutService
from backend.errors import ValidationError

router = APIRouter()


class CreateSessionResponse(BaseModel):
    url: str


async def _read_cart(request: Request) -> Any:
    # Read by hand so a bad body never outranks the auth gate's 401.
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        payload = json.loads(raw)
    except ValueError as exc:
        raise ValidationError("Cart is empty") from exc
    if not isinstance(payload, dict):
        raise ValidationError("Cart is empty")
    return payload.get("cartItems")


@router.post("/create-session", response_model=CreateSessionResponse)
async def create_session(
    request: Request,
    user: dict[str, Any] = Depends(require_user),
    checkout: CheckoutService = Depends(get_checkout),
) -> dict[str, str]:
    cart_items = await _read_cart(request)
    url = await checkout.create_session(user, cart_items)
    return {"url": url}
