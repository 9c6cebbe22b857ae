"""Request-scoped dependencies: service lookups and the bearer-token gate."""

from __future__ import annotations

from typing import Any

from fastapi import Request

from backend.auth.service import AuthService
from backend.catalog.proxy import CatalogProxy
from backend.checkout.service import CheckoutService
from backend.errors import Unauthenticated

_BEARER_PREFIX = "Bearer "


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth


def get_catalog(request: Request) -> CatalogProxy:
    return request.app.state.catalog


def get_checkout(request: Request) -> CheckoutService:
    return request.app.state.checkout


def require_user(request: Request) -> dict[str, Any]:
    """Auth gate for protected routes.

    Reads ``Authorization: Bearer <token>``, verifies it, stores the claims
    on ``request.state.user`` and returns them.

    Raises:
        Unauthenticated: No bearer token on the request.
        InvalidToken: The token failed verification.
    """
    header = request.headers.get("authorization", "")
    token = header[len(_BEARER_PREFIX):].strip() if header.startswith(_BEARER_PREFIX) else ""
    if not token:
        raise Unauthenticated("No token")

    auth: AuthService = request.app.state.auth
    claims = auth.current_user(token)
    request.state.user = claims
    return claims
