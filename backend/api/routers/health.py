"""Liveness endpoints.

Routes
------
GET /health        Plain-text ``OK`` for load balancers
GET /api/health    JSON status including upstream and payment configuration
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/health", response_class=PlainTextResponse)
def health() -> str:
    return "OK"


@router.get("/api/health")
def health_detail(request: Request) -> dict[str, Any]:
    state = request.app.state
    return {
        "status": "ok",
        "catalog": state.catalog.base_url,
        "payments_configured": state.checkout.configured,
        "users": state.auth.store.count(),
    }
