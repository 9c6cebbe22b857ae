"""Authentication endpoints.

Routes
------
POST /api/auth/register    Body: {"name", "email", "password"}
POST /api/auth/login       Body: {"email", "password"}
GET  /api/auth/me          Bearer token required
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from backend.api.deps import get_auth_service, require_user
from backend.auth.service import AuthService

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

# Fields are optional so missing values reach the service and come back as a
# 400 with a readable message.
class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/register")
def register(
    body: Optional[RegisterRequest] = None,
    auth: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    body = body or RegisterRequest()
    return auth.register(body.name, body.email, body.password)


@router.post("/login")
def login(
    body: Optional[LoginRequest] = None,
    auth: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    body = body or LoginRequest()
    return auth.login(body.email, body.password)


@router.get("/me")
def me(user: dict[str, Any] = Depends(require_user)) -> dict[str, Any]:
    return {"user": user}
