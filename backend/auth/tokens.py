"""Session token codec: compact HS256 JWTs carrying the public identity."""

from __future__ import annotations

import time
from typing import Any, Optional

import jwt

from backend.auth.models import Identity
from backend.errors import InvalidToken

ALGORITHM = "HS256"
DEFAULT_TTL_SECONDS = 2 * 60 * 60


class TokenCodec:
    """Signs and verifies session tokens with a process-wide secret."""

    def __init__(self, secret: str, ttl_seconds: int = DEFAULT_TTL_SECONDS) -> None:
        if not secret:
            raise ValueError("token secret must not be empty")
        self._secret = secret
        self.ttl_seconds = ttl_seconds

    def issue(self, identity: Identity, now: Optional[float] = None) -> str:
        issued_at = int(now if now is not None else time.time())
        claims = {
            **identity.public(),
            "iat": issued_at,
            "exp": issued_at + self.ttl_seconds,
        }
        return jwt.encode(claims, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> dict[str, Any]:
        """Decode *token* and return its claims.

        Raises:
            InvalidToken: Bad signature, malformed token, or expired.
        """
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp", "iat"]},
            )
        except jwt.InvalidTokenError as exc:
            raise InvalidToken("Invalid token") from exc
