"""Registration and login on top of the credential store and token codec."""

from __future__ import annotations

import logging
from typing import Any, Optional

from backend.auth.models import Identity, new_identity_id
from backend.auth.passwords import hash_password, verify_password
from backend.auth.store import CredentialStore
from backend.auth.tokens import TokenCodec
from backend.errors import Unauthenticated, ValidationError

logger = logging.getLogger(__name__)

# Same message for unknown email and wrong password.
INVALID_CREDENTIALS = "Invalid credentials"


class AuthService:
    def __init__(self, store: CredentialStore, tokens: TokenCodec) -> None:
        self.store = store
        self.tokens = tokens

    def _session(self, identity: Identity) -> dict[str, Any]:
        return {"token": self.tokens.issue(identity), "user": identity.public()}

    def register(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
    ) -> dict[str, Any]:
        """Create an identity and return ``{"token", "user"}``.

        Raises:
            ValidationError: name, email or password missing.
            Conflict: The email is already registered.
        """
        if not name or not email or not password:
            raise ValidationError("name, email, password required")

        identity = Identity(
            id=new_identity_id(),
            name=name,
            email=email,
            password_hash=hash_password(password),
        )
        self.store.insert(identity)
        logger.info("Registered user %s", identity.id)
        return self._session(identity)

    def login(self, email: Optional[str], password: Optional[str]) -> dict[str, Any]:
        """Check credentials and return a fresh ``{"token", "user"}``.

        Raises:
            ValidationError: email or password missing.
            Unauthenticated: Unknown email or wrong password.
        """
        if not email or not password:
            raise ValidationError("email, password required")

        identity = self.store.find_by_email(email)
        stored_hash = identity.password_hash if identity else None
        if not verify_password(password, stored_hash) or identity is None:
            raise Unauthenticated(INVALID_CREDENTIALS)
        return self._session(identity)

    def current_user(self, token: str) -> dict[str, Any]:
        """Return the decoded claims of a valid *token*."""
        return self.tokens.verify(token)
