"""Credential store interface and the in-memory implementation.

Identities live only for the lifetime of the process.  Callers depend on the
:class:`CredentialStore` protocol so a persistent backend can replace
:class:`InMemoryCredentialStore` without touching them.
"""

from __future__ import annotations

import threading
from typing import Optional, Protocol

from backend.auth.models import Identity, normalize_email
from backend.errors import Conflict


class CredentialStore(Protocol):
    """Interface for identity storage."""

    def insert(self, identity: Identity) -> Identity:
        ...

    def find_by_email(self, email: str) -> Optional[Identity]:
        ...

    def count(self) -> int:
        ...


class InMemoryCredentialStore:
    """Process-local identity store keyed by normalized email."""

    def __init__(self) -> None:
        self._by_email: dict[str, Identity] = {}
        # Guards the check-then-insert in insert().
        self._lock = threading.Lock()

    def insert(self, identity: Identity) -> Identity:
        """Store *identity*.

        Raises:
            Conflict: An identity with the same normalized email exists.
        """
        key = identity.normalized_email
        with self._lock:
            if key in self._by_email:
                raise Conflict("Email already registered")
            self._by_email[key] = identity
        return identity

    def find_by_email(self, email: str) -> Optional[Identity]:
        return self._by_email.get(normalize_email(email))

    def count(self) -> int:
        return len(self._by_email)

    def reset(self) -> None:
        with self._lock:
            self._by_email.clear()
