"""Dataclass models for registered identities."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any


def normalize_email(email: str) -> str:
    return email.lower()


@dataclass(frozen=True)
class Identity:
    id: str
    name: str
    email: str
    password_hash: str

    @property
    def normalized_email(self) -> str:
        return normalize_email(self.email)

    def public(self) -> dict[str, Any]:
        """Fields that may leave the process.  Never includes the hash."""
        return {"id": self.id, "name": self.name, "email": self.email}


_id_lock = threading.Lock()
_last_id = 0


def new_identity_id() -> str:
    """Return a millisecond-timestamp id, strictly increasing in this process.

    Unique within a single process only; not suitable once identities are
    shared between processes.
    """
    global _last_id
    with _id_lock:
        candidate = int(time.time() * 1000)
        if candidate <= _last_id:
            candidate = _last_id + 1
        _last_id = candidate
    return str(candidate)
