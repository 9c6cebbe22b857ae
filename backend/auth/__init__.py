"""Demo authentication: in-memory identities and signed session tokens."""

from backend.auth.models import Identity
from backend.auth.service import AuthService
from backend.auth.store import CredentialStore, InMemoryCredentialStore
from backend.auth.tokens import TokenCodec

__all__ = [
    "AuthService",
    "CredentialStore",
    "Identity",
    "InMemoryCredentialStore",
    "TokenCodec",
]
