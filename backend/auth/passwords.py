"""bcrypt password hashing."""

from __future__ import annotations

import bcrypt

BCRYPT_ROUNDS = 10

# bcrypt only looks at the first 72 bytes; newer releases raise instead of
# truncating, so truncate explicitly.
_MAX_PASSWORD_BYTES = 72

# Verified against when the email is unknown so both login failure paths
# spend the same bcrypt time.
_DUMMY_HASH = bcrypt.hashpw(b"not-a-real-password", bcrypt.gensalt(rounds=BCRYPT_ROUNDS))


def _secret(password: str) -> bytes:
    return password.encode("utf-8")[:_MAX_PASSWORD_BYTES]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_secret(password), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("ascii")


def verify_password(password: str, password_hash: str | None) -> bool:
    """Return ``True`` if *password* matches *password_hash*.

    A ``None`` hash is checked against a throwaway hash and always fails.
    """
    target = password_hash.encode("ascii") if password_hash else _DUMMY_HASH
    try:
        ok = bcrypt.checkpw(_secret(password), target)
    except ValueError:
        return False
    return ok and password_hash is not None
