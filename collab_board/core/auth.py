"""Password hashing for post secrets and the admin credential.

Both use salted bcrypt hashes with the cost factor from settings
(``APP_BCRYPT_ROUNDS``, 10 by default).
"""

from __future__ import annotations

import bcrypt

from collab_board.core.config import settings

# bcrypt only looks at the first 72 bytes of a secret
BCRYPT_MAX_BYTES = 72


def _encode(plain: str) -> bytes:
    return plain.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(plain: str, rounds: int | None = None) -> str:
    """Return the bcrypt hash of ``plain`` as text suitable for storage.

    Args:
        plain: User-chosen secret.
        rounds: Cost factor override; defaults to ``APP_BCRYPT_ROUNDS``.
    """
    salt = bcrypt.gensalt(rounds=rounds or settings.app.bcrypt_rounds)
    return bcrypt.hashpw(_encode(plain), salt).decode("ascii")


def verify_password(plain: str, hashed: str) -> bool:
    """Check ``plain`` against a stored bcrypt hash.

    A malformed stored hash counts as a mismatch rather than an error.
    """
    try:
        return bcrypt.checkpw(_encode(plain), hashed.encode("ascii"))
    except ValueError:
        return False


def normalize_secret(value: str | None) -> str | None:
    """Return ``value`` unless it is missing or whitespace-only."""
    if value is None or not value.strip():
        return None
    return value
