"""bcrypt password hashing for the user store.

``verify_password`` runs exactly one bcrypt comparison per call, whatever the
input: a missing user, an empty secret, or a corrupt stored hash are all
checked against a dummy hash made at import time.
"""

from __future__ import annotations

import bcrypt

from course_api.core import config

BCRYPT_MAX_PASSWORD_BYTES = 72

_DUMMY_HASH = bcrypt.hashpw(b"course-api-dummy-password", bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS))


class PasswordHashError(ValueError):
    pass


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise PasswordHashError("Password is empty.")
    if len(password) > BCRYPT_MAX_PASSWORD_BYTES:
        raise PasswordHashError(f"Password must be {BCRYPT_MAX_PASSWORD_BYTES} bytes or fewer")
    return bcrypt.hashpw(password, bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str | None, password_hash: str | None) -> bool:
    """Return True only if ``plain_password`` matches ``password_hash``.

    Pass ``password_hash=None`` when no user was found.
    """
    candidate = (plain_password or "").encode("utf-8")
    stored = (password_hash or "").encode("utf-8")
    acceptable = bool(candidate) and bool(stored) and len(candidate) <= BCRYPT_MAX_PASSWORD_BYTES

    try:
        matched = bcrypt.checkpw(candidate[:BCRYPT_MAX_PASSWORD_BYTES], stored or _DUMMY_HASH)
    except ValueError:
        # Unreadable stored hash; pay for a comparison anyway.
        bcrypt.checkpw(b"x", _DUMMY_HASH)
        matched = False

    return acceptable and matched
