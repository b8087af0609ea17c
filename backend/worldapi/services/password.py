"""
Password hashing helpers (bcrypt).
"""

from __future__ import annotations

import logging

import bcrypt

from worldapi.exceptions import PasswordHashError

logger = logging.getLogger(__name__)

# bcrypt.gensalt() default
DEFAULT_ROUNDS = 12

# bcrypt only reads this many bytes of a password
MAX_PASSWORD_BYTES = 72


def hash_password(plain_password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    password = (plain_password or "").encode("utf-8")
    try:
        return bcrypt.hashpw(password, bcrypt.gensalt(rounds=rounds)).decode("utf-8")
    except (ValueError, TypeError, MemoryError) as exc:
        logger.error("Password hashing failed: %s", type(exc).__name__)
        raise PasswordHashError(context={"error_type": type(exc).__name__}) from exc


def verify_password(password_hash: str, plain_password: str) -> bool:
    """
    Check `plain_password` against a stored bcrypt hash.

    Returns False on an ordinary mismatch, including a password longer than
    bcrypt can have hashed. A hash bcrypt cannot parse raises
    PasswordHashError instead, since that is a data problem, not a bad login.
    """
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if len(password) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError as exc:
        logger.error("Stored password hash is malformed")
        raise PasswordHashError(
            message="Stored password hash is malformed",
            context={"error_type": type(exc).__name__},
        ) from exc
