"""Security and password helper functions."""

from __future__ import annotations

import re
import secrets

import bcrypt

from clubhouse.core.config import get_settings
from clubhouse.core.constants import MEMBERSHIP_ID_PREFIX, PASSWORD_MAX_BYTES, PASSWORD_MIN_LENGTH


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash password using bcrypt."""

    cost = rounds if rounds is not None else get_settings().password_hash_rounds
    hashed_password = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=cost))
    return hashed_password.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify plain password against stored hash."""

    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def password_policy_errors(password: str) -> list[str]:
    """Return every password policy violation, empty when the password passes."""

    errors: list[str] = []
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        errors.append(f"Password must be at most {PASSWORD_MAX_BYTES} bytes long")
    if re.search(r"[A-Z]", password) is None:
        errors.append("Password must contain at least one uppercase letter")
    if re.search(r"[a-z]", password) is None:
        errors.append("Password must contain at least one lowercase letter")
    if re.search(r"[0-9]", password) is None:
        errors.append("Password must contain at least one number")
    if re.search(r"[^A-Za-z0-9]", password) is None:
        errors.append("Password must contain at least one special character")
    return errors


def generate_session_token() -> str:
    """Return an opaque bearer token."""

    return secrets.token_urlsafe(32)


def generate_membership_id() -> str:
    """Return a display membership id such as ``MEM-482913``."""

    return f"{MEMBERSHIP_ID_PREFIX}{100000 + secrets.randbelow(900000)}"
