# mindspace/backend/core/security.py
from __future__ import annotations

import re

from passlib.context import CryptContext

# pbkdf2_sha256: 29000+ rounds by default
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

USERNAME_RE = re.compile(r"^[A-Za-z0-9_]{3,50}$")
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
EMAIL_MAX_LEN = 100
PASSWORD_MIN_LEN = 6


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(password, hashed)
    except (ValueError, TypeError):
        return False


def username_problem(username: str) -> str | None:
    if not 3 <= len(username) <= 50:
        return "Username must be between 3 and 50 characters"
    if not USERNAME_RE.match(username):
        return "Username can only contain letters, numbers, and underscores"
    return None


def email_problem(email: str) -> str | None:
    if len(email) > EMAIL_MAX_LEN or not EMAIL_RE.match(email):
        return "Please provide a valid email address"
    return None


def password_problem(password: str) -> str | None:
    """Composite rule: >=6 chars with a lowercase, an uppercase and a digit."""
    if len(password) < PASSWORD_MIN_LEN:
        return "Password must be at least 6 characters long"
    if not (
        re.search(r"[a-z]", password)
        and re.search(r"[A-Z]", password)
        and re.search(r"\d", password)
    ):
        return "Password must contain at least one lowercase letter, one uppercase letter, and one number"
    return None
