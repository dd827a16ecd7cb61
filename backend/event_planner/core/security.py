# event_planner/core/security.py
from __future__ import annotations

import secrets
from hashlib import sha256

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


# -------------------------
# Password hashing
# -------------------------
def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


# -------------------------
# One-time link tokens (email verification, password reset)
# -------------------------
def generate_link_token() -> str:
    """
    Random token sent to the user by email. Only its hash is persisted.
    """
    return secrets.token_urlsafe(48)


def hash_link_token(token: str) -> str:
    return sha256(token.encode("utf-8")).hexdigest()
