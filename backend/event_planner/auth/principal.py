# event_planner/auth/principal.py
"""
User lookup adapter.

Wraps a persisted User in the shape authorization checks need: a credential
accessor, the granted authorities and an enabled flag. Re-derived on every
construction; nothing is cached.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import func
from sqlalchemy.orm import Session

from event_planner.core.errors import UserNotFoundError
from event_planner.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserPrincipal:
    user_id: int
    username: str
    password: str = field(repr=False)
    authorities: frozenset[str]
    is_enabled: bool

    # Accounts never expire or lock; only pending deletion disables one.
    is_account_non_expired: bool = True
    is_account_non_locked: bool = True
    is_credentials_non_expired: bool = True

    @classmethod
    def from_user(cls, user: User) -> UserPrincipal:
        if user is None:
            raise ValueError("User cannot be None")
        authorities = frozenset(role.authority for role in user.roles)
        return cls(
            user_id=user.id,
            username=user.username,
            password=user.password_hash,
            authorities=authorities,
            is_enabled=not bool(user.is_pending_deletion),
        )

    def has_authority(self, authority: str) -> bool:
        return authority in self.authorities


def load_user_by_id(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        logger.info("No user found for id=%s", user_id)
        raise UserNotFoundError()
    return user


def load_user_by_username(db: Session, username_or_email: str) -> User:
    """Look up a user by username, or by email when the value contains '@'."""
    value = (username_or_email or "").strip()
    if "@" in value:
        user = db.query(User).filter(func.lower(User.email) == value.lower()).first()
    else:
        user = db.query(User).filter(User.username == value).first()
    if user is None:
        raise UserNotFoundError()
    return user
