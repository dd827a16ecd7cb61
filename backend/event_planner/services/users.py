# event_planner/services/users.py
"""
User management helpers.

Responsibilities:
- Registration (unverified account + verification email)
- Lookups by username or email
- Self-service deletion with a grace period
- Batch removal of stale unverified accounts and accounts past their grace period
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from event_planner.core.clock import utc_now
from event_planner.core.config import settings
from event_planner.core.errors import ConflictError
from event_planner.core.password_policy import ensure_strong_password
from event_planner.core.security import hash_password
from event_planner.models.user import Role, User
from event_planner.services.email_verification import issue_email_verification_token, send_verification_email
from event_planner.services.refresh_tokens import get_refresh_token_store

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Look up a user by email address."""
    return db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username.strip()).first()


def register_user(
    db: Session,
    *,
    username: str,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    timezone: str | None = None,
) -> User:
    """
    Create an unverified USER account and send its verification email.

    Raises:
        ConflictError: username or email already taken
        HTTPException(400): password fails the policy
    """
    username = username.strip()
    email = email.strip().lower()

    ensure_strong_password(password, email=email, username=username)

    if get_user_by_username(db, username) is not None:
        raise ConflictError("Username already taken", code="USERNAME_ALREADY_EXISTS")
    if get_user_by_email(db, email) is not None:
        raise ConflictError("Email already registered", code="EMAIL_ALREADY_EXISTS")

    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        timezone=(timezone or "UTC").strip() or "UTC",
        email_verified=False,
        email_verified_at=None,
        created_at=utc_now(),
    )
    user.roles = {Role.USER}
    db.add(user)
    db.flush()
    try:
        token = issue_email_verification_token(db, user)
        send_verification_email(email, token)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(user)
    logger.info("Registered user_id=%s username=%s", user.id, user.username)
    return user


def mark_user_for_deletion(db: Session, user: User, *, now: datetime | None = None) -> User:
    """
    Soft delete: the account stops authenticating immediately and is purged
    once the grace period ends. All refresh tokens are revoked.
    """
    now = now or utc_now()
    user.mark_for_deletion(now, settings.USER_DELETION_GRACE_PERIOD_DAYS)
    db.commit()

    get_refresh_token_store().revoke_all_for_user(db, user.id)
    db.refresh(user)
    logger.info("User user_id=%s scheduled for deletion at %s", user.id, user.scheduled_deletion_date)
    return user


# -------------------------
# Batch cleanup
# -------------------------
def find_stale_unverified_users(db: Session, now: datetime, max_age_hours: int) -> list[User]:
    cutoff = now - timedelta(hours=max_age_hours)
    return (
        db.query(User)
        .filter(User.email_verified.is_(False), User.created_at < cutoff)
        .order_by(User.id.asc())
        .all()
    )


def find_users_due_for_deletion(db: Session, now: datetime) -> list[User]:
    return (
        db.query(User)
        .filter(
            User.is_pending_deletion.is_(True),
            User.scheduled_deletion_date.is_not(None),
            User.scheduled_deletion_date < now,
        )
        .order_by(User.id.asc())
        .all()
    )
