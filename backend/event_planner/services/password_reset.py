from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from event_planner.core.clock import as_utc, utc_now
from event_planner.core.config import settings
from event_planner.core.errors import PasswordResetError
from event_planner.core.password_policy import ensure_strong_password
from event_planner.core.security import generate_link_token, hash_link_token, hash_password
from event_planner.models.password_reset_token import PasswordResetToken
from event_planner.models.user import User
from event_planner.services.email import send_email
from event_planner.services.refresh_tokens import get_refresh_token_store

logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = "If your email is registered, you will receive a password reset link shortly."
RESET_PASSWORD_MESSAGE = "Your password has been successfully reset. Please log in with your new password."


def _send_reset_email(email: str, token: str) -> None:
    reset_link = f"{settings.FRONTEND_BASE_URL}/reset-password?token={token}"
    body = "\n".join(
        [
            "We received a request to reset your Event Planner password.",
            "",
            "Reset it using the link below:",
            reset_link,
            "",
            f"This link expires in {settings.PASSWORD_RESET_TOKEN_EXPIRE_MINUTES} minutes.",
            "If you did not request a reset, you can ignore this email.",
        ]
    )
    send_email(to_email=email, subject="Reset your Event Planner password", body=body)


def request_password_reset(db: Session, email: str, *, now: datetime | None = None) -> str:
    """
    Sends a reset link when a verified, active account matches the email.
    The returned message is identical whether or not it does.
    """
    now = now or utc_now()
    normalized = (email or "").strip().lower()
    user = db.query(User).filter(func.lower(User.email) == normalized).first()
    if user is None or not user.email_verified or user.is_pending_deletion:
        logger.info("Password reset requested for unknown or inactive account")
        return FORGOT_PASSWORD_MESSAGE

    token = generate_link_token()
    try:
        # Only the newest link stays usable.
        (
            db.query(PasswordResetToken)
            .filter(PasswordResetToken.user_id == user.id, PasswordResetToken.used_at.is_(None))
            .delete(synchronize_session=False)
        )
        db.add(
            PasswordResetToken(
                user_id=user.id,
                token_hash=hash_link_token(token),
                expires_at=now + timedelta(minutes=settings.PASSWORD_RESET_TOKEN_EXPIRE_MINUTES),
                created_at=now,
            )
        )
        db.flush()
        _send_reset_email(user.email, token)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Password reset link issued for user_id=%s", user.id)
    return FORGOT_PASSWORD_MESSAGE


def reset_password(db: Session, token: str, new_password: str, *, now: datetime | None = None) -> User:
    """
    Consumes a reset token, stores the new password hash and revokes every
    refresh token the user holds.
    """
    now = now or utc_now()
    raw = (token or "").strip()
    if not raw:
        raise PasswordResetError()

    record = db.query(PasswordResetToken).filter(PasswordResetToken.token_hash == hash_link_token(raw)).first()
    if record is None or record.used_at is not None or as_utc(record.expires_at) <= now:
        raise PasswordResetError()

    user = record.user
    if user.is_pending_deletion:
        raise PasswordResetError()

    ensure_strong_password(new_password, email=user.email, username=user.username)

    user.password_hash = hash_password(new_password)
    record.used_at = now
    db.commit()

    revoked = get_refresh_token_store().revoke_all_for_user(db, user.id)
    logger.info("Password reset for user_id=%s; revoked %s session(s)", user.id, revoked)
    return user


def cleanup_password_reset_tokens(db: Session, now: datetime) -> int:
    """Deletes expired or already used reset tokens. Caller commits."""
    return (
        db.query(PasswordResetToken)
        .filter(or_(PasswordResetToken.expires_at < now, PasswordResetToken.used_at.is_not(None)))
        .delete(synchronize_session=False)
    )
