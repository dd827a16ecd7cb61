from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy import func
from sqlalchemy.orm import Session

from event_planner.core.clock import as_utc, utc_now
from event_planner.core.config import settings
from event_planner.core.errors import EmailVerificationError
from event_planner.core.security import generate_link_token, hash_link_token
from event_planner.models.email_verification_token import EmailVerificationToken
from event_planner.models.user import User
from event_planner.services.email import send_email

logger = logging.getLogger(__name__)

RESEND_VERIFICATION_MESSAGE = "If an account with that email exists, a new verification email has been sent."


def issue_email_verification_token(db: Session, user: User, *, now: datetime | None = None) -> str:
    """
    Generates a new verification token for the given user, stores its hash so
    it can be verified/invalidated later, and returns the raw token string.
    Caller commits.
    """
    now = now or utc_now()
    token = generate_link_token()

    # Remove any previously active tokens so only the latest link works.
    (
        db.query(EmailVerificationToken)
        .filter(EmailVerificationToken.user_id == user.id, EmailVerificationToken.used_at.is_(None))
        .delete(synchronize_session=False)
    )

    db.add(
        EmailVerificationToken(
            user_id=user.id,
            token_hash=hash_link_token(token),
            expires_at=now + timedelta(hours=settings.EMAIL_VERIFY_TOKEN_EXPIRE_HOURS),
            created_at=now,
        )
    )
    db.flush()
    return token


def send_verification_email(email: str, token: str) -> None:
    verify_link = f"{settings.FRONTEND_BASE_URL}/verify-email?token={token}"
    subject = "Verify your Event Planner email"
    body = "\n".join(
        [
            "Welcome to Event Planner!",
            "",
            "Please verify your email by clicking the link below:",
            verify_link,
            "",
            f"This link expires in {settings.EMAIL_VERIFY_TOKEN_EXPIRE_HOURS} hours.",
            "If you did not create this account, you can ignore this email.",
        ]
    )
    msg_id = send_email(to_email=email, subject=subject, body=body)
    logger.info("Verification email queued to=%s provider=%s msg_id=%s", email, settings.EMAIL_PROVIDER, msg_id)


def verify_email(db: Session, token: str, *, now: datetime | None = None) -> User:
    """
    Consumes a verification token and marks its user verified.
    Raises EmailVerificationError for unknown, used or expired tokens.
    """
    now = now or utc_now()
    raw = (token or "").strip()
    if not raw:
        raise EmailVerificationError()

    record = (
        db.query(EmailVerificationToken)
        .filter(EmailVerificationToken.token_hash == hash_link_token(raw))
        .first()
    )
    if record is None or record.used_at is not None:
        raise EmailVerificationError()
    if as_utc(record.expires_at) <= now:
        raise EmailVerificationError()

    user = record.user
    record.used_at = now
    if not user.email_verified:
        user.email_verified = True
        user.email_verified_at = now
    db.commit()

    logger.info("Email verified for user_id=%s", user.id)
    return user


def resend_verification(db: Session, email: str) -> str:
    """
    Issues and sends a fresh link when an unverified account exists. Returns
    the same message whatever the outcome, so it cannot be used to probe
    which emails are registered.
    """
    normalized = (email or "").strip().lower()
    user = db.query(User).filter(func.lower(User.email) == normalized).first()
    if user is None or user.email_verified or user.is_pending_deletion:
        return RESEND_VERIFICATION_MESSAGE

    try:
        token = issue_email_verification_token(db, user)
        send_verification_email(user.email, token)
        db.commit()
    except Exception:
        db.rollback()
        raise

    return RESEND_VERIFICATION_MESSAGE
