"""
Scheduled maintenance jobs.

Each job recomputes what is eligible from the current time, so a run that
fails is simply picked up again by the next one. The purge_* functions hold
the logic and take an open session; the Celery tasks own the session.
"""
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from event_planner.celery_app import celery_app
from event_planner.core.clock import utc_now
from event_planner.core.config import settings
from event_planner.core.database import SessionLocal
from event_planner.services.password_reset import cleanup_password_reset_tokens
from event_planner.services.refresh_tokens import RefreshTokenStore, get_refresh_token_store
from event_planner.services.users import find_stale_unverified_users, find_users_due_for_deletion


logger = logging.getLogger(__name__)


def _with_db_session() -> Session:
    return SessionLocal()


# -------------------------
# Job bodies
# -------------------------
def purge_expired_refresh_tokens(db: Session, store: RefreshTokenStore) -> int:
    deleted = store.cleanup_expired(db)
    logger.info("Deleted %s expired refresh token(s)", deleted)
    return deleted


def purge_revoked_refresh_tokens(db: Session, store: RefreshTokenStore, retention_days: int) -> int:
    deleted = store.cleanup_revoked(db, retention_days)
    logger.info("Deleted %s revoked refresh token(s) older than %s days", deleted, retention_days)
    return deleted


def purge_unverified_users(db: Session, now: datetime, max_age_hours: int) -> int:
    """
    Deletes accounts that never verified their email within max_age_hours.
    Each user is its own transaction; one failure does not stop the batch.
    """
    users = find_stale_unverified_users(db, now, max_age_hours)
    found = len(users)
    deleted = 0

    for user in users:
        user_id = user.id
        try:
            db.delete(user)
            db.commit()
            deleted += 1
        except Exception:
            db.rollback()
            logger.exception("Failed to delete unverified user_id=%s", user_id)

    if deleted < found:
        logger.warning("Deleted %s of %s unverified user(s)", deleted, found)
    else:
        logger.info("Deleted %s unverified user(s)", deleted)
    return deleted


def purge_pending_deletion_users(db: Session, now: datetime) -> int:
    """
    Deletes every account whose grace period has ended, all or nothing.
    Their refresh tokens and owned resources go with them.
    """
    users = find_users_due_for_deletion(db, now)
    if not users:
        return 0

    try:
        for user in users:
            db.delete(user)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Failed to delete %s user(s) pending deletion; batch rolled back", len(users))
        raise

    logger.info("Deleted %s user(s) past their deletion grace period", len(users))
    return len(users)


def purge_password_reset_tokens(db: Session, now: datetime) -> int:
    deleted = cleanup_password_reset_tokens(db, now)
    db.commit()
    logger.info("Deleted %s expired or used password reset token(s)", deleted)
    return deleted


# -------------------------
# Celery tasks
# -------------------------
@celery_app.task(name="cleanup.expired_refresh_tokens")
def cleanup_expired_refresh_tokens() -> None:
    db = _with_db_session()
    try:
        purge_expired_refresh_tokens(db, get_refresh_token_store())
    except Exception:  # pylint: disable=broad-except
        logger.exception("Expired refresh token cleanup failed")
    finally:
        db.close()


@celery_app.task(name="cleanup.revoked_refresh_tokens")
def cleanup_revoked_refresh_tokens() -> None:
    db = _with_db_session()
    try:
        purge_revoked_refresh_tokens(
            db,
            get_refresh_token_store(),
            settings.REFRESH_TOKEN_REVOKED_RETENTION_DAYS,
        )
    except Exception:  # pylint: disable=broad-except
        logger.exception("Revoked refresh token cleanup failed")
    finally:
        db.close()


@celery_app.task(name="cleanup.unverified_users")
def cleanup_unverified_users() -> None:
    db = _with_db_session()
    try:
        purge_unverified_users(db, utc_now(), settings.UNVERIFIED_USER_MAX_AGE_HOURS)
    except Exception:  # pylint: disable=broad-except
        logger.exception("Unverified user cleanup failed")
    finally:
        db.close()


@celery_app.task(name="cleanup.pending_deletion_users")
def cleanup_pending_deletion_users() -> None:
    db = _with_db_session()
    try:
        purge_pending_deletion_users(db, utc_now())
    finally:
        db.close()


@celery_app.task(name="cleanup.password_reset_tokens")
def cleanup_password_reset_tokens_task() -> None:
    db = _with_db_session()
    try:
        purge_password_reset_tokens(db, utc_now())
    except Exception:  # pylint: disable=broad-except
        logger.exception("Password reset token cleanup failed")
    finally:
        db.close()
