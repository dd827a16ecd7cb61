from __future__ import annotations

import logging

from celery import Celery
from celery.schedules import crontab

from event_planner.core.config import settings


logger = logging.getLogger(__name__)

celery_app = Celery("event-planner", include=["event_planner.tasks.cleanup"])

if settings.CELERY_BROKER_URL.startswith("memory://"):
    logger.warning("CELERY_BROKER_URL is not configured; Celery will run in in-memory mode.")

celery_app.conf.update(
    broker_url=settings.CELERY_BROKER_URL,
    result_backend=None,
    task_default_queue="maintenance",
    task_serializer="json",
    accept_content=["json"],
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    broker_connection_retry_on_startup=True,
    timezone="UTC",
    enable_utc=True,
)


def build_beat_schedule(config=settings) -> dict:
    """
    Beat entries for the maintenance jobs. A job whose flag is off is simply
    not scheduled.
    """
    schedule: dict = {}
    if config.REFRESH_TOKEN_CLEANUP_ENABLED:
        schedule["cleanup-expired-refresh-tokens"] = {
            "task": "cleanup.expired_refresh_tokens",
            "schedule": crontab(minute=0),
        }
        schedule["cleanup-revoked-refresh-tokens"] = {
            "task": "cleanup.revoked_refresh_tokens",
            "schedule": crontab(minute=0, hour=2),
        }
    if config.UNVERIFIED_USER_CLEANUP_ENABLED:
        schedule["cleanup-unverified-users"] = {
            "task": "cleanup.unverified_users",
            "schedule": crontab(minute=0, hour="*/6"),
        }
    if config.PENDING_DELETION_CLEANUP_ENABLED:
        schedule["cleanup-pending-deletion-users"] = {
            "task": "cleanup.pending_deletion_users",
            "schedule": crontab(minute=0, hour=3),
        }
    if config.PASSWORD_RESET_CLEANUP_ENABLED:
        schedule["cleanup-password-reset-tokens"] = {
            "task": "cleanup.password_reset_tokens",
            "schedule": crontab(minute="*/30"),
        }
    return schedule


celery_app.conf.beat_schedule = build_beat_schedule()
