# event_planner/auth/ownership.py
"""
Ownership checks. Call after the object is fetched and before any mutation;
these functions never touch the database.
"""
from __future__ import annotations

import logging
from typing import Any

from event_planner.core.errors import (
    BadgeOwnershipError,
    EventOwnershipError,
    LabelOwnershipError,
    OwnershipError,
    RecurringEventOwnershipError,
    UserOwnershipError,
)

logger = logging.getLogger(__name__)


def _require_creator(current_user_id: int, obj: Any, error_cls: type[OwnershipError]) -> None:
    if current_user_id != obj.creator_id:
        logger.warning(
            "User %s is not authorized to access %s %s",
            current_user_id,
            error_cls.resource,
            obj.id,
        )
        raise error_cls(obj.id)


def validate_event_ownership(current_user_id: int, event) -> None:
    _require_creator(current_user_id, event, EventOwnershipError)


def validate_recurring_event_ownership(current_user_id: int, recurring_event) -> None:
    _require_creator(current_user_id, recurring_event, RecurringEventOwnershipError)


def validate_label_ownership(current_user_id: int, label) -> None:
    _require_creator(current_user_id, label, LabelOwnershipError)


def validate_badge_ownership(current_user_id: int, badge) -> None:
    _require_creator(current_user_id, badge, BadgeOwnershipError)


def validate_user_ownership(current_user_id: int, user_id: int) -> None:
    if current_user_id != user_id:
        logger.warning("User %s is not authorized to access user %s", current_user_id, user_id)
        raise UserOwnershipError(user_id)
