from __future__ import annotations

from sqlalchemy.orm import Session

from event_planner.auth.ownership import validate_badge_ownership
from event_planner.core.errors import BadgeNotFoundError
from event_planner.models.badge import Badge


def get_badge_for_user(db: Session, badge_id: int, user_id: int) -> Badge:
    badge = db.get(Badge, badge_id)
    if not badge:
        raise BadgeNotFoundError()
    validate_badge_ownership(user_id, badge)
    return badge


def create_badge(db: Session, user_id: int, *, name: str, sort_order: int) -> Badge:
    badge = Badge(creator_id=user_id, name=name.strip(), sort_order=sort_order)
    db.add(badge)
    db.commit()
    db.refresh(badge)
    return badge


def update_badge(db: Session, badge: Badge, changes: dict) -> Badge:
    if changes.get("name") is not None:
        badge.name = changes["name"].strip()
    if changes.get("sort_order") is not None:
        badge.sort_order = changes["sort_order"]
    db.commit()
    db.refresh(badge)
    return badge
