from __future__ import annotations

from sqlalchemy.orm import Session

from event_planner.auth.ownership import validate_label_ownership
from event_planner.core.errors import ConflictError, LabelNotFoundError
from event_planner.models.label import Label
from event_planner.services.badges import get_badge_for_user


def get_label_for_user(db: Session, label_id: int, user_id: int) -> Label:
    label = db.get(Label, label_id)
    if not label:
        raise LabelNotFoundError()
    validate_label_ownership(user_id, label)
    return label


def resolve_label(db: Session, label_id: int | None, user_id: int) -> int | None:
    """Checks that an optional label reference points at one of the user's labels."""
    if label_id is None:
        return None
    return get_label_for_user(db, label_id, user_id).id


def ensure_unique_label_name(db: Session, user_id: int, name: str, *, exclude_id: int | None = None) -> None:
    q = db.query(Label).filter(Label.creator_id == user_id, Label.name == name)
    if exclude_id is not None:
        q = q.filter(Label.id != exclude_id)
    if q.first():
        raise ConflictError("A label with this name already exists", code="LABEL_ALREADY_EXISTS")


def create_label(db: Session, user_id: int, *, name: str, color: str, badge_id: int | None) -> Label:
    name = name.strip()
    ensure_unique_label_name(db, user_id, name)
    if badge_id is not None:
        get_badge_for_user(db, badge_id, user_id)

    label = Label(creator_id=user_id, name=name, color=color.upper(), badge_id=badge_id)
    db.add(label)
    db.commit()
    db.refresh(label)
    return label


def update_label(db: Session, label: Label, user_id: int, changes: dict) -> Label:
    if "name" in changes and changes["name"] is not None:
        name = changes["name"].strip()
        ensure_unique_label_name(db, user_id, name, exclude_id=label.id)
        label.name = name
    if changes.get("color") is not None:
        label.color = changes["color"].upper()
    if "badge_id" in changes:
        if changes["badge_id"] is not None:
            get_badge_for_user(db, changes["badge_id"], user_id)
        label.badge_id = changes["badge_id"]
    db.commit()
    db.refresh(label)
    return label
