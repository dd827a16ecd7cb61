from __future__ import annotations

from fastapi import HTTPException
from sqlalchemy.orm import Session

from event_planner.auth.ownership import validate_event_ownership
from event_planner.core.clock import as_utc
from event_planner.core.errors import EventNotFoundError
from event_planner.models.event import Event
from event_planner.services.labels import resolve_label


def get_event_for_user(db: Session, event_id: int, user_id: int) -> Event:
    event = db.get(Event, event_id)
    if not event:
        raise EventNotFoundError()
    validate_event_ownership(user_id, event)
    return event


def _check_times(start, end) -> None:
    if start is not None and end is not None and as_utc(end) < as_utc(start):
        raise HTTPException(status_code=400, detail="end_time must not be before start_time")


def create_event(db: Session, user_id: int, data: dict) -> Event:
    _check_times(data.get("start_time"), data.get("end_time"))
    event = Event(
        creator_id=user_id,
        name=data["name"].strip(),
        description=data.get("description"),
        start_time=data["start_time"],
        end_time=data.get("end_time"),
        label_id=resolve_label(db, data.get("label_id"), user_id),
        is_completed=False,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


def update_event(db: Session, event: Event, user_id: int, changes: dict) -> Event:
    start = changes.get("start_time") or event.start_time
    end = changes["end_time"] if "end_time" in changes else event.end_time
    _check_times(start, end)

    if "label_id" in changes:
        event.label_id = resolve_label(db, changes["label_id"], user_id)
    if changes.get("name") is not None:
        event.name = changes["name"].strip()
    for field in ("start_time", "is_completed"):
        # Non-nullable columns ignore explicit nulls.
        if changes.get(field) is not None:
            setattr(event, field, changes[field])
    for field in ("description", "end_time"):
        if field in changes:
            setattr(event, field, changes[field])

    db.commit()
    db.refresh(event)
    return event
