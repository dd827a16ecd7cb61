from __future__ import annotations

from fastapi import HTTPException
from sqlalchemy.orm import Session

from event_planner.auth.ownership import validate_recurring_event_ownership
from event_planner.core.errors import RecurringEventNotFoundError
from event_planner.models.recurring_event import RecurringEvent
from event_planner.services.labels import resolve_label

_REQUIRED = ("name", "start_time", "start_date", "recurrence_rule")
_OPTIONAL = ("description", "end_time", "end_date")


def get_recurring_event_for_user(db: Session, recurring_event_id: int, user_id: int) -> RecurringEvent:
    recurring_event = db.get(RecurringEvent, recurring_event_id)
    if not recurring_event:
        raise RecurringEventNotFoundError()
    validate_recurring_event_ownership(user_id, recurring_event)
    return recurring_event


def _check_dates(start_date, end_date) -> None:
    if start_date is not None and end_date is not None and end_date < start_date:
        raise HTTPException(status_code=400, detail="end_date must not be before start_date")


def create_recurring_event(db: Session, user_id: int, data: dict) -> RecurringEvent:
    _check_dates(data.get("start_date"), data.get("end_date"))
    recurring_event = RecurringEvent(
        creator_id=user_id,
        name=data["name"].strip(),
        description=data.get("description"),
        start_time=data["start_time"],
        end_time=data.get("end_time"),
        start_date=data["start_date"],
        end_date=data.get("end_date"),
        recurrence_rule=data["recurrence_rule"].strip(),
        label_id=resolve_label(db, data.get("label_id"), user_id),
    )
    db.add(recurring_event)
    db.commit()
    db.refresh(recurring_event)
    return recurring_event


def update_recurring_event(db: Session, recurring_event: RecurringEvent, user_id: int, changes: dict) -> RecurringEvent:
    start_date = changes.get("start_date") or recurring_event.start_date
    end_date = changes["end_date"] if "end_date" in changes else recurring_event.end_date
    _check_dates(start_date, end_date)

    if "label_id" in changes:
        recurring_event.label_id = resolve_label(db, changes["label_id"], user_id)
    for field in _REQUIRED:
        # Required columns ignore explicit nulls.
        if changes.get(field) is not None:
            setattr(recurring_event, field, changes[field])
    for field in _OPTIONAL:
        if field in changes:
            setattr(recurring_event, field, changes[field])

    db.commit()
    db.refresh(recurring_event)
    return recurring_event
