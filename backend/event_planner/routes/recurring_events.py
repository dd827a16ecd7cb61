from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from event_planner.core.database import get_db
from event_planner.dependencies.auth import get_current_user
from event_planner.models.recurring_event import RecurringEvent
from event_planner.models.user import User
from event_planner.schemas.common import MessageOut
from event_planner.schemas.recurring_event import RecurringEventCreate, RecurringEventOut, RecurringEventUpdate
from event_planner.services.recurring_events import (
    create_recurring_event,
    get_recurring_event_for_user,
    update_recurring_event,
)

router = APIRouter(prefix="/recurring-events", tags=["recurring-events"], dependencies=[Depends(get_current_user)])


@router.post("", response_model=RecurringEventOut, status_code=status.HTTP_201_CREATED)
def create(
    payload: RecurringEventCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return create_recurring_event(db, user.id, payload.model_dump())


@router.get("", response_model=list[RecurringEventOut])
def list_recurring_events(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return (
        db.query(RecurringEvent)
        .filter(RecurringEvent.creator_id == user.id)
        .order_by(RecurringEvent.start_date.asc(), RecurringEvent.id.asc())
        .all()
    )


@router.get("/{recurring_event_id}", response_model=RecurringEventOut)
def get_recurring_event(
    recurring_event_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return get_recurring_event_for_user(db, recurring_event_id, user.id)


@router.patch("/{recurring_event_id}", response_model=RecurringEventOut)
def patch_recurring_event(
    recurring_event_id: int,
    payload: RecurringEventUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    recurring_event = get_recurring_event_for_user(db, recurring_event_id, user.id)
    return update_recurring_event(db, recurring_event, user.id, payload.model_dump(exclude_unset=True))


@router.delete("/{recurring_event_id}", response_model=MessageOut)
def delete_recurring_event(
    recurring_event_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    recurring_event = get_recurring_event_for_user(db, recurring_event_id, user.id)
    db.delete(recurring_event)
    db.commit()
    return {"message": "Recurring event deleted"}
