from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from event_planner.core.database import get_db
from event_planner.dependencies.auth import get_current_user
from event_planner.models.event import Event
from event_planner.models.user import User
from event_planner.schemas.common import MessageOut
from event_planner.schemas.event import EventCreate, EventOut, EventUpdate
from event_planner.services.events import create_event, get_event_for_user, update_event

router = APIRouter(prefix="/events", tags=["events"], dependencies=[Depends(get_current_user)])


@router.post("", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create(
    payload: EventCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return create_event(db, user.id, payload.model_dump())


@router.get("", response_model=list[EventOut])
def list_events(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return (
        db.query(Event)
        .filter(Event.creator_id == user.id)  # scope
        .order_by(Event.start_time.asc(), Event.id.asc())
        .all()
    )


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return get_event_for_user(db, event_id, user.id)


@router.patch("/{event_id}", response_model=EventOut)
def patch_event(
    event_id: int,
    payload: EventUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    event = get_event_for_user(db, event_id, user.id)
    return update_event(db, event, user.id, payload.model_dump(exclude_unset=True))


@router.delete("/{event_id}", response_model=MessageOut)
def delete_event(event_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    event = get_event_for_user(db, event_id, user.id)
    db.delete(event)
    db.commit()
    return {"message": "Event deleted"}
