from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from event_planner.core.database import get_db
from event_planner.dependencies.auth import get_current_user
from event_planner.models.badge import Badge
from event_planner.models.user import User
from event_planner.schemas.badge import BadgeCreate, BadgeOut, BadgeUpdate
from event_planner.schemas.common import MessageOut
from event_planner.services.badges import create_badge, get_badge_for_user, update_badge

router = APIRouter(prefix="/badges", tags=["badges"], dependencies=[Depends(get_current_user)])


@router.post("", response_model=BadgeOut, status_code=status.HTTP_201_CREATED)
def create(payload: BadgeCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return create_badge(db, user.id, name=payload.name, sort_order=payload.sort_order)


@router.get("", response_model=list[BadgeOut])
def list_badges(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return (
        db.query(Badge)
        .filter(Badge.creator_id == user.id)
        .order_by(Badge.sort_order.asc(), Badge.id.asc())
        .all()
    )


@router.get("/{badge_id}", response_model=BadgeOut)
def get_badge(badge_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return get_badge_for_user(db, badge_id, user.id)


@router.patch("/{badge_id}", response_model=BadgeOut)
def patch_badge(
    badge_id: int,
    payload: BadgeUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    badge = get_badge_for_user(db, badge_id, user.id)
    return update_badge(db, badge, payload.model_dump(exclude_unset=True))


@router.delete("/{badge_id}", response_model=MessageOut)
def delete_badge(badge_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    badge = get_badge_for_user(db, badge_id, user.id)
    db.delete(badge)
    db.commit()
    return {"message": "Badge deleted"}
