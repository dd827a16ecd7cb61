from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from event_planner.auth.ownership import validate_user_ownership
from event_planner.auth.principal import load_user_by_id
from event_planner.core.database import get_db
from event_planner.dependencies.auth import get_current_user
from event_planner.models.user import User
from event_planner.schemas.user import UserOut
from event_planner.services.users import mark_user_for_deletion

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(get_current_user)])


@router.get("/me", response_model=UserOut)
def get_me(user: User = Depends(get_current_user)):
    return UserOut.from_user(user)


@router.delete("/me", response_model=UserOut)
def delete_me(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """
    Schedules the account for deletion after the grace period and signs it
    out everywhere. Access tokens already issued stay valid until they expire.
    """
    return UserOut.from_user(mark_user_for_deletion(db, user))


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    validate_user_ownership(user.id, user_id)
    return UserOut.from_user(load_user_by_id(db, user_id))
