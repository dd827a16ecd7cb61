from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from event_planner.core.database import get_db
from event_planner.dependencies.auth import get_current_user
from event_planner.models.label import Label
from event_planner.models.user import User
from event_planner.schemas.common import MessageOut
from event_planner.schemas.label import LabelCreate, LabelOut, LabelUpdate
from event_planner.services.labels import create_label, get_label_for_user, update_label

router = APIRouter(prefix="/labels", tags=["labels"], dependencies=[Depends(get_current_user)])


@router.post("", response_model=LabelOut, status_code=status.HTTP_201_CREATED)
def create(payload: LabelCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return create_label(db, user.id, name=payload.name, color=payload.color, badge_id=payload.badge_id)


@router.get("", response_model=list[LabelOut])
def list_labels(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return db.query(Label).filter(Label.creator_id == user.id).order_by(Label.name.asc()).all()


@router.get("/{label_id}", response_model=LabelOut)
def get_label(label_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return get_label_for_user(db, label_id, user.id)


@router.patch("/{label_id}", response_model=LabelOut)
def patch_label(
    label_id: int,
    payload: LabelUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    label = get_label_for_user(db, label_id, user.id)
    return update_label(db, label, user.id, payload.model_dump(exclude_unset=True))


@router.delete("/{label_id}", response_model=MessageOut)
def delete_label(label_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    label = get_label_for_user(db, label_id, user.id)
    db.delete(label)
    db.commit()
    return {"message": "Label deleted"}
