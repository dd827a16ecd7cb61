from datetime import datetime
from typing import Optional

from pydantic import Field

from event_planner.schemas.common import CamelModel


class LabelCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    color: str = Field(default="GRAY", max_length=20)
    badge_id: Optional[int] = None


class LabelUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    color: Optional[str] = Field(default=None, max_length=20)
    badge_id: Optional[int] = None


class LabelOut(CamelModel):
    id: int
    creator_id: int
    name: str
    color: str
    badge_id: Optional[int]
    created_at: datetime
