from datetime import datetime
from typing import Optional

from pydantic import Field

from event_planner.schemas.common import CamelModel


class EventCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    start_time: datetime
    end_time: Optional[datetime] = None
    label_id: Optional[int] = None


class EventUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    label_id: Optional[int] = None
    is_completed: Optional[bool] = None


class EventOut(CamelModel):
    id: int
    creator_id: int
    name: str
    description: Optional[str]
    start_time: datetime
    end_time: Optional[datetime]
    label_id: Optional[int]
    recurring_event_id: Optional[int]
    is_completed: bool
    created_at: datetime
    updated_at: datetime
