from datetime import date, datetime, time
from typing import Optional

from pydantic import Field

from event_planner.schemas.common import CamelModel


class RecurringEventCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    start_time: time
    end_time: Optional[time] = None
    start_date: date
    end_date: Optional[date] = None
    recurrence_rule: str = Field(min_length=1, max_length=255)
    label_id: Optional[int] = None


class RecurringEventUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    recurrence_rule: Optional[str] = Field(default=None, min_length=1, max_length=255)
    label_id: Optional[int] = None


class RecurringEventOut(CamelModel):
    id: int
    creator_id: int
    name: str
    description: Optional[str]
    start_time: time
    end_time: Optional[time]
    start_date: date
    end_date: Optional[date]
    recurrence_rule: str
    label_id: Optional[int]
    created_at: datetime
