from datetime import datetime
from typing import Optional

from pydantic import Field

from event_planner.schemas.common import CamelModel


class BadgeCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    sort_order: int = Field(default=0, ge=0)


class BadgeUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    sort_order: Optional[int] = Field(default=None, ge=0)


class BadgeOut(CamelModel):
    id: int
    creator_id: int
    name: str
    sort_order: int
    created_at: datetime
