from __future__ import annotations

from datetime import datetime

from event_planner.schemas.common import CamelModel


class UserOut(CamelModel):
    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    timezone: str
    roles: list[str]
    email_verified: bool
    is_pending_deletion: bool
    scheduled_deletion_date: datetime | None = None
    created_at: datetime

    @classmethod
    def from_user(cls, user) -> "UserOut":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            timezone=user.timezone,
            roles=sorted(role.value for role in user.roles),
            email_verified=bool(user.email_verified),
            is_pending_deletion=bool(user.is_pending_deletion),
            scheduled_deletion_date=user.scheduled_deletion_date,
            created_at=user.created_at,
        )
