"""Database models. Importing the package registers every mapper with Base.metadata."""

from event_planner.models.user import Role, User
from event_planner.models.refresh_token import RefreshToken
from event_planner.models.email_verification_token import EmailVerificationToken
from event_planner.models.password_reset_token import PasswordResetToken
from event_planner.models.badge import Badge
from event_planner.models.label import Label
from event_planner.models.recurring_event import RecurringEvent
from event_planner.models.event import Event

__all__ = [
    "Role",
    "User",
    "RefreshToken",
    "EmailVerificationToken",
    "PasswordResetToken",
    "Badge",
    "Label",
    "RecurringEvent",
    "Event",
]
