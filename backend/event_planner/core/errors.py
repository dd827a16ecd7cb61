"""
Application error taxonomy.

Every AppError carries an HTTP status, a machine-readable code and a message
that is safe to show to clients. Exception handlers in main.py render them as
{"error": code, "message": message}. Internal causes stay in the logs.
"""
from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Missing or invalid server configuration. Fatal, never user-facing."""


class AppError(Exception):
    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    message: str = "Internal server error"

    def __init__(self, message: str | None = None, *, code: str | None = None) -> None:
        if message is not None:
            self.message = message
        if code is not None:
            self.code = code
        super().__init__(self.message)


# -------------------------
# 401
# -------------------------
class UnauthorizedError(AppError):
    """
    Any authentication failure. The client always sees the same generic text;
    `reason` is for server-side logging only.
    """

    status_code = 401
    code = "UNAUTHORIZED"
    message = "Not authenticated"

    def __init__(self, reason: str = "unauthorized", *, code: str | None = None) -> None:
        self.reason = reason
        super().__init__(code=code)


class InvalidCredentialsError(UnauthorizedError):
    code = "INVALID_CREDENTIALS"
    message = "Invalid username or password"


# -------------------------
# 403
# -------------------------
class ForbiddenError(AppError):
    status_code = 403
    code = "ACCESS_DENIED"
    message = "Access denied"


class EmailNotVerifiedError(ForbiddenError):
    code = "EMAIL_NOT_VERIFIED"
    message = "Email not verified"


class OwnershipError(ForbiddenError):
    resource = "resource"

    def __init__(self, resource_id: int | None = None) -> None:
        self.resource_id = resource_id
        super().__init__(f"You do not have access to this {self.resource}")


class EventOwnershipError(OwnershipError):
    resource = "event"
    code = "UNAUTHORIZED_EVENT_ACCESS"


class RecurringEventOwnershipError(OwnershipError):
    resource = "recurring event"
    code = "UNAUTHORIZED_RECURRING_EVENT_ACCESS"


class LabelOwnershipError(OwnershipError):
    resource = "label"
    code = "UNAUTHORIZED_LABEL_ACCESS"


class BadgeOwnershipError(OwnershipError):
    resource = "badge"
    code = "UNAUTHORIZED_BADGE_ACCESS"


class UserOwnershipError(OwnershipError):
    resource = "user"
    code = "UNAUTHORIZED_USER_ACCESS"


# -------------------------
# 404
# -------------------------
class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"
    message = "Resource not found"


class UserNotFoundError(NotFoundError):
    code = "USER_NOT_FOUND"
    message = "User not found"


class EventNotFoundError(NotFoundError):
    code = "EVENT_NOT_FOUND"
    message = "Event not found"


class RecurringEventNotFoundError(NotFoundError):
    code = "RECURRING_EVENT_NOT_FOUND"
    message = "Recurring event not found"


class LabelNotFoundError(NotFoundError):
    code = "LABEL_NOT_FOUND"
    message = "Label not found"


class BadgeNotFoundError(NotFoundError):
    code = "BADGE_NOT_FOUND"
    message = "Badge not found"


# -------------------------
# 400 / 409
# -------------------------
class ConflictError(AppError):
    status_code = 409
    code = "CONFLICT"
    message = "Conflict"


class EmailVerificationError(AppError):
    status_code = 400
    code = "INVALID_VERIFICATION_TOKEN"
    message = "Invalid or expired verification token"


class PasswordResetError(AppError):
    status_code = 400
    code = "INVALID_RESET_TOKEN"
    message = "Invalid or expired reset token"
