# event_planner/schemas/auth.py
from pydantic import EmailStr, Field, model_validator

from event_planner.schemas.common import CamelModel


class RegisterIn(CamelModel):
    username: str = Field(min_length=3, max_length=30, pattern=r"^[A-Za-z0-9_.-]+$")
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    timezone: str | None = Field(default=None, max_length=64)


class RegisterOut(CamelModel):
    message: str
    user_id: int
    username: str
    email: str


class LoginIn(CamelModel):
    """Either username or email identifies the account."""

    username: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    password: str = Field(min_length=1, max_length=128)

    @model_validator(mode="after")
    def _require_login(self):
        if not (self.username or "").strip() and not (self.email or "").strip():
            raise ValueError("username or email is required")
        return self

    @property
    def login(self) -> str:
        return (self.username or "").strip() or (self.email or "").strip()


class LoginOut(CamelModel):
    token: str
    refresh_token: str
    user_id: int
    username: str
    email: str
    timezone: str


class RefreshIn(CamelModel):
    refresh_token: str = Field(min_length=1, max_length=255)


class TokenPairOut(CamelModel):
    access_token: str
    refresh_token: str


class LogoutIn(CamelModel):
    refresh_token: str | None = Field(default=None, max_length=255)


class VerifyEmailIn(CamelModel):
    token: str = Field(min_length=1, max_length=255)


class VerifyEmailOut(CamelModel):
    message: str
    user_id: int
    username: str


class ResendVerifyIn(CamelModel):
    email: EmailStr


class ForgotPasswordIn(CamelModel):
    email: EmailStr


class ResetPasswordIn(CamelModel):
    token: str = Field(min_length=1, max_length=255)
    new_password: str = Field(min_length=1, max_length=128)
