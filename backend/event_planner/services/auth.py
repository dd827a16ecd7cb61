# event_planner/services/auth.py
"""
Session lifecycle: login issues an access token plus a refresh token,
refresh rotates the refresh token, logout revokes it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from event_planner.auth.principal import UserPrincipal, load_user_by_id, load_user_by_username
from event_planner.auth.tokens import get_token_codec
from event_planner.core.errors import (
    EmailNotVerifiedError,
    InvalidCredentialsError,
    UnauthorizedError,
    UserNotFoundError,
)
from event_planner.core.security import verify_password
from event_planner.models.user import User
from event_planner.services.refresh_tokens import get_refresh_token_store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    user: User
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


def authenticate_credentials(db: Session, login: str, password: str) -> User:
    """
    Unknown login, wrong password and a disabled account all fail the same way.
    A correct password on an unverified account fails with EMAIL_NOT_VERIFIED.
    """
    try:
        user = load_user_by_username(db, login)
    except UserNotFoundError:
        raise InvalidCredentialsError("unknown login") from None

    if not verify_password(password, user.password_hash):
        raise InvalidCredentialsError("bad password")

    principal = UserPrincipal.from_user(user)
    if not principal.is_enabled:
        raise InvalidCredentialsError("account disabled")
    if not user.email_verified:
        raise EmailNotVerifiedError()
    return user


def login(db: Session, login: str, password: str) -> LoginResult:
    user = authenticate_credentials(db, login, password)
    access_token = get_token_codec().issue(user.id)
    refresh_token = get_refresh_token_store().issue(db, user.id)
    logger.info("User user_id=%s logged in", user.id)
    return LoginResult(user=user, access_token=access_token, refresh_token=refresh_token)


def refresh_session(db: Session, raw_refresh_token: str) -> TokenPair:
    """
    Consumes the presented refresh token and issues a new pair. A token that
    was already used, revoked or has expired is rejected.
    """
    user_id = get_refresh_token_store().validate_and_consume(db, raw_refresh_token)

    try:
        user = load_user_by_id(db, user_id)
    except UserNotFoundError:
        raise UnauthorizedError("refresh token owner no longer exists") from None
    if not UserPrincipal.from_user(user).is_enabled:
        raise UnauthorizedError("refresh token owner is disabled")

    return TokenPair(
        access_token=get_token_codec().issue(user.id),
        refresh_token=get_refresh_token_store().issue(db, user.id),
    )


def logout(db: Session, raw_refresh_token: str | None) -> None:
    get_refresh_token_store().revoke(db, raw_refresh_token)
