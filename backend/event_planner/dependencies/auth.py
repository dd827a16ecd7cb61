# event_planner/dependencies/auth.py
from __future__ import annotations

import logging

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from event_planner.auth.identity import Identity
from event_planner.auth.principal import UserPrincipal, load_user_by_id
from event_planner.auth.tokens import extract_bearer_token, get_token_codec
from event_planner.core.database import get_db
from event_planner.core.errors import UnauthorizedError, UserNotFoundError
from event_planner.models.user import User

logger = logging.getLogger(__name__)


def authenticate_request(request: Request, db: Session = Depends(get_db)) -> None:
    """
    Registered as an application-wide dependency, so it runs once per request
    before any route dependency.

    Establishes request.state.identity from an ``Authorization: Bearer`` header.
    Never rejects the request itself: any failure leaves the caller anonymous
    and protected routes reject via get_current_user.
    """
    request.state.identity = Identity.unauthenticated()
    request.state.user = None

    token = extract_bearer_token(request.headers.get("Authorization"))
    if token is None:
        return

    try:
        user_id = get_token_codec().verify(token)
        user = load_user_by_id(db, user_id)
        principal = UserPrincipal.from_user(user)
    except UnauthorizedError as exc:
        logger.info("Bearer token not accepted: %s", exc.reason)
        return
    except UserNotFoundError:
        logger.info("Bearer token names a user that no longer exists")
        return
    except Exception:
        logger.exception("Could not set user authentication for %s %s", request.method, request.url.path)
        db.rollback()
        return

    request.state.user = user
    request.state.identity = Identity.from_principal(principal)


def get_identity(request: Request) -> Identity:
    return getattr(request.state, "identity", None) or Identity.unauthenticated()


def get_current_user(request: Request) -> User:
    """
    Returns the User loaded by authenticate_request, or raises a generic 401.
    """
    identity = get_identity(request)
    user = getattr(request.state, "user", None)
    if not identity.is_authenticated or user is None:
        raise UnauthorizedError("no authenticated identity on request")
    return user
