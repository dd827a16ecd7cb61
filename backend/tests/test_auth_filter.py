from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timedelta, timezone

import pytest
from fastapi import APIRouter, Depends, Request

from conftest import bearer, make_user
from event_planner.auth.tokens import TokenCodec
from event_planner.core.config import settings
from event_planner.dependencies.auth import get_current_user
from event_planner.models.user import User


inspection = APIRouter(prefix="/_test")


@inspection.get("/identity")
def report_identity(request: Request):
    """Reports what the authentication step established."""
    identity = request.state.identity
    return {
        "authenticated": identity.is_authenticated,
        "user_id": identity.user_id,
        "authorities": sorted(identity.authorities),
    }


@inspection.get("/protected")
def protected(user: User = Depends(get_current_user)):
    return {"user_id": user.id}


@contextmanager
def mounted(app, router: APIRouter):
    """Includes router on app for the duration of the block only."""
    before = len(app.router.routes)
    app.include_router(router)
    added = app.router.routes[before:]
    try:
        yield
    finally:
        for route in added:
            app.router.routes.remove(route)


@pytest.fixture(autouse=True)
def inspection_routes(app):
    with mounted(app, inspection):
        yield


def test_inspection_routes_are_removed_afterwards(app):
    paths = {getattr(r, "path", None) for r in app.routes}
    assert "/_test/identity" in paths

    extra = APIRouter(prefix="/_scratch")
    extra.add_api_route("/ping", lambda: {"ok": True})
    with mounted(app, extra):
        assert "/_scratch/ping" in {getattr(r, "path", None) for r in app.routes}
    assert "/_scratch/ping" not in {getattr(r, "path", None) for r in app.routes}
    assert "/_test/identity" in {getattr(r, "path", None) for r in app.routes}


def test_request_without_header_stays_anonymous(app, client):
    res = client.get("/_test/identity")
    assert res.status_code == 200
    assert res.json() == {"authenticated": False, "user_id": None, "authorities": []}


def test_valid_token_establishes_identity(app, client, users):
    user_a, _ = users
    res = client.get("/_test/identity", headers=bearer(user_a))
    assert res.json() == {"authenticated": True, "user_id": user_a.id, "authorities": ["ROLE_USER"]}


def test_invalid_tokens_fail_open_to_anonymous(app, client, users):
    user_a, _ = users
    expired = TokenCodec(
        settings.JWT_SECRET,
        1000,
        now=lambda: datetime.now(timezone.utc) - timedelta(hours=1),
    ).issue(user_a.id)
    foreign = TokenCodec("someone_elses_secret", 60_000).issue(user_a.id)

    for header in (
        f"Bearer {expired}",
        f"Bearer {foreign}",
        "Bearer garbage",
        "Bearer ",
        "bearer " + foreign,
        "Basic dXNlcjpwYXNz",
    ):
        res = client.get("/_test/identity", headers={"Authorization": header})
        assert res.status_code == 200, header
        assert res.json()["authenticated"] is False, header


def test_token_for_deleted_user_is_anonymous(app, client, db_session):
    ghost = make_user(db_session, "ghost", "ghost@example.com")
    headers = bearer(ghost)
    db_session.delete(ghost)
    db_session.commit()

    res = client.get("/_test/identity", headers=headers)
    assert res.json()["authenticated"] is False


def test_lookup_failure_fails_open(app, client, users, monkeypatch):
    from event_planner.dependencies import auth as auth_dep

    def boom(db, user_id):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(auth_dep, "load_user_by_id", boom)
    res = client.get("/_test/identity", headers=bearer(users[0]))
    assert res.status_code == 200
    assert res.json()["authenticated"] is False


def test_protected_route_rejects_anonymous_with_generic_401(app, client):
    res = client.get("/_test/protected", headers={"Authorization": "Bearer garbage"})
    assert res.status_code == 401
    assert res.json() == {"error": "UNAUTHORIZED", "message": "Not authenticated"}


def test_protected_route_accepts_valid_token(app, client, users):
    user_a, _ = users
    res = client.get("/_test/protected", headers=bearer(user_a))
    assert res.status_code == 200
    assert res.json() == {"user_id": user_a.id}


def test_public_routes_ignore_bad_tokens(client):
    res = client.get("/health", headers={"Authorization": "Bearer garbage"})
    assert res.status_code == 200
