from __future__ import annotations

from datetime import datetime, timedelta, timezone

from conftest import PASSWORD, bearer
from event_planner.core.clock import as_utc


def test_me_returns_profile(client, users):
    user_a, _ = users
    res = client.get("/users/me", headers=bearer(user_a))
    assert res.status_code == 200
    body = res.json()
    assert body["id"] == user_a.id
    assert body["username"] == "alice"
    assert body["email"] == "alice@example.com"
    assert "passwordHash" not in body


def test_delete_me_schedules_deletion_and_signs_out(client, users, db_session):
    user_a, _ = users
    login = client.post("/auth/login", json={"username": "alice", "password": PASSWORD}).json()
    headers = {"Authorization": f"Bearer {login['token']}"}

    res = client.delete("/users/me", headers=headers)
    assert res.status_code == 200

    db_session.refresh(user_a)
    assert user_a.is_pending_deletion is True
    expected = datetime.now(timezone.utc) + timedelta(days=30)
    assert abs(as_utc(user_a.scheduled_deletion_date) - expected) < timedelta(minutes=1)

    assert client.post("/auth/refresh", json={"refreshToken": login["refreshToken"]}).status_code == 401
    assert client.post("/auth/login", json={"username": "alice", "password": PASSWORD}).status_code == 401


def test_user_can_read_own_record_by_id(client, users):
    user_a, _ = users
    res = client.get(f"/users/{user_a.id}", headers=bearer(user_a))
    assert res.status_code == 200
    assert res.json()["username"] == "alice"


def test_user_cannot_read_someone_else(client, users):
    user_a, user_b = users
    res = client.get(f"/users/{user_b.id}", headers=bearer(user_a))
    assert res.status_code == 403
    assert res.json()["error"] == "UNAUTHORIZED_USER_ACCESS"


def test_users_routes_require_authentication(client, users):
    assert client.get("/users/me").status_code == 401
    assert client.get(f"/users/{users[0].id}").status_code == 401
