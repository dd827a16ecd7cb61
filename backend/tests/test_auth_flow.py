from __future__ import annotations

import re

from event_planner.models.refresh_token import RefreshToken
from event_planner.models.user import User

REGISTER_PAYLOAD = {
    "username": "newuser",
    "email": "newuser@example.com",
    "password": "Calendar_2030",
    "firstName": "New",
    "lastName": "User",
    "timezone": "Europe/Paris",
}


def _token_from_outbox(outbox) -> str:
    _, _, body = outbox[-1]
    match = re.search(r"token=([A-Za-z0-9_\-]+)", body)
    assert match, body
    return match.group(1)


def test_register_verify_login_refresh_logout(client, db_session, outbox):
    res = client.post("/auth/register", json=REGISTER_PAYLOAD)
    assert res.status_code == 201
    body = res.json()
    assert body["username"] == "newuser"
    assert body["email"] == "newuser@example.com"
    assert isinstance(body["userId"], int)

    # User exists but not verified yet
    u = db_session.query(User).filter(User.username == "newuser").first()
    assert u is not None
    assert u.email_verified is False
    assert len(outbox) == 1 and outbox[0][0] == "newuser@example.com"

    # Verify
    res2 = client.post("/auth/verify-email", json={"token": _token_from_outbox(outbox)})
    assert res2.status_code == 200
    assert res2.json()["username"] == "newuser"

    db_session.refresh(u)
    assert u.email_verified is True

    # Login returns an access token and a refresh token
    res3 = client.post("/auth/login", json={"username": "newuser", "password": "Calendar_2030"})
    assert res3.status_code == 200
    login = res3.json()
    assert login["userId"] == u.id
    assert login["timezone"] == "Europe/Paris"
    assert login["token"].count(".") == 2
    assert len(login["refreshToken"]) == 36

    me = client.get("/users/me", headers={"Authorization": f"Bearer {login['token']}"})
    assert me.status_code == 200
    assert me.json()["username"] == "newuser"

    # Refresh rotates: new pair, and the old refresh token is spent
    res4 = client.post("/auth/refresh", json={"refreshToken": login["refreshToken"]})
    assert res4.status_code == 200
    pair = res4.json()
    assert pair["refreshToken"] != login["refreshToken"]
    assert pair["accessToken"].count(".") == 2

    replay = client.post("/auth/refresh", json={"refreshToken": login["refreshToken"]})
    assert replay.status_code == 401

    # Logout revokes the current refresh token; repeating it is harmless
    res5 = client.post("/auth/logout", json={"refreshToken": pair["refreshToken"]})
    assert res5.status_code == 200
    assert res5.json()["message"] == "Logged out"
    assert client.post("/auth/logout", json={"refreshToken": pair["refreshToken"]}).status_code == 200

    after_logout = client.post("/auth/refresh", json={"refreshToken": pair["refreshToken"]})
    assert after_logout.status_code == 401

    # The access token is not revoked by logout; it lives until it expires.
    still = client.get("/users/me", headers={"Authorization": f"Bearer {pair['accessToken']}"})
    assert still.status_code == 200


def test_login_by_email(client, users):
    res = client.post("/auth/login", json={"email": "ALICE@example.com", "password": "Planner_pass_2024"})
    assert res.status_code == 200
    assert res.json()["username"] == "alice"


def test_each_login_gets_its_own_refresh_token(client, users, db_session):
    first = client.post("/auth/login", json={"username": "alice", "password": "Planner_pass_2024"}).json()
    second = client.post("/auth/login", json={"username": "alice", "password": "Planner_pass_2024"}).json()

    assert first["refreshToken"] != second["refreshToken"]
    assert db_session.query(RefreshToken).count() == 2

    # Logging out one session leaves the other usable.
    client.post("/auth/logout", json={"refreshToken": first["refreshToken"]})
    assert client.post("/auth/refresh", json={"refreshToken": second["refreshToken"]}).status_code == 200


def test_refresh_with_unknown_token_is_401(client):
    res = client.post("/auth/refresh", json={"refreshToken": "00000000-0000-0000-0000-000000000000"})
    assert res.status_code == 401
    assert res.json()["error"] == "UNAUTHORIZED"


def test_logout_without_token_is_ok(client):
    res = client.post("/auth/logout", json={})
    assert res.status_code == 200
