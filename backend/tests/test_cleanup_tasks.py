from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from conftest import make_user
from event_planner.celery_app import build_beat_schedule
from event_planner.models.event import Event
from event_planner.models.password_reset_token import PasswordResetToken
from event_planner.models.refresh_token import RefreshToken
from event_planner.models.user import User
from event_planner.services.refresh_tokens import RefreshTokenStore
from event_planner.tasks import cleanup

NOW = datetime(2030, 6, 1, 3, 0, 0, tzinfo=timezone.utc)


def _usernames(db_session) -> set[str]:
    return {u.username for u in db_session.query(User).all()}


# -------------------------
# Unverified users
# -------------------------
def test_purge_unverified_users_deletes_only_stale_unverified(db_session):
    make_user(db_session, "stale", "stale@example.com", verified=False, created_at=NOW - timedelta(hours=25))
    make_user(db_session, "fresh", "fresh@example.com", verified=False, created_at=NOW - timedelta(hours=23))
    make_user(db_session, "old_verified", "ov@example.com", verified=True, created_at=NOW - timedelta(days=10))

    assert cleanup.purge_unverified_users(db_session, NOW, 24) == 1
    assert _usernames(db_session) == {"fresh", "old_verified"}


def test_purge_unverified_users_continues_past_failures(db_session, monkeypatch, caplog):
    for name in ("u1", "u2", "u3"):
        make_user(db_session, name, f"{name}@example.com", verified=False, created_at=NOW - timedelta(days=2))

    real_delete = db_session.delete

    def flaky_delete(obj):
        if getattr(obj, "username", None) == "u2":
            raise RuntimeError("simulated failure")
        return real_delete(obj)

    monkeypatch.setattr(db_session, "delete", flaky_delete)

    with caplog.at_level("WARNING"):
        deleted = cleanup.purge_unverified_users(db_session, NOW, 24)

    assert deleted == 2
    assert _usernames(db_session) == {"u2"}
    assert "Deleted 2 of 3 unverified user(s)" in caplog.text


# -------------------------
# Pending deletion
# -------------------------
def test_purge_pending_deletion_users_removes_due_accounts_and_their_data(db_session):
    due = make_user(db_session, "due", "due@example.com")
    due.mark_for_deletion(NOW - timedelta(days=31), 30)
    waiting = make_user(db_session, "waiting", "waiting@example.com")
    waiting.mark_for_deletion(NOW - timedelta(days=5), 30)
    make_user(db_session, "active", "active@example.com")
    db_session.commit()

    db_session.add(Event(creator_id=due.id, name="Dentist", start_time=NOW))
    store = RefreshTokenStore("cleanup_secret", 60_000)
    store.issue(db_session, due.id)

    assert cleanup.purge_pending_deletion_users(db_session, NOW) == 1
    assert _usernames(db_session) == {"waiting", "active"}
    assert db_session.query(Event).count() == 0
    assert db_session.query(RefreshToken).count() == 0


def test_purge_pending_deletion_users_is_all_or_nothing(db_session, monkeypatch):
    for name in ("p1", "p2", "p3"):
        user = make_user(db_session, name, f"{name}@example.com")
        user.mark_for_deletion(NOW - timedelta(days=40), 30)
    db_session.commit()

    real_delete = db_session.delete
    calls = {"n": 0}

    def failing_delete(obj):
        calls["n"] += 1
        if calls["n"] == 2:
            raise RuntimeError("simulated failure")
        return real_delete(obj)

    monkeypatch.setattr(db_session, "delete", failing_delete)

    with pytest.raises(RuntimeError):
        cleanup.purge_pending_deletion_users(db_session, NOW)

    monkeypatch.setattr(db_session, "delete", real_delete)
    assert _usernames(db_session) == {"p1", "p2", "p3"}


def test_purge_pending_deletion_users_with_nothing_due(db_session):
    make_user(db_session, "active", "active@example.com")
    assert cleanup.purge_pending_deletion_users(db_session, NOW) == 0


# -------------------------
# Token tables
# -------------------------
def test_purge_refresh_tokens(db_session):
    user = make_user(db_session, "tok", "tok@example.com")
    clock = SimpleNamespace(now=NOW - timedelta(days=40))
    store = RefreshTokenStore("cleanup_secret", 7 * 24 * 3600 * 1000, now=lambda: clock.now)

    old_revoked = store.issue(db_session, user.id)
    store.revoke(db_session, old_revoked)
    clock.now = NOW
    live = store.issue(db_session, user.id)

    # The old token is both expired and revoked long ago.
    assert cleanup.purge_expired_refresh_tokens(db_session, store) == 1
    assert cleanup.purge_revoked_refresh_tokens(db_session, store, 30) == 0
    assert store.validate_and_consume(db_session, live) == user.id


def test_purge_password_reset_tokens(db_session):
    user = make_user(db_session, "reset", "reset@example.com")
    db_session.add_all(
        [
            PasswordResetToken(user_id=user.id, token_hash="expired", expires_at=NOW - timedelta(minutes=1)),
            PasswordResetToken(
                user_id=user.id,
                token_hash="used",
                expires_at=NOW + timedelta(minutes=10),
                used_at=NOW - timedelta(minutes=5),
            ),
            PasswordResetToken(user_id=user.id, token_hash="live", expires_at=NOW + timedelta(minutes=10)),
        ]
    )
    db_session.commit()

    assert cleanup.purge_password_reset_tokens(db_session, NOW) == 2
    assert [t.token_hash for t in db_session.query(PasswordResetToken).all()] == ["live"]


# -------------------------
# Task wrappers + schedule
# -------------------------
def test_token_cleanup_task_logs_and_swallows_errors(db_session, monkeypatch, caplog):
    monkeypatch.setattr(cleanup, "_with_db_session", lambda: db_session)

    def boom(db, store):
        raise RuntimeError("db down")

    monkeypatch.setattr(cleanup, "purge_expired_refresh_tokens", boom)
    with caplog.at_level("ERROR"):
        cleanup.cleanup_expired_refresh_tokens()
    assert "Expired refresh token cleanup failed" in caplog.text


def test_pending_deletion_task_reraises(db_session, monkeypatch):
    monkeypatch.setattr(cleanup, "_with_db_session", lambda: db_session)

    def boom(db, now):
        raise RuntimeError("db down")

    monkeypatch.setattr(cleanup, "purge_pending_deletion_users", boom)
    with pytest.raises(RuntimeError):
        cleanup.cleanup_pending_deletion_users()


def test_unverified_task_runs_against_session(db_session, monkeypatch):
    monkeypatch.setattr(cleanup, "_with_db_session", lambda: db_session)
    make_user(
        db_session,
        "ancient",
        "ancient@example.com",
        verified=False,
        created_at=datetime.now(timezone.utc) - timedelta(days=3),
    )

    cleanup.cleanup_unverified_users()
    assert _usernames(db_session) == set()


def _flags(**overrides):
    base = dict(
        REFRESH_TOKEN_CLEANUP_ENABLED=True,
        UNVERIFIED_USER_CLEANUP_ENABLED=True,
        PENDING_DELETION_CLEANUP_ENABLED=True,
        PASSWORD_RESET_CLEANUP_ENABLED=True,
    )
    base.update(overrides)
    return SimpleNamespace(**base)


def test_beat_schedule_contains_every_job_when_enabled():
    schedule = build_beat_schedule(_flags())
    tasks = {entry["task"] for entry in schedule.values()}
    assert tasks == {
        "cleanup.expired_refresh_tokens",
        "cleanup.revoked_refresh_tokens",
        "cleanup.unverified_users",
        "cleanup.pending_deletion_users",
        "cleanup.password_reset_tokens",
    }


def test_beat_schedule_timings():
    schedule = build_beat_schedule(_flags())
    hourly = schedule["cleanup-expired-refresh-tokens"]["schedule"]
    assert hourly.minute == {0}
    assert len(hourly.hour) == 24

    nightly = schedule["cleanup-revoked-refresh-tokens"]["schedule"]
    assert nightly.hour == {2} and nightly.minute == {0}

    assert schedule["cleanup-pending-deletion-users"]["schedule"].hour == {3}
    assert schedule["cleanup-unverified-users"]["schedule"].hour == {0, 6, 12, 18}
    assert schedule["cleanup-password-reset-tokens"]["schedule"].minute == {0, 30}


def test_disabled_jobs_are_not_scheduled():
    schedule = build_beat_schedule(_flags(UNVERIFIED_USER_CLEANUP_ENABLED=False, REFRESH_TOKEN_CLEANUP_ENABLED=False))
    tasks = {entry["task"] for entry in schedule.values()}
    assert tasks == {"cleanup.pending_deletion_users", "cleanup.password_reset_tokens"}
