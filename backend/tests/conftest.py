import os
from datetime import datetime, timezone

# Settings are read at import time: configure before importing event_planner.
os.environ.setdefault("JWT_SECRET", "test_jwt_secret_for_event_planner")
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("EMAIL_ENABLED", "false")
os.environ.setdefault("ENABLE_RATE_LIMITING", "false")
os.environ.setdefault("CELERY_BROKER_URL", "memory://")

from contextlib import contextmanager

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from event_planner.auth.tokens import get_token_codec
from event_planner.core.base import Base
from event_planner.core import config as app_config
from event_planner.core.database import get_db
from event_planner.core.rate_limit import limiter
from event_planner.core.security import hash_password

# Import models so they register with SQLAlchemy metadata.
import event_planner.models  # noqa: F401
from event_planner.models.user import User

PASSWORD = "Planner_pass_2024"


@pytest.fixture(scope="session")
def db_engine():
    # In-memory SQLite for fast, isolated tests.
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture()
def db_session(db_engine):
    # Important: because we use an in-memory SQLite DB with StaticPool, the DB
    # persists across tests. Reset schema per test to avoid cross-test coupling.
    Base.metadata.drop_all(bind=db_engine)
    Base.metadata.create_all(bind=db_engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def outbox(monkeypatch):
    """
    Capture outgoing mail instead of delivering it. Each entry is
    (to_email, subject, body).
    """
    from event_planner.services import email_verification, password_reset

    sent: list[tuple[str, str, str]] = []

    def fake_send_email(to_email, subject, body):
        sent.append((to_email, subject, body))
        return "msg_test_123"

    monkeypatch.setattr(email_verification, "send_email", fake_send_email)
    monkeypatch.setattr(password_reset, "send_email", fake_send_email)
    return sent


@pytest.fixture(autouse=True)
def _reset_mutable_settings():
    """
    Tests sometimes tweak global settings (app_config.settings.*). Because that object is
    process-global, we must restore values after each test to avoid cross-test coupling.
    """
    keys = [
        "PASSWORD_MIN_LENGTH",
        "USER_DELETION_GRACE_PERIOD_DAYS",
        "UNVERIFIED_USER_MAX_AGE_HOURS",
        "EMAIL_ENABLED",
        "EMAIL_PROVIDER",
    ]
    original = {k: getattr(app_config.settings, k) for k in keys}
    try:
        yield
    finally:
        for k, v in original.items():
            setattr(app_config.settings, k, v)


@pytest.fixture(autouse=True)
def _rate_limiter_disabled():
    """
    Rate limits are attached to the routes at import time but only enforced
    while limiter.enabled is set. Tests that need them flip it on.
    """
    limiter.enabled = False
    limiter.reset()
    try:
        yield
    finally:
        limiter.enabled = False
        limiter.reset()


@pytest.fixture()
def app(db_session):
    import event_planner.main as main

    fastapi_app = main.app

    def override_get_db():
        yield db_session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


def make_user(db_session, username: str, email: str, *, verified: bool = True, **extra) -> User:
    user = User(
        username=username,
        email=email,
        password_hash=hash_password(PASSWORD),
        first_name=username.capitalize(),
        last_name="Tester",
        timezone="America/New_York",
        email_verified=verified,
        email_verified_at=datetime.now(timezone.utc) if verified else None,
        created_at=extra.pop("created_at", datetime.now(timezone.utc)),
        **extra,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture()
def users(db_session):
    """
    Two distinct verified users for ownership / isolation tests.
    """
    return (
        make_user(db_session, "alice", "alice@example.com"),
        make_user(db_session, "bob", "bob@example.com"),
    )


def bearer(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {get_token_codec().issue(user.id)}"}


@pytest.fixture()
def client(app):
    """
    Anonymous client; authenticate per request with bearer(user).
    """
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def client_for(app):
    """
    Context manager to create a client authenticated as an arbitrary user
    through a real access token.

    Usage:
        with client_for(user) as c:
            ...
    """

    @contextmanager
    def _client_for(user: User):
        with TestClient(app, headers=bearer(user)) as c:
            yield c

    return _client_for
