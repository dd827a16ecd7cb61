from __future__ import annotations

import hashlib
import hmac
import logging
import threading
import uuid
from datetime import timedelta

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from event_planner.core.clock import Clock, utc_now
from event_planner.core.config import settings
from event_planner.core.errors import ConfigurationError, UnauthorizedError
from event_planner.models.refresh_token import RefreshToken

logger = logging.getLogger(__name__)


class RefreshTokenStore:
    """
    Persistent, rotating refresh tokens.

    Only an HMAC-SHA256 of each raw value is stored, keyed by the signing
    secret, so a leaked table cannot be replayed. Every method commits its own
    unit of work on the session it is given.
    """

    def __init__(self, secret: str, ttl_ms: int, *, now: Clock = utc_now) -> None:
        if ttl_ms <= 0:
            raise ConfigurationError("REFRESH_TOKEN_EXPIRE_MS must be positive.")
        self._secret = (secret or "").encode("utf-8")
        self._ttl = timedelta(milliseconds=ttl_ms)
        self._now = now

    def hash_token(self, raw_token: str) -> str:
        if not self._secret:
            raise ConfigurationError("JWT_SECRET must be set to hash refresh tokens.")
        return hmac.new(self._secret, raw_token.encode("utf-8"), hashlib.sha256).hexdigest()

    # -----------------------------
    # Issue / consume / revoke
    # -----------------------------
    def issue(self, db: Session, user_id: int) -> str:
        """
        Creates a new refresh token for user, stores hash in DB, returns raw token.
        """
        raw = str(uuid.uuid4())
        now = self._now()
        db.add(
            RefreshToken(
                user_id=user_id,
                token_hash=self.hash_token(raw),
                issued_at=now,
                expires_at=now + self._ttl,
                revoked=False,
                revoked_at=None,
            )
        )
        db.commit()
        logger.debug("Issued refresh token for user_id=%s", user_id)
        return raw

    def validate_and_consume(self, db: Session, raw_token: str | None) -> int:
        """
        Single use: the conditional UPDATE marks the row revoked only while it
        is still live, so of two concurrent presentations exactly one wins.
        Returns the owning user id.
        """
        if raw_token is None or not raw_token.strip():
            raise UnauthorizedError("refresh token is missing or blank")

        token_hash = self.hash_token(raw_token.strip())
        now = self._now()

        result = db.execute(
            update(RefreshToken)
            .where(
                RefreshToken.token_hash == token_hash,
                RefreshToken.revoked.is_(False),
                RefreshToken.expires_at > now,
            )
            .values(revoked=True, revoked_at=now)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            db.rollback()
            logger.warning("Refresh token rejected: unknown, revoked or expired")
            raise UnauthorizedError("refresh token is invalid, revoked or expired")

        user_id = db.execute(
            select(RefreshToken.user_id).where(RefreshToken.token_hash == token_hash)
        ).scalar_one()
        db.commit()
        return user_id

    def revoke(self, db: Session, raw_token: str | None) -> None:
        if raw_token is None or not raw_token.strip():
            return
        result = db.execute(
            update(RefreshToken)
            .where(
                RefreshToken.token_hash == self.hash_token(raw_token.strip()),
                RefreshToken.revoked.is_(False),
            )
            .values(revoked=True, revoked_at=self._now())
            .execution_options(synchronize_session=False)
        )
        db.commit()
        if result.rowcount:
            logger.info("Refresh token revoked")

    def revoke_all_for_user(self, db: Session, user_id: int) -> int:
        result = db.execute(
            update(RefreshToken)
            .where(RefreshToken.user_id == user_id, RefreshToken.revoked.is_(False))
            .values(revoked=True, revoked_at=self._now())
            .execution_options(synchronize_session=False)
        )
        db.commit()
        logger.info("Revoked %s refresh token(s) for user_id=%s", result.rowcount, user_id)
        return result.rowcount

    # -----------------------------
    # Cleanup
    # -----------------------------
    def cleanup_expired(self, db: Session) -> int:
        result = db.execute(
            delete(RefreshToken)
            .where(RefreshToken.expires_at < self._now())
            .execution_options(synchronize_session=False)
        )
        db.commit()
        return result.rowcount

    def cleanup_revoked(self, db: Session, retention_days: int) -> int:
        if retention_days <= 0:
            raise ValueError("retention_days must be positive")
        cutoff = self._now() - timedelta(days=retention_days)
        result = db.execute(
            delete(RefreshToken)
            .where(
                RefreshToken.revoked.is_(True),
                RefreshToken.revoked_at.is_not(None),
                RefreshToken.revoked_at < cutoff,
            )
            .execution_options(synchronize_session=False)
        )
        db.commit()
        return result.rowcount


_store: RefreshTokenStore | None = None
_lock = threading.Lock()


def get_refresh_token_store() -> RefreshTokenStore:
    global _store
    if _store is not None:
        return _store
    with _lock:
        if _store is None:
            _store = RefreshTokenStore(settings.JWT_SECRET, settings.REFRESH_TOKEN_EXPIRE_MS)
    return _store
