# event_planner/auth/tokens.py
"""
Access token codec.

Access tokens are compact HMAC-signed JWTs: ``sub`` is the user id, ``iat`` and
``exp`` are whole seconds. They are never revoked; a token stays valid until
its embedded expiry.

Expiry is checked here against the injected clock rather than by python-jose,
so ``verify`` is deterministic under test and the boundary is strict: a token
is rejected at exactly ``exp`` and later.
"""
from __future__ import annotations

import logging
import threading
from datetime import timedelta

from jose import JWTError, jwt

from event_planner.core.clock import Clock, utc_now
from event_planner.core.config import settings
from event_planner.core.errors import ConfigurationError, UnauthorizedError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "
HMAC_ALGORITHMS = frozenset({"HS256", "HS384", "HS512"})


def extract_bearer_token(header_value: str | None) -> str | None:
    """
    Returns the token from ``Authorization: Bearer <token>``. The prefix is
    matched case-sensitively; anything else yields None.
    """
    if not header_value or not header_value.startswith(BEARER_PREFIX):
        return None
    token = header_value[len(BEARER_PREFIX):].strip()
    return token or None


class TokenCodec:
    def __init__(
        self,
        secret: str,
        ttl_ms: int,
        *,
        algorithm: str = "HS256",
        now: Clock = utc_now,
    ) -> None:
        if not secret or not secret.strip():
            raise ConfigurationError("JWT_SECRET must be set to sign access tokens.")
        if algorithm not in HMAC_ALGORITHMS:
            raise ConfigurationError(f"Unsupported JWT_ALGORITHM={algorithm!r}; expected one of HS256/HS384/HS512.")
        if ttl_ms <= 0:
            raise ConfigurationError("ACCESS_TOKEN_EXPIRE_MS must be positive.")

        self._secret = secret
        self._algorithm = algorithm
        self._ttl = timedelta(milliseconds=ttl_ms)
        self._now = now

    def issue(self, user_id: int) -> str:
        now = self._now()
        exp = now + self._ttl
        payload = {
            "sub": str(user_id),
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str | None) -> int:
        """
        Returns the user id embedded in a valid token. Every failure raises
        UnauthorizedError; the reason is only logged.
        """
        if token is None or not token.strip():
            raise self._reject("token is missing or blank")

        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_exp": False, "verify_aud": False},
            )
        except JWTError as exc:
            raise self._reject(f"token could not be decoded: {exc}") from exc

        exp = claims.get("exp")
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            raise self._reject("token has no usable exp claim")
        if self._now().timestamp() >= exp:
            raise self._reject("token is expired")

        sub = claims.get("sub")
        try:
            user_id = int(sub)
        except (TypeError, ValueError):
            raise self._reject("token subject is not a user id") from None
        return user_id

    @staticmethod
    def _reject(reason: str) -> UnauthorizedError:
        logger.warning("Rejected access token: %s", reason)
        return UnauthorizedError(reason)


_codec: TokenCodec | None = None
_lock = threading.Lock()


def get_token_codec() -> TokenCodec:
    """Process-wide codec, built once from settings on first use."""
    global _codec
    if _codec is not None:
        return _codec
    with _lock:
        if _codec is None:
            _codec = TokenCodec(
                settings.JWT_SECRET,
                settings.ACCESS_TOKEN_EXPIRE_MS,
                algorithm=settings.JWT_ALGORITHM,
            )
    return _codec
