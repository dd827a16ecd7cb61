from __future__ import annotations

import re
from typing import List

from fastapi import HTTPException, status

from event_planner.core.config import settings

COMMON_WEAK_PASSWORDS = {
    "password",
    "password1",
    "password123",
    "12345678",
    "123456789",
    "qwerty123",
    "qwertyuiop",
    "abc12345",
    "letmein1",
    "iloveyou1",
    "welcome1",
    "monkey123",
    "football1",
    "baseball1",
    "trustno1",
    "passw0rd",
    "sunshine1",
    "princess1",
}

_LETTER_RE = re.compile(r"[A-Za-z]")
_NUMBER_RE = re.compile(r"[0-9]")


def _normalize(value: str | None) -> str:
    return (value or "").strip().lower()


def evaluate_password(
    password: str,
    *,
    email: str | None = None,
    username: str | None = None,
) -> List[str]:
    """
    Returns a list of violation codes if the password does not meet policy.
    """
    pw = password or ""
    violations: list[str] = []
    min_length = max(int(getattr(settings, "PASSWORD_MIN_LENGTH", 8) or 0), 1)
    max_length = max(int(getattr(settings, "PASSWORD_MAX_LENGTH", 72) or 0), min_length)

    if len(pw) < min_length:
        violations.append("min_length")
    if len(pw) > max_length:
        violations.append("max_length")
    if not _LETTER_RE.search(pw):
        violations.append("letter")
    if not _NUMBER_RE.search(pw):
        violations.append("number")

    normalized_pw = pw.lower()

    email_norm = _normalize(email)
    local_part = email_norm.split("@")[0] if email_norm else ""
    if local_part and len(local_part) >= 3 and local_part in normalized_pw:
        violations.append("contains_email")

    username_norm = _normalize(username)
    if username_norm and len(username_norm) >= 3 and username_norm in normalized_pw:
        violations.append("contains_username")

    if normalized_pw in COMMON_WEAK_PASSWORDS:
        violations.append("denylist_common")

    return violations


def ensure_strong_password(password: str, *, email: str | None = None, username: str | None = None) -> None:
    violations = evaluate_password(password, email=email, username=username)
    if violations:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "message": "Password does not meet requirements.",
                "details": {"code": "WEAK_PASSWORD", "violations": violations},
            },
        )
