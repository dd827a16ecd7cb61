# event_planner/auth/__init__.py
"""
Authentication modules for the event planner.

This package contains:
- tokens.py: access token codec (sign/verify JWTs, bearer header parsing)
- principal.py: user lookup adapter (authorities + enabled flag)
- identity.py: per-request identity model
- ownership.py: resource ownership checks
"""
from event_planner.auth.identity import Identity
from event_planner.auth.principal import UserPrincipal

__all__ = ["Identity", "UserPrincipal"]
