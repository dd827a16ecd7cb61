# event_planner/auth/identity.py
"""
Canonical authenticated identity model.

The authentication step stores one Identity on ``request.state.identity`` per
request. Downstream code reads the acting user id from it and passes that id
explicitly into services; nothing else reads request state.

The Identity object is INTERNAL ONLY and should not be returned directly
to clients.
"""
from __future__ import annotations

from dataclasses import dataclass

from event_planner.auth.principal import UserPrincipal


@dataclass(frozen=True)
class Identity:
    """
    Representation of an authenticated (or anonymous) caller.

    Attributes:
        user_id: Internal user id, or None for anonymous requests.
        principal: Adapter view of the user (authorities, enabled flag).
        is_authenticated: True only after a bearer token verified and the
                          user it names was loaded.
    """

    user_id: int | None = None
    principal: UserPrincipal | None = None
    is_authenticated: bool = False

    @classmethod
    def unauthenticated(cls) -> Identity:
        return cls(user_id=None, principal=None, is_authenticated=False)

    @classmethod
    def from_principal(cls, principal: UserPrincipal) -> Identity:
        return cls(user_id=principal.user_id, principal=principal, is_authenticated=True)

    @property
    def authorities(self) -> frozenset[str]:
        if self.principal is None:
            return frozenset()
        return self.principal.authorities
