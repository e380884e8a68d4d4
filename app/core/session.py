"""
app/core/session.py

Purpose: Admin session

- Explicit signed-in / signed-out value instead of ambient auth state
- Built per request from the X-Admin-Email header
- Only the configured ADMIN_EMAIL is treated as authenticated
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header

from app.core.config import settings
from app.core.exceptions import AuthenticationError


@dataclass(frozen=True)
class AdminSession:
    """Authenticated admin identity, or none."""

    identity: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    def signed_in(self, identity: str) -> "AdminSession":
        return AdminSession(identity=identity.strip().lower())

    def signed_out(self) -> "AdminSession":
        return AdminSession()


def session_for(email: Optional[str]) -> AdminSession:
    """
    Resolves the session for a claimed admin email.

    Returns a signed-out session unless the email is the configured admin.
    """
    session = AdminSession()
    if not email or not settings.ADMIN_EMAIL:
        return session
    if email.strip().lower() != settings.ADMIN_EMAIL:
        return session
    return session.signed_in(email)


async def get_admin_session(
    x_admin_email: Optional[str] = Header(default=None, alias="X-Admin-Email"),
) -> AdminSession:
    return session_for(x_admin_email)


async def require_admin(session: AdminSession = Depends(get_admin_session)) -> AdminSession:
    """Dependency that rejects requests without an authenticated admin session."""
    if not session.is_authenticated:
        raise AuthenticationError("Admin authentication required")
    return session
