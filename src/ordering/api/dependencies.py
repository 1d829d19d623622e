"""Request dependencies shared by the storefront routers."""

from fastapi import Header, HTTPException

from ordering.errors import PermissionDenied
from ordering.shared.actor import Actor


def current_actor(
    x_user_id: str | None = Header(default=None),
    x_user_admin: bool = Header(default=False),
) -> Actor:
    """The signed-in user, as asserted by the authentication provider in front of the API."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return Actor(user_id=x_user_id, is_admin=x_user_admin)


def admin_actor(
    x_user_id: str | None = Header(default=None),
    x_user_admin: bool = Header(default=False),
) -> Actor:
    actor = current_actor(x_user_id, x_user_admin)
    if not actor.is_admin:
        raise PermissionDenied("Administrator access required")
    return actor
