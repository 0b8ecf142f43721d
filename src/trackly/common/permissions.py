from __future__ import annotations

from ..core.exceptions import AuthorizationError
from ..users.model import SessionUser


def require_admin(actor: SessionUser) -> None:
    if actor is None or not actor.is_admin:
        raise AuthorizationError("Administrator role required")


def require_self_or_admin(actor: SessionUser, user_id: int) -> None:
    if actor is None:
        raise AuthorizationError("Login required")
    if not actor.is_admin and int(actor.user_id) != int(user_id):
        raise AuthorizationError("You can only manage your own records")
