from __future__ import annotations

import logging
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.permissions import require_admin
from ..common.validators import require_min_length, require_non_empty
from ..core.enums import Collection, Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from ..realtime.feed import SnapshotFeed
from .model import SessionUser, User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> SessionUser:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user or user.disabled:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        return to_session_user(user)


def to_session_user(user: User) -> SessionUser:
    return SessionUser(user_id=user.user_id, name=user.display_name, email=user.email, role=user.role)


class UserService:
    """Use case: manage users (admin) and the user's own profile."""

    def __init__(self, users: UserRepository, feed: Optional[SnapshotFeed] = None):
        self._users = users
        self._feed = feed

    def _changed(self) -> None:
        if self._feed:
            self._feed.notify(Collection.USERS)

    def create_user(self, actor: SessionUser, *, name: str, email: str, password: str, role: Role = Role.USER) -> int:
        require_admin(actor)
        email = require_non_empty(email, "Email").lower()
        if "@" not in email:
            raise ValidationError("Email is not valid")
        require_min_length(password, "Password", 6)

        if self._users.get_by_email(email):
            raise ValidationError("A user with this email already exists")

        user_id = self._users.create_user(
            name=(name or "").strip() or None,
            email=email,
            password_hash=generate_password_hash(password),
            role=Role(role),
        )
        logger.info("User %s created by admin %s", user_id, actor.user_id)
        self._changed()
        return user_id

    def set_disabled(self, actor: SessionUser, *, user_id: int, disabled: bool) -> None:
        require_admin(actor)
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        if user.user_id == actor.user_id and disabled:
            raise ValidationError("You cannot disable your own account")
        self._users.update_fields(user_id, disabled=bool(disabled))
        self._changed()

    def set_role(self, actor: SessionUser, *, user_id: int, role) -> None:
        require_admin(actor)
        try:
            role = Role(role)
        except ValueError:
            raise ValidationError("Invalid role")
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        if user.user_id == actor.user_id and role != Role.ADMIN:
            raise ValidationError("You cannot remove your own admin role")
        self._users.update_fields(user_id, role=role)
        logger.info("User %s role set to %s by admin %s", user_id, role.value, actor.user_id)
        self._changed()

    def set_name(self, actor: SessionUser, *, name: str) -> None:
        name = require_non_empty(name, "Name")
        self._users.update_fields(actor.user_id, name=name)
        self._changed()

    def get(self, user_id: int) -> Optional[User]:
        return self._users.get_by_id(user_id)

    def list_all(self):
        return self._users.list_all()
