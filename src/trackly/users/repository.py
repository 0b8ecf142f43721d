from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for users.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def create_user(self, *, name: Optional[str], email: str, password_hash: str, role: Role) -> int:
        raise NotImplementedError

    def update_fields(self, user_id: int, **fields) -> bool:
        """Partial update; accepted keys: name, disabled, push_token, role."""

        raise NotImplementedError

    def touch_activity(self, user_id: int, *, at: datetime) -> bool:
        """Set last_activity_at and clear inactivity_notified_at."""

        raise NotImplementedError

    def mark_inactivity_notified(self, user_id: int, *, at: datetime) -> bool:
        raise NotImplementedError
