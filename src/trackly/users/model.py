from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a Trackly account.

    Plain data object (no DB access code).
    """

    user_id: int
    name: Optional[str]
    email: str
    password_hash: str
    role: Role
    disabled: bool = False
    last_activity_at: Optional[datetime] = None
    inactivity_notified_at: Optional[datetime] = None
    push_token: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.email


@dataclass(frozen=True)
class SessionUser:
    """Explicit session context injected into services instead of a global lookup."""

    user_id: int
    name: str
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
