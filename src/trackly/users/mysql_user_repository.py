from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, set_clause
from .model import User
from .repository import UserRepository

_COLUMNS = """
    user_id, name, email, password_hash, role, disabled,
    last_activity_at, inactivity_notified_at, push_token
"""

_UPDATABLE = {"name", "disabled", "push_token", "role"}


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_user(r: dict) -> User:
        return User(
            user_id=int(r["user_id"]),
            name=r.get("name"),
            email=r["email"],
            password_hash=r["password_hash"],
            role=Role(r["role"]),
            disabled=bool(r.get("disabled")),
            last_activity_at=r.get("last_activity_at"),
            inactivity_notified_at=r.get("inactivity_notified_at"),
            push_token=r.get("push_token"),
        )

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return self._to_user(r) if r else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", (email,))
            r = fetchone(cur)
            return self._to_user(r) if r else None

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY name, email")
            return [self._to_user(r) for r in fetchall(cur)]

    def create_user(self, *, name: Optional[str], email: str, password_hash: str, role: Role) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO users(name, email, password_hash, role) VALUES(%s,%s,%s,%s)",
                (name, email, password_hash, role.value),
            )
            return int(cur.lastrowid)

    def update_fields(self, user_id: int, **fields) -> bool:
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Unsupported user fields: {sorted(unknown)}")
        if not fields:
            return False
        if "role" in fields:
            fields["role"] = Role(fields["role"]).value
        cols, params = set_clause(fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE users SET {cols} WHERE user_id=%s", (*params, int(user_id)))
            return cur.rowcount > 0

    def touch_activity(self, user_id: int, *, at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET last_activity_at=%s, inactivity_notified_at=NULL WHERE user_id=%s",
                (at, int(user_id)),
            )
            return cur.rowcount > 0

    def mark_inactivity_notified(self, user_id: int, *, at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET inactivity_notified_at=%s WHERE user_id=%s", (at, int(user_id)))
            return cur.rowcount > 0
