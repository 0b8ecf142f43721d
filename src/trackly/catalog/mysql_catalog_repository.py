from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, set_clause
from .model import CatalogEntry
from .repository import CatalogRepository

_UPDATABLE = {"name", "active", "updated_at"}


class MySQLCatalogRepository(CatalogRepository):
    """Shared SQL for the name/active lookup tables.

    Subclasses set ``table`` and ``id_column``; both are fixed strings, never
    request input.
    """

    table: str = ""
    id_column: str = ""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _columns(self) -> str:
        return f"{self.id_column}, name, active, created_at, updated_at"

    def _to_entry(self, r: dict) -> CatalogEntry:
        return CatalogEntry(
            entry_id=int(r[self.id_column]),
            name=r["name"],
            active=bool(r["active"]),
            created_at=r.get("created_at"),
            updated_at=r.get("updated_at"),
        )

    def list_all(self) -> Sequence[CatalogEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {self._columns()} FROM {self.table} ORDER BY name ASC")
            return [self._to_entry(r) for r in fetchall(cur)]

    def get_by_id(self, entry_id: int) -> Optional[CatalogEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {self._columns()} FROM {self.table} WHERE {self.id_column}=%s", (int(entry_id),))
            r = fetchone(cur)
            return self._to_entry(r) if r else None

    def create(self, *, name: str, created_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO {self.table}(name, active, created_at) VALUES(%s,1,%s)",
                (name, created_at),
            )
            return int(cur.lastrowid)

    def update_fields(self, entry_id: int, **fields) -> bool:
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Unsupported {self.table} fields: {sorted(unknown)}")
        if not fields:
            return False
        if "active" in fields:
            fields["active"] = int(bool(fields["active"]))
        cols, params = set_clause(fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE {self.table} SET {cols} WHERE {self.id_column}=%s", (*params, int(entry_id)))
            return cur.rowcount > 0
