from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import Priority
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, set_clause
from .model import WorkItem
from .repository import WorkItemRepository

_COLUMNS = """
    work_item_id, title, description, status, priority, project_id, assigned_to,
    estimate_hours, actual_hours, active, created_at, created_by, updated_at, updated_by
"""

_UPDATABLE = {
    "title", "description", "status", "priority", "project_id", "assigned_to",
    "estimate_hours", "actual_hours", "active", "updated_at", "updated_by",
}


class MySQLWorkItemRepository(WorkItemRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_item(r: dict) -> WorkItem:
        return WorkItem(
            work_item_id=int(r["work_item_id"]),
            title=r["title"],
            description=r.get("description") or "",
            status=r["status"],
            priority=Priority(r.get("priority") or Priority.MEDIUM.value),
            project_id=r.get("project_id"),
            assigned_to=r.get("assigned_to"),
            estimate_hours=r.get("estimate_hours"),
            actual_hours=r.get("actual_hours"),
            active=bool(r.get("active")),
            created_at=r.get("created_at"),
            created_by=r.get("created_by"),
            updated_at=r.get("updated_at"),
            updated_by=r.get("updated_by"),
        )

    def get_by_id(self, work_item_id: int) -> Optional[WorkItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM work_items WHERE work_item_id=%s", (int(work_item_id),))
            r = fetchone(cur)
            return self._to_item(r) if r else None

    def list_items(self, *, active_only: bool = True) -> Sequence[WorkItem]:
        where = "WHERE active=1" if active_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM work_items {where} ORDER BY created_at DESC, work_item_id DESC")
            return [self._to_item(r) for r in fetchall(cur)]

    def create(self, item: WorkItem, *, created_at: datetime, created_by: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO work_items(
                    title, description, status, priority, project_id, assigned_to,
                    estimate_hours, actual_hours, active, created_at, created_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    item.title,
                    item.description,
                    item.status,
                    item.priority.value,
                    item.project_id,
                    item.assigned_to,
                    item.estimate_hours,
                    item.actual_hours,
                    int(bool(item.active)),
                    created_at,
                    int(created_by),
                ),
            )
            return int(cur.lastrowid)

    def update_fields(self, work_item_id: int, **fields) -> bool:
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Unsupported work item fields: {sorted(unknown)}")
        if not fields:
            return False
        values = {k: (v.value if isinstance(v, Priority) else v) for k, v in fields.items()}
        cols, params = set_clause(values)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE work_items SET {cols} WHERE work_item_id=%s", (*params, int(work_item_id)))
            return cur.rowcount > 0
