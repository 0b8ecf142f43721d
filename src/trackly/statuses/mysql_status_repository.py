from __future__ import annotations

from typing import Optional, Sequence, Tuple

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Status
from .repository import StatusRepository


class MySQLStatusRepository(StatusRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_status(r: dict) -> Status:
        return Status(
            status_id=int(r["status_id"]),
            key=r["status_key"],
            label=r["label"],
            order=int(r["sort_order"]),
            active=bool(r["active"]),
        )

    def list_all(self) -> Sequence[Status]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT status_id, status_key, label, sort_order, active
                FROM work_item_statuses
                ORDER BY sort_order ASC, status_id ASC
                """
            )
            return [self._to_status(r) for r in fetchall(cur)]

    def get_by_id(self, status_id: int) -> Optional[Status]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT status_id, status_key, label, sort_order, active FROM work_item_statuses WHERE status_id=%s",
                (int(status_id),),
            )
            r = fetchone(cur)
            return self._to_status(r) if r else None

    def create(self, *, key: str, label: str, order: int, active: bool = True) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO work_item_statuses(status_key, label, sort_order, active) VALUES(%s,%s,%s,%s)",
                (key, label, int(order), int(bool(active))),
            )
            return int(cur.lastrowid)

    def update_label(self, status_id: int, label: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE work_item_statuses SET label=%s WHERE status_id=%s", (label, int(status_id)))
            return cur.rowcount > 0

    def set_active(self, status_id: int, active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE work_item_statuses SET active=%s WHERE status_id=%s",
                (int(bool(active)), int(status_id)),
            )
            return cur.rowcount > 0

    def batch_update_order(self, changes: Sequence[Tuple[int, int]]) -> None:
        if not changes:
            return
        # One transaction: db_cursor rolls back everything if any update fails.
        with db_cursor(self._conn_factory) as (_, cur):
            for status_id, order in changes:
                cur.execute(
                    "UPDATE work_item_statuses SET sort_order=%s WHERE status_id=%s",
                    (int(order), int(status_id)),
                )
