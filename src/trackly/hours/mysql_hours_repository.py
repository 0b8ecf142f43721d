from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import ActionType, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, set_clause
from .model import NewTimeRecord, TimeRecord
from .repository import TimeRecordRepository

_COLUMNS = """
    record_id, user_id, work_date, hours, project, task_id, task_type_id, jira_issue,
    description, deleted, action_type, created_by, created_by_role, modified_by,
    modified_by_role, deleted_by, deleted_by_role, created_at, modified_at
"""

_UPDATABLE = {
    "work_date", "hours", "project", "task_id", "task_type_id", "jira_issue", "description",
    "deleted", "action_type", "modified_by", "modified_by_role", "deleted_by", "deleted_by_role",
    "modified_at",
}


def _role(value) -> Optional[Role]:
    return Role(value) if value else None


def _db_value(value):
    if isinstance(value, (Role, ActionType)):
        return value.value
    return value


class MySQLTimeRecordRepository(TimeRecordRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_record(r: dict) -> TimeRecord:
        return TimeRecord(
            record_id=int(r["record_id"]),
            user_id=int(r["user_id"]),
            work_date=r.get("work_date"),
            hours=Decimal(r.get("hours") or 0),
            project=r.get("project"),
            task_id=r.get("task_id"),
            task_type_id=r.get("task_type_id"),
            jira_issue=r.get("jira_issue"),
            description=r.get("description") or "",
            deleted=bool(r.get("deleted")),
            action_type=ActionType(r.get("action_type") or ActionType.CREATED.value),
            created_by=r.get("created_by"),
            created_by_role=_role(r.get("created_by_role")),
            modified_by=r.get("modified_by"),
            modified_by_role=_role(r.get("modified_by_role")),
            deleted_by=r.get("deleted_by"),
            deleted_by_role=_role(r.get("deleted_by_role")),
            created_at=r.get("created_at"),
            modified_at=r.get("modified_at"),
        )

    def get_by_id(self, record_id: int) -> Optional[TimeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM time_records WHERE record_id=%s", (int(record_id),))
            r = fetchone(cur)
            return self._to_record(r) if r else None

    def list_for_user_range(self, *, user_id: int, start: date, end: date) -> Sequence[TimeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_records
                WHERE user_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC, record_id ASC
                """,
                (int(user_id), start, end),
            )
            return [self._to_record(r) for r in fetchall(cur)]

    def list_range(self, *, start: date, end: date) -> Sequence[TimeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_records
                WHERE work_date BETWEEN %s AND %s
                ORDER BY user_id ASC, work_date ASC, record_id ASC
                """,
                (start, end),
            )
            return [self._to_record(r) for r in fetchall(cur)]

    def create(self, record: NewTimeRecord, *, created_by: int, created_by_role: Role, created_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_records(
                    user_id, work_date, hours, project, task_id, task_type_id, jira_issue,
                    description, deleted, action_type, created_by, created_by_role, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,0,%s,%s,%s,%s)
                """,
                (
                    int(record.user_id),
                    record.work_date,
                    record.hours,
                    record.project,
                    record.task_id,
                    record.task_type_id,
                    record.jira_issue,
                    record.description,
                    ActionType.CREATED.value,
                    int(created_by),
                    created_by_role.value,
                    created_at,
                ),
            )
            return int(cur.lastrowid)

    def update_fields(self, record_id: int, **fields) -> bool:
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Unsupported time record fields: {sorted(unknown)}")
        if not fields:
            return False
        cols, params = set_clause({k: _db_value(v) for k, v in fields.items()})
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE time_records SET {cols} WHERE record_id=%s", (*params, int(record_id)))
            return cur.rowcount > 0
