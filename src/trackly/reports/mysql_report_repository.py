from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional, Sequence

from ..core.enums import ReportStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import MonthlyReport, ReportEntry
from .repository import ReportRepository

_COLUMNS = """
    report_id, user_id, user_name, month, total_hours, breakdown, entries, status,
    admin_note, submitted_at, reviewed_at
"""


def _load_breakdown(raw) -> Dict[str, Decimal]:
    if not raw:
        return {}
    data = json.loads(raw) if isinstance(raw, (str, bytes, bytearray)) else raw
    return {str(day): Decimal(str(hours)) for day, hours in data.items()}


def _dump_entry(entry: ReportEntry) -> dict:
    return {"date": entry.date, "hours": str(entry.hours), "description": entry.description}


def _load_entries(raw) -> tuple[ReportEntry, ...]:
    if not raw:
        return ()
    data = json.loads(raw) if isinstance(raw, (str, bytes, bytearray)) else raw
    return tuple(
        ReportEntry(
            date=str(e.get("date") or ""),
            hours=Decimal(str(e.get("hours") or 0)),
            description=e.get("description") or "",
        )
        for e in data
    )


class MySQLReportRepository(ReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_report(r: dict) -> MonthlyReport:
        return MonthlyReport(
            report_id=int(r["report_id"]),
            user_id=int(r["user_id"]),
            user_name=r["user_name"],
            month=r["month"],
            total_hours=Decimal(r.get("total_hours") or 0),
            breakdown=_load_breakdown(r.get("breakdown")),
            entries=_load_entries(r.get("entries")),
            status=ReportStatus(r["status"]),
            admin_note=r.get("admin_note"),
            submitted_at=r["submitted_at"],
            reviewed_at=r.get("reviewed_at"),
        )

    def get_by_id(self, report_id: int) -> Optional[MonthlyReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM monthly_reports WHERE report_id=%s", (int(report_id),))
            r = fetchone(cur)
            return self._to_report(r) if r else None

    def list_for_user(self, user_id: int, *, month: Optional[str] = None) -> Sequence[MonthlyReport]:
        sql = f"SELECT {_COLUMNS} FROM monthly_reports WHERE user_id=%s"
        params: list = [int(user_id)]
        if month:
            sql += " AND month=%s"
            params.append(month)
        sql += " ORDER BY month DESC, submitted_at DESC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [self._to_report(r) for r in fetchall(cur)]

    def list_all(self, *, month: Optional[str] = None, status: Optional[ReportStatus] = None) -> Sequence[MonthlyReport]:
        where = []
        params: list = []
        if month:
            where.append("month=%s")
            params.append(month)
        if status:
            where.append("status=%s")
            params.append(status.value)

        sql = f"SELECT {_COLUMNS} FROM monthly_reports"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY month DESC, submitted_at DESC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [self._to_report(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        user_id: int,
        user_name: str,
        month: str,
        total_hours: Decimal,
        breakdown: Dict[str, Decimal],
        entries: Sequence[ReportEntry],
        submitted_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO monthly_reports(
                    user_id, user_name, month, total_hours, breakdown, entries, status, submitted_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    user_name,
                    month,
                    total_hours,
                    json.dumps({day: str(hours) for day, hours in breakdown.items()}),
                    json.dumps([_dump_entry(e) for e in entries]),
                    ReportStatus.SUBMITTED.value,
                    submitted_at,
                ),
            )
            return int(cur.lastrowid)

    def set_review(self, report_id: int, *, status: ReportStatus, admin_note: str, reviewed_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE monthly_reports SET status=%s, admin_note=%s, reviewed_at=%s WHERE report_id=%s",
                (status.value, admin_note, reviewed_at, int(report_id)),
            )
            return cur.rowcount > 0
