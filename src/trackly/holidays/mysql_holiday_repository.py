from __future__ import annotations

from datetime import date
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .repository import HolidayRepository


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_between(self, *, start: date, end: date) -> Sequence[date]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT holiday_date FROM holidays WHERE holiday_date BETWEEN %s AND %s ORDER BY holiday_date",
                (start, end),
            )
            return [r["holiday_date"] for r in fetchall(cur)]

    def add(self, day: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT IGNORE INTO holidays(holiday_date) VALUES(%s)", (day,))
            return cur.rowcount > 0

    def remove(self, day: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM holidays WHERE holiday_date=%s", (day,))
            return cur.rowcount > 0
