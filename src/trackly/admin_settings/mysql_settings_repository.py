from __future__ import annotations

from typing import Optional

from ..core.enums import TracklyMode
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import AdminSettings
from .repository import AdminSettingsRepository

SETTINGS_ROW_ID = 1


class MySQLAdminSettingsRepository(AdminSettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self) -> Optional[AdminSettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT mode, inactivity_enabled, inactivity_hours, reminder_enabled, reminder_days, updated_at
                FROM admin_settings
                WHERE settings_id=%s
                """,
                (SETTINGS_ROW_ID,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return AdminSettings(
                mode=TracklyMode(r["mode"]),
                inactivity_enabled=bool(r["inactivity_enabled"]),
                inactivity_hours=int(r["inactivity_hours"]),
                reminder_enabled=bool(r["reminder_enabled"]),
                reminder_days=int(r["reminder_days"]),
                updated_at=r.get("updated_at"),
            )

    def save(self, settings: AdminSettings) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO admin_settings(
                    settings_id, mode, inactivity_enabled, inactivity_hours,
                    reminder_enabled, reminder_days, updated_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    mode=VALUES(mode),
                    inactivity_enabled=VALUES(inactivity_enabled),
                    inactivity_hours=VALUES(inactivity_hours),
                    reminder_enabled=VALUES(reminder_enabled),
                    reminder_days=VALUES(reminder_days),
                    updated_at=VALUES(updated_at)
                """,
                (
                    SETTINGS_ROW_ID,
                    settings.mode.value,
                    int(settings.inactivity_enabled),
                    int(settings.inactivity_hours),
                    int(settings.reminder_enabled),
                    int(settings.reminder_days),
                    settings.updated_at,
                ),
            )
