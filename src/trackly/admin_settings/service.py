from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..common.permissions import require_admin
from ..core.enums import Collection, TracklyMode
from ..core.exceptions import ValidationError
from ..realtime.feed import SnapshotFeed, SubscriptionScope
from ..users.model import SessionUser
from .model import AdminSettings
from .repository import AdminSettingsRepository

logger = logging.getLogger(__name__)


def _positive_int(value, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number")
    if number < 1:
        raise ValidationError(f"{field_name} must be at least 1")
    return number


class AdminSettingsService:
    def __init__(
        self,
        settings: AdminSettingsRepository,
        *,
        feed: Optional[SnapshotFeed] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._settings = settings
        self._feed = feed
        self._clock = clock

    def get(self) -> AdminSettings:
        return self._settings.get() or AdminSettings()

    def save(
        self,
        actor: SessionUser,
        *,
        mode=None,
        inactivity_enabled: Optional[bool] = None,
        inactivity_hours=None,
        reminder_enabled: Optional[bool] = None,
        reminder_days=None,
    ) -> AdminSettings:
        """Partial update: omitted values keep what is stored."""
        require_admin(actor)
        current = self.get()
        changes = {}

        if mode is not None:
            try:
                changes["mode"] = TracklyMode(mode)
            except ValueError:
                raise ValidationError(f"Invalid mode: {mode!r}")
        if inactivity_enabled is not None:
            changes["inactivity_enabled"] = bool(inactivity_enabled)
        if inactivity_hours is not None:
            changes["inactivity_hours"] = _positive_int(inactivity_hours, "Inactivity hours")
        if reminder_enabled is not None:
            changes["reminder_enabled"] = bool(reminder_enabled)
        if reminder_days is not None:
            changes["reminder_days"] = _positive_int(reminder_days, "Reminder days")

        updated = replace(current, **changes, updated_at=self._clock())
        self._settings.save(updated)
        logger.info("Admin settings saved by %s (mode=%s)", actor.user_id, updated.mode.value)
        if self._feed:
            self._feed.notify(Collection.ADMIN_SETTINGS)
        return updated

    def subscribe(self, scope: SubscriptionScope, callback: Callable[[AdminSettings], None]):
        return scope.subscribe("admin_settings", Collection.ADMIN_SETTINGS, self.get, callback)
