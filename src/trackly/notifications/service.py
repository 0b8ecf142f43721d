from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

from ..admin_settings.service import AdminSettingsService
from ..common.datetime_utils import now_local
from ..core.enums import Role
from ..users.repository import UserRepository
from .sender import PUSH_TITLE, PushSender

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    notified: List[int] = field(default_factory=list)
    failed: List[int] = field(default_factory=list)
    skipped: int = 0


class NotificationService:
    def __init__(
        self,
        users: UserRepository,
        settings: AdminSettingsService,
        sender: PushSender,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._users = users
        self._settings = settings
        self._sender = sender
        self._clock = clock

    def register_token(self, user_id: int, token: Optional[str]) -> bool:
        """Store the device token; a missing token (permission denied) is a no-op."""
        token = (token or "").strip()
        if not token:
            logger.info("No push token for user %s; notifications stay off", user_id)
            return False
        self._users.update_fields(int(user_id), push_token=token)
        return True

    def sweep_inactive(self, now: Optional[datetime] = None) -> SweepResult:
        """Push a reminder to each user idle longer than the configured hours.

        A user is reminded once; logging hours clears the marker.
        """
        result = SweepResult()
        settings = self._settings.get()
        if not settings.inactivity_enabled:
            return result

        now = now or self._clock()
        limit_seconds = settings.inactivity_hours * 3600

        for user in self._users.list_all():
            if (
                user.role == Role.ADMIN
                or user.disabled
                or not user.last_activity_at
                or not user.push_token
                or user.inactivity_notified_at
            ):
                result.skipped += 1
                continue

            idle = (now - user.last_activity_at).total_seconds()
            if idle < limit_seconds:
                result.skipped += 1
                continue

            body = f"It has been {idle / 3600:.1f} hours since you last logged hours"
            try:
                self._sender.send(token=user.push_token, title=PUSH_TITLE, body=body)
                self._users.mark_inactivity_notified(user.user_id, at=now)
            except Exception:
                logger.exception("Inactivity push failed for user %s", user.user_id)
                result.failed.append(user.user_id)
                continue
            result.notified.append(user.user_id)

        logger.info("Inactivity sweep: %s notified, %s failed", len(result.notified), len(result.failed))
        return result
