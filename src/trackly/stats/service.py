"""Per-user monthly statistics for the admin overview."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Callable, Dict, List, Optional

from ..admin_settings.service import AdminSettingsService
from ..common.datetime_utils import month_bounds, now_local
from ..common.permissions import require_admin, require_self_or_admin
from ..core.enums import Collection
from ..core.exceptions import NotFoundError
from ..holidays.service import HolidayService
from ..hours.aggregation import InactivityStatus, aggregate, count_business_days, inactivity_status
from ..hours.model import TimeRecord
from ..hours.repository import TimeRecordRepository
from ..realtime.feed import SubscriptionScope
from ..users.model import SessionUser
from ..users.repository import UserRepository

END_OF_DAY = time(23, 59, 59)


@dataclass(frozen=True)
class UserMonthStats:
    user_id: int
    name: Optional[str]
    email: str
    disabled: bool
    total_hours: Decimal
    days_count: int
    last_activity_date: Optional[str]
    minutes_since_last_activity: Optional[int]
    business_days_inactive: Optional[int]


class AdminStatsService:
    def __init__(
        self,
        records: TimeRecordRepository,
        users: UserRepository,
        holidays: HolidayService,
        settings: AdminSettingsService,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._records = records
        self._users = users
        self._holidays = holidays
        self._settings = settings
        self._clock = clock

    def month_stats(self, actor: SessionUser, month: str) -> List[UserMonthStats]:
        require_admin(actor)
        start, end = month_bounds(month)
        now = self._clock()

        by_user: Dict[int, List[TimeRecord]] = {}
        for record in self._records.list_range(start=start, end=end):
            by_user.setdefault(record.user_id, []).append(record)

        result = []
        for user in self._users.list_all():
            summary = aggregate(by_user.get(user.user_id, ()))
            last_day = summary.marked_days[-1] if summary.marked_days else None

            minutes = business_days = None
            if last_day:
                last_day_date = date.fromisoformat(last_day)
                elapsed = now - datetime.combine(last_day_date, END_OF_DAY)
                minutes = max(0, math.floor(elapsed.total_seconds() / 60))
                business_days = self.business_days_since(last_day_date, now)

            result.append(
                UserMonthStats(
                    user_id=user.user_id,
                    name=user.name,
                    email=user.email,
                    disabled=user.disabled,
                    total_hours=summary.metrics.total,
                    days_count=summary.metrics.days_worked,
                    last_activity_date=last_day,
                    minutes_since_last_activity=minutes,
                    business_days_inactive=business_days,
                )
            )
        return result

    def business_days_since(self, start: date, now: datetime) -> int:
        if datetime.combine(start, time.min) >= now:
            return 0
        holidays = self._holidays.list_between(start, now.date())
        return count_business_days(start, now, holidays)

    def user_inactivity(self, actor: SessionUser, user_id: Optional[int] = None) -> InactivityStatus:
        """Dashboard banner state for one user, honouring the admin toggle."""
        user_id = actor.user_id if user_id is None else int(user_id)
        require_self_or_admin(actor, user_id)
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        settings = self._settings.get()
        return inactivity_status(user.last_activity_at, self._clock(), enabled=settings.inactivity_enabled)

    def subscribe_month(self, scope: SubscriptionScope, actor: SessionUser, month: str, callback):
        require_admin(actor)
        month_bounds(month)

        def loader():
            return self.month_stats(actor, month)

        # Stats depend on both collections; one scoped subscription per source.
        scope.subscribe("stats.hours", Collection.TIME_RECORDS, loader, callback)
        return scope.subscribe("stats.users", Collection.USERS, loader, callback)
