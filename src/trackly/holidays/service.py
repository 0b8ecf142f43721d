from __future__ import annotations

import logging
from datetime import date
from typing import Callable, List, Optional

from ..common.datetime_utils import coerce_date
from ..common.permissions import require_admin
from ..core.enums import Collection
from ..core.exceptions import ValidationError
from ..realtime.feed import SnapshotFeed, SubscriptionScope
from ..users.model import SessionUser
from .repository import HolidayRepository

logger = logging.getLogger(__name__)


def _year(value) -> int:
    try:
        year = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid year: {value!r}")
    if not 1900 <= year <= 9999:
        raise ValidationError(f"Invalid year: {value!r}")
    return year


class HolidayService:
    """Non-working days per calendar year, as ISO dates."""

    def __init__(self, holidays: HolidayRepository, *, feed: Optional[SnapshotFeed] = None):
        self._holidays = holidays
        self._feed = feed

    def _changed(self) -> None:
        if self._feed:
            self._feed.notify(Collection.HOLIDAYS)

    def _required_day(self, value) -> date:
        day = coerce_date(value)
        if day is None:
            raise ValidationError("Date is required")
        return day

    def list(self, year) -> List[str]:
        year = _year(year)
        days = self._holidays.list_between(start=date(year, 1, 1), end=date(year, 12, 31))
        return sorted(d.isoformat() for d in days)

    def list_between(self, start: date, end: date) -> List[date]:
        return sorted(self._holidays.list_between(start=start, end=end))

    def add(self, actor: SessionUser, day) -> bool:
        require_admin(actor)
        day = self._required_day(day)
        added = self._holidays.add(day)
        if added:
            logger.info("Holiday %s added by %s", day.isoformat(), actor.user_id)
            self._changed()
        return added

    def remove(self, actor: SessionUser, day) -> bool:
        require_admin(actor)
        day = self._required_day(day)
        removed = self._holidays.remove(day)
        if removed:
            logger.info("Holiday %s removed by %s", day.isoformat(), actor.user_id)
            self._changed()
        return removed

    def subscribe(self, scope: SubscriptionScope, year, callback: Callable[[List[str]], None]):
        year = _year(year)
        return scope.subscribe("holidays", Collection.HOLIDAYS, lambda: self.list(year), callback)
