from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from trackly.admin_settings.model import AdminSettings
from trackly.admin_settings.service import AdminSettingsService
from trackly.core.exceptions import AuthorizationError
from trackly.holidays.service import HolidayService
from trackly.hours.model import TimeRecord
from trackly.stats.service import AdminStatsService

from tests.fakes import (
    ADMIN,
    ALICE,
    BOB,
    FixedClock,
    InMemoryHolidays,
    InMemorySettings,
    InMemoryTimeRecords,
    InMemoryUsers,
    user_from_session,
)

NOW = datetime(2025, 3, 7, 0, 0)


def build(*, holidays=(), inactivity_enabled=True, users=None):
    records = InMemoryTimeRecords(
        [
            TimeRecord(record_id=1, user_id=ALICE.user_id, work_date=date(2025, 3, 3), hours=Decimal(4)),
            TimeRecord(record_id=2, user_id=ALICE.user_id, work_date=date(2025, 3, 3), hours=Decimal(2)),
            TimeRecord(record_id=3, user_id=ALICE.user_id, work_date=date(2025, 3, 4), hours=Decimal(0)),
            TimeRecord(record_id=4, user_id=BOB.user_id, work_date=date(2025, 2, 28), hours=Decimal(8)),
        ]
    )
    users = users or InMemoryUsers([user_from_session(u) for u in (ADMIN, ALICE, BOB)])
    settings = AdminSettingsService(InMemorySettings(AdminSettings(inactivity_enabled=inactivity_enabled)))
    return AdminStatsService(
        records,
        users,
        HolidayService(InMemoryHolidays(holidays)),
        settings,
        clock=FixedClock(NOW),
    )


def test_month_stats_per_user():
    stats = {s.user_id: s for s in build().month_stats(ADMIN, "2025-03")}

    alice = stats[ALICE.user_id]
    assert alice.total_hours == 6
    assert alice.days_count == 1
    assert alice.last_activity_date == "2025-03-03"
    # 2025-03-03 23:59:59 -> 2025-03-07 00:00 is 3 days and 1 second.
    assert alice.minutes_since_last_activity == 3 * 24 * 60
    assert alice.business_days_inactive == 4

    bob = stats[BOB.user_id]
    assert bob.total_hours == 0
    assert bob.last_activity_date is None
    assert bob.minutes_since_last_activity is None
    assert bob.business_days_inactive is None


def test_holidays_reduce_business_days():
    stats = {s.user_id: s for s in build(holidays=[date(2025, 3, 5)]).month_stats(ADMIN, "2025-03")}

    assert stats[ALICE.user_id].business_days_inactive == 3


def test_stats_are_admin_only():
    with pytest.raises(AuthorizationError):
        build().month_stats(ALICE, "2025-03")


def test_user_inactivity_respects_the_toggle():
    users = InMemoryUsers(
        [user_from_session(ALICE, last_activity_at=NOW - timedelta(days=2, hours=1)), user_from_session(BOB)]
    )

    status = build(users=users).user_inactivity(ALICE)
    assert (status.inactive, status.inactive_days) == (True, 2)

    never = build(users=users).user_inactivity(BOB)
    assert (never.inactive, never.inactive_days) == (True, 1)

    off = build(users=users, inactivity_enabled=False).user_inactivity(ALICE)
    assert (off.inactive, off.inactive_days) == (False, 0)
