"""Roll-up of time records into calendar and monthly figures.

Everything here is a pure function over already-fetched records, recomputed
whenever the underlying snapshot changes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional

from ..common.datetime_utils import coerce_date
from ..core.constants import MONTHLY_HOURS_TARGET, SECONDS_PER_DAY
from .model import TimeRecord

ZERO = Decimal(0)


@dataclass(frozen=True)
class MonthlyMetrics:
    total: Decimal = ZERO
    average: Decimal = ZERO
    days_worked: int = 0
    max_day_hours: Decimal = ZERO
    progress_percent: int = 0


@dataclass(frozen=True)
class AggregationResult:
    day_totals: Dict[str, Decimal] = field(default_factory=dict)
    marked_days: List[str] = field(default_factory=list)
    metrics: MonthlyMetrics = field(default_factory=MonthlyMetrics)


@dataclass(frozen=True)
class InactivityStatus:
    inactive: bool
    inactive_days: int


def _round_half_up(value: Decimal, places: int = 0) -> Decimal:
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def _counted_hours(record: TimeRecord) -> Optional[Decimal]:
    if record.deleted or not record.work_date:
        return None
    try:
        hours = Decimal(str(record.hours))
    except (ArithmeticError, TypeError, ValueError):
        return None
    if not hours.is_finite() or hours <= 0:
        return None
    return hours


def progress_percent(total: Decimal) -> int:
    """Share of the fixed monthly target, clamped to 0..100."""
    pct = int(_round_half_up(Decimal(total) / MONTHLY_HOURS_TARGET * 100))
    return max(0, min(100, pct))


def aggregate(records: Iterable[TimeRecord]) -> AggregationResult:
    """Per-day totals and monthly metrics for one user's records.

    Deleted records, records without a date and records with hours <= 0 are
    skipped silently.
    """
    totals: Dict[date, Decimal] = {}
    total = ZERO
    max_day = ZERO

    for record in records:
        hours = _counted_hours(record)
        if hours is None:
            continue
        day = record.work_date
        totals[day] = totals.get(day, ZERO) + hours
        total += hours
        max_day = max(max_day, totals[day])

    days_worked = len(totals)
    average = _round_half_up(total / days_worked, 1) if days_worked else ZERO

    day_totals = {day.isoformat(): hours for day, hours in sorted(totals.items())}
    return AggregationResult(
        day_totals=day_totals,
        marked_days=list(day_totals),
        metrics=MonthlyMetrics(
            total=total,
            average=average,
            days_worked=days_worked,
            max_day_hours=max_day,
            progress_percent=progress_percent(total),
        ),
    )


def inactivity_status(last_activity: Optional[datetime], now: datetime, *, enabled: bool) -> InactivityStatus:
    if not enabled:
        return InactivityStatus(inactive=False, inactive_days=0)
    if last_activity is None:
        # Never logged anything: reported as one day inactive.
        return InactivityStatus(inactive=True, inactive_days=1)

    days = math.floor((now - last_activity).total_seconds() / SECONDS_PER_DAY)
    return InactivityStatus(inactive=days >= 1, inactive_days=days)


def count_business_days(start, end, holidays: Iterable = ()) -> int:
    """Weekdays that are not holidays, stepping one day at a time from ``start``.

    ``start`` is a date (or ISO string) taken at midnight; ``end`` is usually
    "now". The cursor advances while it is still before ``end`` and each day
    it lands on is counted.
    """
    start_day = coerce_date(start)
    if start_day is None or end is None:
        return 0
    if not isinstance(end, datetime):
        end = datetime.combine(coerce_date(end), datetime.min.time())

    current = datetime.combine(start_day, datetime.min.time())
    if current >= end:
        return 0

    skip = {coerce_date(h) for h in holidays}
    count = 0
    while current < end:
        current += timedelta(days=1)
        if current.weekday() >= 5 or current.date() in skip:
            continue
        count += 1
    return count
