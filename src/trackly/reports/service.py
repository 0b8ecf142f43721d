from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, List, Optional, Sequence

from ..common.datetime_utils import now_local, parse_month
from ..common.permissions import require_admin, require_self_or_admin
from ..core.enums import Collection, ReportStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..hours.model import TimeRecord
from ..hours.service import HoursService
from ..realtime.feed import SnapshotFeed, SubscriptionScope
from ..users.model import SessionUser
from .export import build_reports_workbook
from .model import MonthlyReport, ReportEntry, group_entries_by_date
from .repository import ReportRepository

logger = logging.getLogger(__name__)

# A new submission is refused while one of these exists for the same user and month.
BLOCKING_STATUSES = frozenset({ReportStatus.SUBMITTED, ReportStatus.APPROVED})
REVIEW_STATUSES = frozenset({ReportStatus.APPROVED, ReportStatus.REJECTED})


def snapshot_entries(records: Sequence[TimeRecord]) -> tuple[ReportEntry, ...]:
    """Counted records of the month, in date order, frozen into the report."""
    entries = []
    for r in sorted(records, key=lambda r: (r.work_date or date.min, r.record_id)):
        if r.deleted or not r.work_date:
            continue
        hours = Decimal(str(r.hours))
        if hours <= 0:
            continue
        entries.append(ReportEntry(date=r.work_date.isoformat(), hours=hours, description=r.description or ""))
    return tuple(entries)


class ReportService:
    """Monthly report workflow: submitted -> approved | rejected (re-reviewable)."""

    def __init__(
        self,
        reports: ReportRepository,
        hours: HoursService,
        *,
        feed: Optional[SnapshotFeed] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._reports = reports
        self._hours = hours
        self._feed = feed
        self._clock = clock

    def _changed(self) -> None:
        if self._feed:
            self._feed.notify(Collection.MONTHLY_REPORTS)

    def submit(self, actor: SessionUser, *, month: str) -> int:
        parse_month(month)

        existing = self._reports.list_for_user(actor.user_id, month=month)
        blocking = [r for r in existing if r.status in BLOCKING_STATUSES]
        if blocking:
            raise ValidationError("A pending or approved report already exists for this month")

        view = self._hours.month_view(user_id=actor.user_id, month=month)
        summary = view.summary
        if not summary.day_totals:
            raise ValidationError("There are no hours logged for this month")

        report_id = self._reports.create(
            user_id=actor.user_id,
            user_name=actor.name,
            month=month,
            total_hours=summary.metrics.total,
            breakdown=summary.day_totals,
            entries=snapshot_entries(view.records),
            submitted_at=self._clock(),
        )
        logger.info("Monthly report %s submitted by user %s for %s", report_id, actor.user_id, month)
        self._changed()
        return report_id

    def review(self, actor: SessionUser, report_id: int, *, status, note: str) -> None:
        require_admin(actor)
        try:
            status = ReportStatus(status)
        except ValueError:
            raise ValidationError(f"Invalid report status: {status!r}")
        if status not in REVIEW_STATUSES:
            raise ValidationError("A report can only be approved or rejected")

        note = (note or "").strip()
        if not note:
            raise ValidationError("An administrator note is required")

        report = self._reports.get_by_id(int(report_id))
        if not report:
            raise NotFoundError("Report not found")

        self._reports.set_review(report.report_id, status=status, admin_note=note, reviewed_at=self._clock())
        logger.info("Report %s marked %s by admin %s", report.report_id, status.value, actor.user_id)
        self._changed()

    def approve(self, actor: SessionUser, report_id: int, *, note: str) -> None:
        self.review(actor, report_id, status=ReportStatus.APPROVED, note=note)

    def reject(self, actor: SessionUser, report_id: int, *, note: str) -> None:
        self.review(actor, report_id, status=ReportStatus.REJECTED, note=note)

    def list_for_user(self, actor: SessionUser, user_id: Optional[int] = None) -> List[MonthlyReport]:
        user_id = actor.user_id if user_id is None else int(user_id)
        require_self_or_admin(actor, user_id)
        return list(self._reports.list_for_user(user_id))

    def list_all(self, actor: SessionUser, *, month: Optional[str] = None, status=None) -> List[MonthlyReport]:
        require_admin(actor)
        if status:
            try:
                status = ReportStatus(status)
            except ValueError:
                raise ValidationError(f"Invalid report status: {status!r}")
        reports = self._reports.list_all(month=month, status=status or None)
        return [replace(r, entries_by_date=group_entries_by_date(r.entries)) for r in reports]

    def export_month(self, actor: SessionUser, *, month: str):
        """xlsx workbook (BytesIO) with every report submitted for ``month``."""
        parse_month(month)
        return build_reports_workbook(self.list_all(actor, month=month))

    def subscribe_user(self, scope: SubscriptionScope, actor: SessionUser, callback):
        return scope.subscribe("reports.user", Collection.MONTHLY_REPORTS, lambda: self.list_for_user(actor), callback)

    def subscribe_inbox(self, scope: SubscriptionScope, actor: SessionUser, callback):
        require_admin(actor)
        return scope.subscribe("reports.inbox", Collection.MONTHLY_REPORTS, lambda: self.list_all(actor), callback)
