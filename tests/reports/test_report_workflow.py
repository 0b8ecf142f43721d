import io
from datetime import date, datetime
from decimal import Decimal

import pytest

from trackly.core.enums import ReportStatus
from trackly.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from trackly.hours.model import TimeRecord
from trackly.hours.service import HoursService
from trackly.reports.model import ReportEntry
from trackly.reports.service import ReportService

from tests.fakes import (
    ADMIN,
    ALICE,
    BOB,
    FixedClock,
    InMemoryReports,
    InMemoryTimeRecords,
    InMemoryUsers,
    user_from_session,
)

NOW = datetime(2025, 4, 1, 9, 0)


def build():
    records = InMemoryTimeRecords(
        [
            TimeRecord(record_id=1, user_id=ALICE.user_id, work_date=date(2025, 3, 3), hours=Decimal(2)),
            TimeRecord(record_id=2, user_id=ALICE.user_id, work_date=date(2025, 3, 4), hours=Decimal(8)),
            TimeRecord(record_id=3, user_id=ALICE.user_id, work_date=date(2025, 3, 5), hours=Decimal(5), deleted=True),
        ]
    )
    users = InMemoryUsers([user_from_session(u) for u in (ADMIN, ALICE, BOB)])
    hours = HoursService(records, users, clock=FixedClock(NOW))
    reports = InMemoryReports()
    return ReportService(reports, hours, clock=FixedClock(NOW)), reports


def test_submit_snapshots_totals_from_aggregation():
    service, reports = build()

    report_id = service.submit(ALICE, month="2025-03")

    report = reports.get_by_id(report_id)
    assert report.status == ReportStatus.SUBMITTED
    assert report.user_name == "Alice"
    assert report.total_hours == 10
    assert report.breakdown == {"2025-03-03": Decimal(2), "2025-03-04": Decimal(8)}
    assert report.submitted_at == NOW


def test_submit_twice_for_the_same_month_is_rejected():
    service, reports = build()
    service.submit(ALICE, month="2025-03")

    with pytest.raises(ValidationError):
        service.submit(ALICE, month="2025-03")
    assert len(reports.reports) == 1


def test_submit_without_hours_is_rejected():
    service, _ = build()

    with pytest.raises(ValidationError):
        service.submit(BOB, month="2025-03")
    with pytest.raises(ValidationError):
        service.submit(ALICE, month="March")


def test_review_requires_a_note():
    service, reports = build()
    report_id = service.submit(ALICE, month="2025-03")

    with pytest.raises(ValidationError):
        service.approve(ADMIN, report_id, note="   ")
    assert reports.get_by_id(report_id).status == ReportStatus.SUBMITTED


def test_review_is_admin_only_and_cannot_return_to_submitted():
    service, _ = build()
    report_id = service.submit(ALICE, month="2025-03")

    with pytest.raises(AuthorizationError):
        service.approve(ALICE, report_id, note="self approval")
    with pytest.raises(ValidationError):
        service.review(ADMIN, report_id, status="submitted", note="back")
    with pytest.raises(ValidationError):
        service.review(ADMIN, report_id, status="pending", note="?")
    with pytest.raises(NotFoundError):
        service.approve(ADMIN, 99, note="ok")


def test_admin_can_re_review_with_a_new_note():
    service, reports = build()
    report_id = service.submit(ALICE, month="2025-03")

    service.approve(ADMIN, report_id, note="Looks good")
    service.reject(ADMIN, report_id, note="Missing Friday")

    report = reports.get_by_id(report_id)
    assert report.status == ReportStatus.REJECTED
    assert report.admin_note == "Missing Friday"
    assert report.reviewed_at == NOW


def test_resubmission_allowed_only_after_rejection():
    service, reports = build()
    first = service.submit(ALICE, month="2025-03")

    service.approve(ADMIN, first, note="ok")
    with pytest.raises(ValidationError):
        service.submit(ALICE, month="2025-03")

    service.reject(ADMIN, first, note="fix it")
    second = service.submit(ALICE, month="2025-03")

    assert second != first
    assert reports.get_by_id(second).status == ReportStatus.SUBMITTED


def test_inbox_filters_and_user_listing_permissions():
    service, _ = build()
    report_id = service.submit(ALICE, month="2025-03")

    assert [r.report_id for r in service.list_all(ADMIN, status="submitted")] == [report_id]
    assert service.list_all(ADMIN, month="2025-02") == []
    assert [r.report_id for r in service.list_for_user(ALICE)] == [report_id]
    with pytest.raises(AuthorizationError):
        service.list_for_user(BOB, ALICE.user_id)
    with pytest.raises(AuthorizationError):
        service.list_all(ALICE)


def test_unknown_inbox_status_filter_is_a_validation_error():
    service, _ = build()

    with pytest.raises(ValidationError):
        service.list_all(ADMIN, status="bogus")


def test_submit_snapshots_entries_and_inbox_groups_them_by_date():
    records = InMemoryTimeRecords(
        [
            TimeRecord(record_id=1, user_id=ALICE.user_id, work_date=date(2025, 3, 4), hours=Decimal("2.5"), description="Review"),
            TimeRecord(record_id=2, user_id=ALICE.user_id, work_date=date(2025, 3, 3), hours=Decimal(4), description="Sprint"),
            TimeRecord(record_id=3, user_id=ALICE.user_id, work_date=date(2025, 3, 4), hours=Decimal(3), description="Deploy"),
            TimeRecord(record_id=4, user_id=ALICE.user_id, work_date=date(2025, 3, 5), hours=Decimal(6), deleted=True),
            TimeRecord(record_id=5, user_id=ALICE.user_id, work_date=date(2025, 3, 6), hours=Decimal(0)),
        ]
    )
    users = InMemoryUsers([user_from_session(u) for u in (ADMIN, ALICE)])
    reports = InMemoryReports()
    service = ReportService(reports, HoursService(records, users), clock=FixedClock(NOW))

    report_id = service.submit(ALICE, month="2025-03")

    assert reports.get_by_id(report_id).entries == (
        ReportEntry(date="2025-03-03", hours=Decimal(4), description="Sprint"),
        ReportEntry(date="2025-03-04", hours=Decimal("2.5"), description="Review"),
        ReportEntry(date="2025-03-04", hours=Decimal(3), description="Deploy"),
    )
    [inbox_report] = service.list_all(ADMIN)
    assert list(inbox_report.entries_by_date) == ["2025-03-03", "2025-03-04"]
    assert [e.description for e in inbox_report.entries_by_date["2025-03-04"]] == ["Review", "Deploy"]


def test_export_month_builds_an_xlsx_workbook():
    openpyxl = pytest.importorskip("openpyxl")
    service, _ = build()
    service.submit(ALICE, month="2025-03")

    out = service.export_month(ADMIN, month="2025-03")

    workbook = openpyxl.load_workbook(io.BytesIO(out.getvalue()))
    assert workbook.sheetnames == ["Reports", "Breakdown"]
    rows = list(workbook["Reports"].iter_rows(values_only=True))
    assert rows[0][0] == "User"
    assert rows[1][:4] == ("Alice", "2025-03", 10, "submitted")
    assert workbook["Breakdown"].max_row == 3
