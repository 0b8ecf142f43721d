from __future__ import annotations

import io
from typing import Sequence

import pandas as pd

from .model import MonthlyReport

REPORT_COLUMNS = ["User", "Month", "Total hours", "Status", "Admin note", "Submitted at", "Reviewed at"]
BREAKDOWN_COLUMNS = ["User", "Date", "Hours"]


def build_reports_workbook(reports: Sequence[MonthlyReport]) -> io.BytesIO:
    """Excel workbook with one summary sheet and one per-day breakdown sheet."""
    summary = pd.DataFrame(
        [
            (
                r.user_name,
                r.month,
                float(r.total_hours),
                r.status.value,
                r.admin_note or "",
                r.submitted_at,
                r.reviewed_at,
            )
            for r in reports
        ],
        columns=REPORT_COLUMNS,
    )
    breakdown = pd.DataFrame(
        [(r.user_name, day, float(hours)) for r in reports for day, hours in sorted(r.breakdown.items())],
        columns=BREAKDOWN_COLUMNS,
    )

    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        summary.to_excel(writer, sheet_name="Reports", index=False)
        breakdown.to_excel(writer, sheet_name="Breakdown", index=False)
    out.seek(0)
    return out
