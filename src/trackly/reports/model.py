from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from ..core.enums import ReportStatus


@dataclass(frozen=True)
class ReportEntry:
    """One logged record as it was when the report was submitted."""

    date: str
    hours: Decimal
    description: str = ""


@dataclass(frozen=True)
class MonthlyReport:
    report_id: int
    user_id: int
    user_name: str
    month: str
    total_hours: Decimal
    status: ReportStatus
    submitted_at: datetime
    breakdown: Dict[str, Decimal] = field(default_factory=dict)
    entries: Tuple[ReportEntry, ...] = ()
    admin_note: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    # Filled for the admin inbox only.
    entries_by_date: Dict[str, List[ReportEntry]] = field(default_factory=dict)


def group_entries_by_date(entries: Sequence[ReportEntry]) -> Dict[str, List[ReportEntry]]:
    grouped: Dict[str, List[ReportEntry]] = {}
    for entry in entries:
        if not entry.date:
            continue
        grouped.setdefault(entry.date, []).append(entry)
    return grouped
