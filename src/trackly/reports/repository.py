from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional, Protocol, Sequence

from ..core.enums import ReportStatus
from .model import MonthlyReport, ReportEntry


class ReportRepository(Protocol):
    def get_by_id(self, report_id: int) -> Optional[MonthlyReport]:
        raise NotImplementedError

    def list_for_user(self, user_id: int, *, month: Optional[str] = None) -> Sequence[MonthlyReport]:
        """Newest month first."""

        raise NotImplementedError

    def list_all(self, *, month: Optional[str] = None, status: Optional[ReportStatus] = None) -> Sequence[MonthlyReport]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        user_name: str,
        month: str,
        total_hours: Decimal,
        breakdown: Dict[str, Decimal],
        entries: Sequence[ReportEntry],
        submitted_at: datetime,
    ) -> int:
        """Always inserts a new report in the ``submitted`` state."""

        raise NotImplementedError

    def set_review(self, report_id: int, *, status: ReportStatus, admin_note: str, reviewed_at: datetime) -> bool:
        raise NotImplementedError
