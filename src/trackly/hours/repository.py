from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import NewTimeRecord, TimeRecord


class TimeRecordRepository(Protocol):
    def get_by_id(self, record_id: int) -> Optional[TimeRecord]:
        raise NotImplementedError

    def list_for_user_range(self, *, user_id: int, start: date, end: date) -> Sequence[TimeRecord]:
        """Records (deleted ones included) with start <= work_date <= end."""

        raise NotImplementedError

    def list_range(self, *, start: date, end: date) -> Sequence[TimeRecord]:
        raise NotImplementedError

    def create(self, record: NewTimeRecord, *, created_by: int, created_by_role: Role, created_at: datetime) -> int:
        raise NotImplementedError

    def update_fields(self, record_id: int, **fields) -> bool:
        """Partial in-place update of a record (edit, soft delete, restore)."""

        raise NotImplementedError
