from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import WorkItem


class WorkItemRepository(Protocol):
    def get_by_id(self, work_item_id: int) -> Optional[WorkItem]:
        raise NotImplementedError

    def list_items(self, *, active_only: bool = True) -> Sequence[WorkItem]:
        """Newest first."""

        raise NotImplementedError

    def create(self, item: WorkItem, *, created_at: datetime, created_by: int) -> int:
        raise NotImplementedError

    def update_fields(self, work_item_id: int, **fields) -> bool:
        raise NotImplementedError
