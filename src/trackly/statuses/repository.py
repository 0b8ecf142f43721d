from __future__ import annotations

from typing import Optional, Protocol, Sequence, Tuple

from .model import Status


class StatusRepository(Protocol):
    def list_all(self) -> Sequence[Status]:
        """All statuses, ascending ``order``."""

        raise NotImplementedError

    def get_by_id(self, status_id: int) -> Optional[Status]:
        raise NotImplementedError

    def create(self, *, key: str, label: str, order: int, active: bool = True) -> int:
        raise NotImplementedError

    def update_label(self, status_id: int, label: str) -> bool:
        raise NotImplementedError

    def set_active(self, status_id: int, active: bool) -> bool:
        raise NotImplementedError

    def batch_update_order(self, changes: Sequence[Tuple[int, int]]) -> None:
        """Apply every (status_id, order) pair atomically: all or nothing."""

        raise NotImplementedError
