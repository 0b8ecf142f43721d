from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from ..common.permissions import require_admin
from ..common.validators import require_non_empty
from ..core.enums import Collection
from ..core.exceptions import NotFoundError, ValidationError
from ..realtime.feed import SnapshotFeed, SubscriptionScope
from ..users.model import SessionUser
from .model import Status
from .repository import StatusRepository

logger = logging.getLogger(__name__)


def normalize_key(key: str) -> str:
    return (key or "").strip().lower()


class StatusRegistry:
    """Ordered, mutable set of kanban workflow states."""

    def __init__(self, statuses: StatusRepository, *, feed: Optional[SnapshotFeed] = None):
        self._statuses = statuses
        self._feed = feed

    def _changed(self) -> None:
        if self._feed:
            self._feed.notify(Collection.WORK_ITEM_STATUSES)

    def _get(self, status_id: int) -> Status:
        status = self._statuses.get_by_id(int(status_id))
        if not status:
            raise NotFoundError("Status not found")
        return status

    def list_all(self) -> List[Status]:
        return sorted(self._statuses.list_all(), key=lambda s: (s.order, s.status_id))

    def list_active(self) -> List[Status]:
        return [s for s in self.list_all() if s.active]

    def active_keys(self) -> set[str]:
        return {s.key for s in self.list_active()}

    def create(self, actor: SessionUser, *, key: str, label: str) -> int:
        require_admin(actor)
        key = normalize_key(require_non_empty(key, "Key"))
        label = require_non_empty(label, "Label")

        existing = self.list_all()
        if any(normalize_key(s.key) == key for s in existing):
            raise ValidationError(f"A status with key '{key}' already exists")

        order = max(s.order for s in existing) + 1 if existing else 0
        status_id = self._statuses.create(key=key, label=label, order=order, active=True)
        logger.info("Status %s (%s) created at order %s", status_id, key, order)
        self._changed()
        return status_id

    def update_label(self, actor: SessionUser, status_id: int, *, label: str) -> None:
        require_admin(actor)
        status = self._get(status_id)
        self._statuses.update_label(status.status_id, require_non_empty(label, "Label"))
        self._changed()

    def toggle_active(self, actor: SessionUser, status_id: int) -> bool:
        require_admin(actor)
        status = self._get(status_id)
        active = not status.active
        self._statuses.set_active(status.status_id, active)
        self._changed()
        return active

    def reorder(self, actor: SessionUser, ordered_ids: Sequence[int]) -> List[Status]:
        """Persist a new total order given as the full sequence of status ids."""
        require_admin(actor)
        current = self.list_all()
        by_id = {s.status_id: s for s in current}

        ids = [int(i) for i in ordered_ids]
        if len(ids) != len(set(ids)) or set(ids) != set(by_id):
            raise ValidationError("Reorder must list every status exactly once")

        changes = [(sid, idx) for idx, sid in enumerate(ids) if by_id[sid].order != idx]
        self._statuses.batch_update_order(changes)
        if changes:
            self._changed()
        return self.list_all()

    def subscribe(
        self,
        scope: SubscriptionScope,
        callback: Callable[[List[Status]], None],
        *,
        active_only: bool = False,
        name: str = "statuses",
    ):
        loader = self.list_active if active_only else self.list_all
        return scope.subscribe(name, Collection.WORK_ITEM_STATUSES, loader, callback)
