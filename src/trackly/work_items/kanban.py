"""Kanban board state for one viewer.

``local_items`` is what gets rendered. Realtime snapshots replace it, except
while a card is being dragged: snapshots arriving mid-drag are dropped and the
next emission after the drag ends resyncs the board. A drop applies the new
status locally first, then persists it.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from ..realtime.feed import SubscriptionScope
from ..statuses.model import Status
from ..statuses.service import StatusRegistry
from ..users.model import SessionUser
from .model import WorkItem
from .service import WorkItemService

logger = logging.getLogger(__name__)

MOVE_FAILED_MESSAGE = "Could not move the work item. Please try again."


class KanbanBoard:
    def __init__(self, work_items: WorkItemService, statuses: StatusRegistry, actor: SessionUser):
        self._work_items = work_items
        self._statuses = statuses
        self._actor = actor

        self.local_items: List[WorkItem] = []
        self.columns_order: List[Status] = []
        self.is_dragging = False
        self.active_item_id: Optional[int] = None
        self.last_error: Optional[str] = None

    def bind(self, scope: SubscriptionScope) -> None:
        self._statuses.subscribe(scope, self.apply_statuses, active_only=True, name="kanban.statuses")
        self._work_items.subscribe(scope, self.apply_snapshot, name="kanban.items")

    def apply_snapshot(self, items: Sequence[WorkItem]) -> None:
        if self.is_dragging:
            logger.debug("Snapshot ignored during drag of work item %s", self.active_item_id)
            return
        self.local_items = list(items)

    def apply_statuses(self, statuses: Sequence[Status]) -> None:
        self.columns_order = sorted((s for s in statuses if s.active), key=lambda s: (s.order, s.status_id))

    def columns(self) -> Dict[str, List[WorkItem]]:
        """Visible columns keyed by status key, in column order.

        Items whose status is inactive are not shown on the board.
        """
        cols: Dict[str, List[WorkItem]] = {s.key: [] for s in self.columns_order}
        for item in self.local_items:
            if item.status in cols:
                cols[item.status].append(item)
        return cols

    def _find(self, item_id) -> Optional[WorkItem]:
        return next((i for i in self.local_items if i.work_item_id == item_id), None)

    def drag_start(self, item_id: int) -> None:
        self.is_dragging = True
        self.active_item_id = item_id
        self.last_error = None

    def drag_cancel(self) -> None:
        self.is_dragging = False
        self.active_item_id = None

    def drag_end(self, over: Optional[str], item_id: Optional[int] = None) -> bool:
        """Finish a drag over column ``over``; returns True when the card moved."""
        item_id = item_id if item_id is not None else self.active_item_id
        try:
            if not over or over not in {s.key for s in self.columns_order}:
                return False

            item = self._find(item_id)
            if not item or item.status == over:
                return False

            self.local_items = [replace(i, status=over) if i.work_item_id == item_id else i for i in self.local_items]
        finally:
            self.is_dragging = False
            self.active_item_id = None

        try:
            self._work_items.move(self._actor, item_id, over)
        except Exception:
            # No rollback: the next snapshot brings back the stored status.
            logger.exception("Moving work item %s to %s failed", item_id, over)
            self.last_error = MOVE_FAILED_MESSAGE
        return True
