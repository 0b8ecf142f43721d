from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional

from ..common.datetime_utils import now_local
from ..common.permissions import require_admin
from ..common.validators import parse_optional_hours, require_non_empty
from ..core.enums import Collection, Priority
from ..core.exceptions import NotFoundError, ValidationError
from ..realtime.feed import SnapshotFeed, SubscriptionScope
from ..statuses.service import StatusRegistry
from ..users.model import SessionUser
from .model import WorkItem
from .repository import WorkItemRepository

logger = logging.getLogger(__name__)

_EDITABLE = ("title", "description", "priority", "project_id", "assigned_to", "estimate_hours", "actual_hours")


def _priority(value) -> Priority:
    try:
        return Priority(value or Priority.MEDIUM.value)
    except ValueError:
        raise ValidationError(f"Invalid priority: {value!r}")


class WorkItemService:
    def __init__(
        self,
        items: WorkItemRepository,
        statuses: StatusRegistry,
        *,
        feed: Optional[SnapshotFeed] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._items = items
        self._statuses = statuses
        self._feed = feed
        self._clock = clock

    def _changed(self) -> None:
        if self._feed:
            self._feed.notify(Collection.WORK_ITEMS)

    def _require_active_status(self, key: str) -> str:
        key = (key or "").strip().lower()
        if key not in self._statuses.active_keys():
            raise ValidationError(f"Unknown or inactive status: {key!r}")
        return key

    def get(self, work_item_id: int) -> WorkItem:
        item = self._items.get_by_id(int(work_item_id))
        if not item:
            raise NotFoundError("Work item not found")
        return item

    def list_active(self) -> List[WorkItem]:
        return list(self._items.list_items(active_only=True))

    def list_all(self) -> List[WorkItem]:
        return list(self._items.list_items(active_only=False))

    def create(
        self,
        actor: SessionUser,
        *,
        title: str,
        status: str,
        description: str = "",
        priority=Priority.MEDIUM,
        project_id: Optional[int] = None,
        assigned_to: Optional[int] = None,
        estimate_hours=None,
    ) -> int:
        item = WorkItem(
            work_item_id=0,
            title=require_non_empty(title, "Title"),
            status=self._require_active_status(status),
            description=(description or "").strip(),
            priority=_priority(priority),
            project_id=project_id,
            assigned_to=assigned_to,
            estimate_hours=parse_optional_hours(estimate_hours),
        )
        work_item_id = self._items.create(item, created_at=self._clock(), created_by=actor.user_id)
        self._changed()
        return work_item_id

    def update(self, actor: SessionUser, work_item_id: int, **changes) -> None:
        item = self.get(work_item_id)
        unknown = set(changes) - set(_EDITABLE)
        if unknown:
            raise ValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

        fields = dict(changes)
        if "title" in fields:
            fields["title"] = require_non_empty(fields["title"], "Title")
        if "priority" in fields:
            fields["priority"] = _priority(fields["priority"])
        for name in ("estimate_hours", "actual_hours"):
            if name in fields:
                fields[name] = parse_optional_hours(fields[name])
        if not fields:
            raise ValidationError("Nothing to update")

        self._items.update_fields(item.work_item_id, **fields, updated_at=self._clock(), updated_by=actor.user_id)
        self._changed()

    def move(self, actor: SessionUser, work_item_id: int, status: str) -> None:
        """Change the card's column, stamping who moved it and when."""
        key = self._require_active_status(status)
        item = self.get(work_item_id)
        if item.status == key:
            return
        self._items.update_fields(item.work_item_id, status=key, updated_at=self._clock(), updated_by=actor.user_id)
        logger.info("Work item %s moved %s -> %s by %s", item.work_item_id, item.status, key, actor.user_id)
        self._changed()

    def assign(self, actor: SessionUser, work_item_id: int, user_id: Optional[int]) -> None:
        item = self.get(work_item_id)
        self._items.update_fields(
            item.work_item_id,
            assigned_to=int(user_id) if user_id is not None else None,
            updated_at=self._clock(),
            updated_by=actor.user_id,
        )
        self._changed()

    def set_active(self, actor: SessionUser, work_item_id: int, active: bool) -> None:
        require_admin(actor)
        item = self.get(work_item_id)
        self._items.update_fields(
            item.work_item_id, active=bool(active), updated_at=self._clock(), updated_by=actor.user_id
        )
        self._changed()

    def subscribe(self, scope: SubscriptionScope, callback: Callable[[List[WorkItem]], None], *, name: str = "work_items"):
        return scope.subscribe(name, Collection.WORK_ITEMS, self.list_active, callback)
