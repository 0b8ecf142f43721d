from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional

from ..common.datetime_utils import now_local
from ..common.permissions import require_admin
from ..common.validators import require_non_empty
from ..core.enums import Collection
from ..core.exceptions import NotFoundError, ValidationError
from ..realtime.feed import SnapshotFeed, SubscriptionScope
from ..users.model import SessionUser
from .model import CatalogEntry
from .repository import CatalogRepository

logger = logging.getLogger(__name__)


class CatalogService:
    """Admin-managed list of named entries with soft delete.

    Subclasses name the entity and the collection they publish to.
    """

    entity: str = "Entry"
    collection: Collection

    def __init__(
        self,
        entries: CatalogRepository,
        *,
        feed: Optional[SnapshotFeed] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._entries = entries
        self._feed = feed
        self._clock = clock

    def _changed(self) -> None:
        if self._feed:
            self._feed.notify(self.collection)

    def _check_unique(self, name: str, *, exclude: Optional[int] = None) -> None:
        key = name.casefold()
        if any(e.name.casefold() == key and e.entry_id != exclude for e in self._entries.list_all()):
            raise ValidationError(f"{self.entity} '{name}' already exists")

    def list_all(self) -> List[CatalogEntry]:
        return sorted(self._entries.list_all(), key=lambda e: (e.name.casefold(), e.entry_id))

    def list_active(self) -> List[CatalogEntry]:
        return [e for e in self.list_all() if e.active]

    def get(self, entry_id: int) -> CatalogEntry:
        entry = self._entries.get_by_id(int(entry_id))
        if not entry:
            raise NotFoundError(f"{self.entity} not found")
        return entry

    def create(self, actor: SessionUser, *, name: str) -> int:
        require_admin(actor)
        name = require_non_empty(name, "Name")
        self._check_unique(name)

        entry_id = self._entries.create(name=name, created_at=self._clock())
        logger.info("%s %s (%s) created by admin %s", self.entity, entry_id, name, actor.user_id)
        self._changed()
        return entry_id

    def update(self, actor: SessionUser, entry_id: int, *, name: Optional[str] = None, active: Optional[bool] = None) -> None:
        require_admin(actor)
        entry = self.get(entry_id)

        fields: dict = {}
        if name is not None:
            name = require_non_empty(name, "Name")
            self._check_unique(name, exclude=entry.entry_id)
            fields["name"] = name
        if active is not None:
            fields["active"] = bool(active)
        if not fields:
            raise ValidationError("Nothing to update")

        self._entries.update_fields(entry.entry_id, **fields, updated_at=self._clock())
        self._changed()

    def deactivate(self, actor: SessionUser, entry_id: int) -> None:
        """Soft delete; existing records keep their reference."""
        require_admin(actor)
        entry = self.get(entry_id)
        if not entry.active:
            return
        self._entries.update_fields(entry.entry_id, active=False, updated_at=self._clock())
        logger.info("%s %s deactivated by admin %s", self.entity, entry.entry_id, actor.user_id)
        self._changed()

    def require_active(self, entry_id) -> CatalogEntry:
        try:
            entry = self._entries.get_by_id(int(entry_id))
        except (TypeError, ValueError):
            raise ValidationError(f"{self.entity} id must be a number")
        if not entry or not entry.active:
            raise ValidationError(f"{self.entity} is not available")
        return entry

    def require_active_name(self, name: str) -> CatalogEntry:
        key = (name or "").strip().casefold()
        for entry in self.list_active():
            if entry.name.casefold() == key:
                return entry
        raise ValidationError(f"{self.entity} '{name}' is not available")

    def subscribe(
        self,
        scope: SubscriptionScope,
        callback: Callable[[List[CatalogEntry]], None],
        *,
        active_only: bool = False,
    ):
        loader = self.list_active if active_only else self.list_all
        return scope.subscribe(self.collection.value, self.collection, loader, callback)
