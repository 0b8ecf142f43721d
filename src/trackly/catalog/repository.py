from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import CatalogEntry


class CatalogRepository(Protocol):
    def list_all(self) -> Sequence[CatalogEntry]:
        """Every entry, ordered by name."""

        raise NotImplementedError

    def get_by_id(self, entry_id: int) -> Optional[CatalogEntry]:
        raise NotImplementedError

    def create(self, *, name: str, created_at: datetime) -> int:
        raise NotImplementedError

    def update_fields(self, entry_id: int, **fields) -> bool:
        """Partial update; accepted keys: name, active, updated_at."""

        raise NotImplementedError
