from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class CatalogEntry:
    """Admin-managed lookup value: a project, a task or a task type.

    Entries are never removed; deleting one clears ``active`` so records that
    already point at it keep resolving.
    """

    entry_id: int
    name: str
    active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
