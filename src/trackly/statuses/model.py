from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Status:
    """Kanban column. ``key`` is immutable once created; ``label`` is editable."""

    status_id: int
    key: str
    label: str
    order: int
    active: bool = True
