from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import Priority


@dataclass(frozen=True)
class WorkItem:
    """Kanban card tagged with one status key."""

    work_item_id: int
    title: str
    status: str
    description: str = ""
    priority: Priority = Priority.MEDIUM
    project_id: Optional[int] = None
    assigned_to: Optional[int] = None
    estimate_hours: Optional[Decimal] = None
    actual_hours: Optional[Decimal] = None
    active: bool = True
    created_at: Optional[datetime] = None
    created_by: Optional[int] = None
    updated_at: Optional[datetime] = None
    updated_by: Optional[int] = None
