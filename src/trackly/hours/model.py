from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import ActionType, Role


@dataclass(frozen=True)
class TimeRecord:
    """Domain entity: hours logged by a user on one day.

    Records are never hard-deleted; ``deleted`` marks a soft delete and the
    ``*_by`` / ``*_by_role`` pairs keep the audit trail.
    """

    record_id: int
    user_id: int
    work_date: Optional[date]
    hours: Decimal
    description: str = ""
    project: Optional[str] = None
    task_id: Optional[int] = None
    task_type_id: Optional[int] = None
    jira_issue: Optional[str] = None
    deleted: bool = False
    action_type: ActionType = ActionType.CREATED
    created_by: Optional[int] = None
    created_by_role: Optional[Role] = None
    modified_by: Optional[int] = None
    modified_by_role: Optional[Role] = None
    deleted_by: Optional[int] = None
    deleted_by_role: Optional[Role] = None
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None


@dataclass(frozen=True)
class NewTimeRecord:
    user_id: int
    work_date: date
    hours: Decimal
    description: str = ""
    project: Optional[str] = None
    task_id: Optional[int] = None
    task_type_id: Optional[int] = None
    jira_issue: Optional[str] = None
