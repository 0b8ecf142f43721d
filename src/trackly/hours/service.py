from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..catalog.service import CatalogService
from ..common.datetime_utils import coerce_date, month_bounds, now_local
from ..common.permissions import require_self_or_admin
from ..common.validators import parse_hours
from ..core.enums import ActionType, Collection
from ..core.exceptions import NotFoundError, ValidationError
from ..realtime.feed import SubscriptionScope
from ..users.model import SessionUser
from ..users.repository import UserRepository
from .aggregation import AggregationResult, aggregate
from .model import NewTimeRecord, TimeRecord
from .repository import TimeRecordRepository

logger = logging.getLogger(__name__)

_EDITABLE = ("work_date", "hours", "project", "task_id", "task_type_id", "jira_issue", "description")


@dataclass(frozen=True)
class MonthView:
    """What the calendar/dashboard renders for one user and month."""

    user_id: int
    month: str
    records: Sequence[TimeRecord]
    summary: AggregationResult


class HoursService:
    def __init__(
        self,
        records: TimeRecordRepository,
        users: UserRepository,
        *,
        projects: Optional[CatalogService] = None,
        tasks: Optional[CatalogService] = None,
        task_types: Optional[CatalogService] = None,
        feed=None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._records = records
        self._users = users
        self._projects = projects
        self._tasks = tasks
        self._task_types = task_types
        self._feed = feed
        self._clock = clock

    def _changed(self) -> None:
        if self._feed:
            self._feed.notify(Collection.TIME_RECORDS)

    def _get_owned(self, actor: SessionUser, record_id: int) -> TimeRecord:
        record = self._records.get_by_id(int(record_id))
        if not record:
            raise NotFoundError("Time record not found")
        require_self_or_admin(actor, record.user_id)
        return record

    def _resolve_references(self, fields: dict) -> dict:
        """Check project/task/task type against the active catalog entries."""
        resolved = dict(fields)
        if "project" in resolved:
            project = (resolved["project"] or "").strip() or None
            if project and self._projects:
                project = self._projects.require_active_name(project).name
            resolved["project"] = project
        for key, catalog in (("task_id", self._tasks), ("task_type_id", self._task_types)):
            if key not in resolved:
                continue
            value = resolved[key]
            if value is None or str(value).strip() == "":
                resolved[key] = None
            elif catalog:
                resolved[key] = catalog.require_active(value).entry_id
            else:
                try:
                    resolved[key] = int(value)
                except (TypeError, ValueError):
                    raise ValidationError(f"{key} must be a number")
        return resolved

    def add(
        self,
        actor: SessionUser,
        *,
        work_date,
        hours,
        user_id: Optional[int] = None,
        description: str = "",
        project: Optional[str] = None,
        task_id: Optional[int] = None,
        task_type_id: Optional[int] = None,
        jira_issue: Optional[str] = None,
    ) -> int:
        target_user = int(user_id) if user_id is not None else actor.user_id
        require_self_or_admin(actor, target_user)

        day = coerce_date(work_date)
        if day is None:
            raise ValidationError("Date is required")

        if not self._users.get_by_id(target_user):
            raise NotFoundError("User not found")

        refs = self._resolve_references({"project": project, "task_id": task_id, "task_type_id": task_type_id})

        now = self._clock()
        record_id = self._records.create(
            NewTimeRecord(
                user_id=target_user,
                work_date=day,
                hours=parse_hours(hours),
                description=(description or "").strip(),
                project=refs["project"],
                task_id=refs["task_id"],
                task_type_id=refs["task_type_id"],
                jira_issue=(jira_issue or "").strip() or None,
            ),
            created_by=actor.user_id,
            created_by_role=actor.role,
            created_at=now,
        )
        # Logging hours resets the inactivity clock and the anti-spam marker.
        self._users.touch_activity(target_user, at=now)
        logger.info("Time record %s created for user %s by %s", record_id, target_user, actor.user_id)
        self._changed()
        return record_id

    def edit(self, actor: SessionUser, record_id: int, **changes) -> None:
        record = self._get_owned(actor, record_id)
        if record.deleted:
            raise ValidationError("Restore the record before editing it")

        unknown = set(changes) - set(_EDITABLE)
        if unknown:
            raise ValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

        fields = self._resolve_references(changes)
        if "hours" in fields:
            fields["hours"] = parse_hours(fields["hours"])
        if "work_date" in fields:
            fields["work_date"] = coerce_date(fields["work_date"])
            if fields["work_date"] is None:
                raise ValidationError("Date is required")
        if not fields:
            raise ValidationError("Nothing to update")

        self._records.update_fields(
            record.record_id,
            **fields,
            modified_by=actor.user_id,
            modified_by_role=actor.role,
            modified_at=self._clock(),
            action_type=ActionType.EDITED,
        )
        self._changed()

    def soft_delete(self, actor: SessionUser, record_id: int) -> None:
        record = self._get_owned(actor, record_id)
        if record.deleted:
            return
        self._records.update_fields(
            record.record_id,
            deleted=True,
            deleted_by=actor.user_id,
            deleted_by_role=actor.role,
            modified_by=actor.user_id,
            modified_by_role=actor.role,
            modified_at=self._clock(),
            action_type=ActionType.DELETED,
        )
        self._changed()

    def restore(self, actor: SessionUser, record_id: int) -> None:
        record = self._get_owned(actor, record_id)
        if not record.deleted:
            return
        self._records.update_fields(
            record.record_id,
            deleted=False,
            modified_by=actor.user_id,
            modified_by_role=actor.role,
            modified_at=self._clock(),
            action_type=ActionType.RESTORED,
        )
        self._changed()

    def list_month(self, *, user_id: int, month: str, include_deleted: bool = False) -> list[TimeRecord]:
        start, end = month_bounds(month)
        rows = self._records.list_for_user_range(user_id=int(user_id), start=start, end=end)
        return [r for r in rows if include_deleted or not r.deleted]

    def month_view(self, *, user_id: int, month: str) -> MonthView:
        records = self.list_month(user_id=user_id, month=month, include_deleted=True)
        return MonthView(user_id=int(user_id), month=month, records=records, summary=aggregate(records))

    def month_summary(self, *, user_id: int, month: str) -> AggregationResult:
        return self.month_view(user_id=user_id, month=month).summary

    def subscribe_month(
        self,
        scope: SubscriptionScope,
        *,
        user_id: int,
        month: str,
        callback: Callable[[MonthView], None],
    ):
        """Live month view; re-subscribing replaces the previous user/month selection."""
        month_bounds(month)
        return scope.subscribe(
            "hours.month",
            Collection.TIME_RECORDS,
            lambda: self.month_view(user_id=user_id, month=month),
            callback,
        )
