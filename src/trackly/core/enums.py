from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization checks."""

    ADMIN = "admin"
    USER = "user"


class ActionType(str, Enum):
    """Last audit action applied to a time record."""

    CREATED = "created"
    EDITED = "edited"
    DELETED = "deleted"
    RESTORED = "restored"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ReportStatus(str, Enum):
    """Monthly report review state."""

    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


class TracklyMode(str, Enum):
    """Product mode chosen by the administrator; drives feature flags."""

    HOURS = "hours"
    PROJECTS = "projects"
    FULL = "full"


class Collection(str, Enum):
    """Logical collections published through the snapshot feed."""

    TIME_RECORDS = "timeRecords"
    WORK_ITEMS = "workItems"
    WORK_ITEM_STATUSES = "workItemStatuses"
    MONTHLY_REPORTS = "monthlyReports"
    HOLIDAYS = "holidays"
    ADMIN_SETTINGS = "adminSettings"
    USERS = "users"
    PROJECTS = "projects"
    TASKS = "tasks"
    TASK_TYPES = "taskTypes"
