from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Mapping, Optional

from ..core.constants import DEFAULT_INACTIVITY_HOURS, DEFAULT_REMINDER_DAYS
from ..core.enums import TracklyMode

FEATURES = ("manage_hours", "projects", "tasks", "work_items", "kanban", "reports")

_MODE_FEATURES: Dict[TracklyMode, frozenset] = {
    TracklyMode.HOURS: frozenset({"manage_hours"}),
    TracklyMode.PROJECTS: frozenset({"projects", "tasks", "work_items", "kanban"}),
    TracklyMode.FULL: frozenset(FEATURES),
}


def resolve_features(mode) -> Dict[str, bool]:
    """Feature flags enabled by a product mode; unknown modes behave as full."""
    try:
        mode = TracklyMode(mode)
    except ValueError:
        mode = TracklyMode.FULL
    enabled = _MODE_FEATURES[mode]
    return {name: name in enabled for name in FEATURES}


def infer_mode(flags: Optional[Mapping[str, object]]) -> TracklyMode:
    """Map legacy per-feature flags to a mode."""
    if not flags:
        return TracklyMode.FULL
    manages_hours = bool(flags.get("manage_hours"))
    has_projects = any(bool(flags.get(name)) for name in ("projects", "tasks", "work_items"))

    if manages_hours and not has_projects:
        return TracklyMode.HOURS
    if has_projects and not manages_hours:
        return TracklyMode.PROJECTS
    return TracklyMode.FULL


@dataclass(frozen=True)
class AdminSettings:
    mode: TracklyMode = TracklyMode.FULL
    inactivity_enabled: bool = False
    inactivity_hours: int = DEFAULT_INACTIVITY_HOURS
    reminder_enabled: bool = True
    reminder_days: int = DEFAULT_REMINDER_DAYS
    updated_at: Optional[datetime] = None

    @property
    def features(self) -> Dict[str, bool]:
        return resolve_features(self.mode)

    def as_dict(self) -> dict:
        return {
            "mode": self.mode.value,
            "inactivity_enabled": self.inactivity_enabled,
            "inactivity_hours": self.inactivity_hours,
            "reminder_enabled": self.reminder_enabled,
            "reminder_days": self.reminder_days,
            "features": self.features,
        }
