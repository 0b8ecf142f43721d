from datetime import datetime

import pytest

from trackly.admin_settings.model import AdminSettings, infer_mode, resolve_features
from trackly.admin_settings.service import AdminSettingsService
from trackly.core.enums import TracklyMode
from trackly.core.exceptions import AuthorizationError, ValidationError

from tests.fakes import ADMIN, ALICE, FixedClock, InMemorySettings


def test_resolve_features_per_mode():
    assert resolve_features("hours") == {
        "manage_hours": True,
        "projects": False,
        "tasks": False,
        "work_items": False,
        "kanban": False,
        "reports": False,
    }
    projects = resolve_features(TracklyMode.PROJECTS)
    assert projects["kanban"] is True
    assert projects["manage_hours"] is False
    assert all(resolve_features("full").values())
    assert resolve_features("unknown") == resolve_features("full")


@pytest.mark.parametrize(
    "flags,mode",
    [
        ({"manage_hours": True}, TracklyMode.HOURS),
        ({"manage_hours": False, "tasks": True}, TracklyMode.PROJECTS),
        ({"manage_hours": True, "work_items": True}, TracklyMode.FULL),
        ({}, TracklyMode.FULL),
        (None, TracklyMode.FULL),
    ],
)
def test_infer_mode_from_legacy_flags(flags, mode):
    assert infer_mode(flags) == mode


def test_get_returns_defaults_when_missing():
    settings = AdminSettingsService(InMemorySettings()).get()

    assert settings == AdminSettings()
    assert settings.mode == TracklyMode.FULL
    assert settings.inactivity_hours == 24


def test_save_is_partial_and_admin_only():
    repo = InMemorySettings(AdminSettings(reminder_days=5))
    service = AdminSettingsService(repo, clock=FixedClock(datetime(2025, 3, 1)))

    with pytest.raises(AuthorizationError):
        service.save(ALICE, mode="hours")

    saved = service.save(ADMIN, mode="hours", inactivity_enabled=True, inactivity_hours="12")

    assert saved.mode == TracklyMode.HOURS
    assert saved.inactivity_enabled is True
    assert saved.inactivity_hours == 12
    assert saved.reminder_days == 5
    assert saved.updated_at == datetime(2025, 3, 1)
    assert repo.settings == saved
    assert saved.as_dict()["features"]["kanban"] is False


@pytest.mark.parametrize("kwargs", [{"mode": "everything"}, {"inactivity_hours": 0}, {"reminder_days": "soon"}])
def test_save_rejects_invalid_values(kwargs):
    repo = InMemorySettings()

    with pytest.raises(ValidationError):
        AdminSettingsService(repo).save(ADMIN, **kwargs)
    assert repo.saves == 0
