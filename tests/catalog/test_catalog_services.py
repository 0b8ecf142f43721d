from datetime import datetime

import pytest

from trackly.catalog.model import CatalogEntry
from trackly.core.enums import Collection
from trackly.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from trackly.projects.service import ProjectService
from trackly.realtime.feed import SnapshotFeed, SubscriptionScope
from trackly.task_types.service import TaskTypeService
from trackly.tasks.service import TaskService

from tests.fakes import ADMIN, ALICE, FixedClock, InMemoryCatalog

NOW = datetime(2025, 3, 10, 9, 0)


def test_create_project_rejects_duplicates_ignoring_case():
    repo = InMemoryCatalog()
    service = ProjectService(repo, clock=FixedClock(NOW))

    project_id = service.create(ADMIN, name="  Apollo ")

    assert repo.get_by_id(project_id) == CatalogEntry(entry_id=project_id, name="Apollo", created_at=NOW)
    with pytest.raises(ValidationError):
        service.create(ADMIN, name="apollo")
    with pytest.raises(ValidationError):
        service.create(ADMIN, name="   ")
    with pytest.raises(AuthorizationError):
        service.create(ALICE, name="Gemini")


def test_deleting_a_task_keeps_it_but_hides_it_from_active_list():
    repo = InMemoryCatalog([CatalogEntry(entry_id=1, name="Backend"), CatalogEntry(entry_id=2, name="Frontend")])
    service = TaskService(repo, clock=FixedClock(NOW))

    service.deactivate(ADMIN, 1)

    assert [t.name for t in service.list_all()] == ["Backend", "Frontend"]
    assert [t.name for t in service.list_active()] == ["Frontend"]
    assert repo.get_by_id(1).updated_at == NOW
    with pytest.raises(NotFoundError):
        service.deactivate(ADMIN, 9)


def test_update_task_type_renames_and_reactivates():
    repo = InMemoryCatalog(
        [CatalogEntry(entry_id=1, name="Meeting", active=False), CatalogEntry(entry_id=2, name="Support")]
    )
    service = TaskTypeService(repo, clock=FixedClock(NOW))

    service.update(ADMIN, 1, name="Meetings", active=True)

    assert repo.get_by_id(1).name == "Meetings"
    assert repo.get_by_id(1).active is True
    with pytest.raises(ValidationError):
        service.update(ADMIN, 1, name="support")
    with pytest.raises(ValidationError):
        service.update(ADMIN, 1)
    with pytest.raises(AuthorizationError):
        service.update(ALICE, 1, name="Calls")


def test_require_active_refuses_unknown_and_inactive_entries():
    repo = InMemoryCatalog([CatalogEntry(entry_id=1, name="Apollo"), CatalogEntry(entry_id=2, name="Old", active=False)])
    service = ProjectService(repo)

    assert service.require_active("1").name == "Apollo"
    assert service.require_active_name("apollo").entry_id == 1
    for bad in (2, 3, "abc"):
        with pytest.raises(ValidationError):
            service.require_active(bad)
    with pytest.raises(ValidationError):
        service.require_active_name("Old")


def test_subscribers_see_catalog_changes():
    feed = SnapshotFeed()
    service = TaskService(InMemoryCatalog(), feed=feed)
    seen = []

    with SubscriptionScope(feed) as scope:
        service.subscribe(scope, lambda entries: seen.append([e.name for e in entries]), active_only=True)
        service.create(ADMIN, name="Backend")

    assert seen == [[], ["Backend"]]
    assert feed.listener_count(Collection.TASKS) == 0
