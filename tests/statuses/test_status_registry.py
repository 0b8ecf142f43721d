import pytest

from trackly.core.exceptions import AuthorizationError, ValidationError
from trackly.statuses.model import Status
from trackly.statuses.service import StatusRegistry

from tests.fakes import ADMIN, ALICE, InMemoryStatuses


def default_statuses():
    return [
        Status(status_id=1, key="todo", label="To do", order=0),
        Status(status_id=2, key="doing", label="In progress", order=1),
        Status(status_id=3, key="done", label="Done", order=2),
    ]


def test_reorder_persists_dense_orders():
    repo = InMemoryStatuses(default_statuses())
    registry = StatusRegistry(repo)

    result = registry.reorder(ADMIN, [2, 1, 3])

    assert [(s.key, s.order) for s in result] == [("doing", 0), ("todo", 1), ("done", 2)]
    # Only rows whose order changed are written, in a single batch.
    assert repo.batches == [[(2, 0), (1, 1)]]


def test_reorder_failure_leaves_previous_order():
    repo = InMemoryStatuses(default_statuses(), fail_on_ids={1})
    registry = StatusRegistry(repo)

    with pytest.raises(RuntimeError):
        registry.reorder(ADMIN, [2, 1, 3])

    assert [(s.key, s.order) for s in registry.list_all()] == [("todo", 0), ("doing", 1), ("done", 2)]


@pytest.mark.parametrize("ids", [[1, 2], [1, 2, 2], [1, 2, 3, 4]])
def test_reorder_requires_a_permutation(ids):
    registry = StatusRegistry(InMemoryStatuses(default_statuses()))

    with pytest.raises(ValidationError):
        registry.reorder(ADMIN, ids)


def test_create_rejects_case_insensitive_duplicate_key():
    repo = InMemoryStatuses([Status(status_id=1, key="DONE", label="Done", order=0)])
    registry = StatusRegistry(repo)

    with pytest.raises(ValidationError):
        registry.create(ADMIN, key="done", label="Finished")
    assert len(repo.statuses) == 1


def test_create_normalizes_key_and_appends_at_the_end():
    repo = InMemoryStatuses(default_statuses())
    registry = StatusRegistry(repo)

    status_id = registry.create(ADMIN, key="  Review ", label="In review")

    created = repo.get_by_id(status_id)
    assert created.key == "review"
    assert created.order == 3
    assert created.active is True


def test_first_status_gets_order_zero():
    repo = InMemoryStatuses()

    status_id = StatusRegistry(repo).create(ADMIN, key="todo", label="To do")

    assert repo.get_by_id(status_id).order == 0


@pytest.mark.parametrize("key,label", [("", "Label"), ("key", "  ")])
def test_create_requires_key_and_label(key, label):
    with pytest.raises(ValidationError):
        StatusRegistry(InMemoryStatuses()).create(ADMIN, key=key, label=label)


def test_toggle_keeps_order_and_hides_from_active_list():
    repo = InMemoryStatuses(default_statuses())
    registry = StatusRegistry(repo)

    assert registry.toggle_active(ADMIN, 2) is False

    assert repo.get_by_id(2).order == 1
    assert [s.key for s in registry.list_active()] == ["todo", "done"]
    assert registry.active_keys() == {"todo", "done"}


def test_update_label_keeps_key():
    repo = InMemoryStatuses(default_statuses())

    StatusRegistry(repo).update_label(ADMIN, 3, label="Shipped")

    assert repo.get_by_id(3).key == "done"
    assert repo.get_by_id(3).label == "Shipped"


def test_mutations_require_admin():
    registry = StatusRegistry(InMemoryStatuses(default_statuses()))

    with pytest.raises(AuthorizationError):
        registry.create(ALICE, key="x", label="X")
    with pytest.raises(AuthorizationError):
        registry.reorder(ALICE, [3, 2, 1])
    with pytest.raises(AuthorizationError):
        registry.toggle_active(ALICE, 1)
