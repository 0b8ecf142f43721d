import logging
from dataclasses import replace
from datetime import datetime

from trackly.core.enums import Collection
from trackly.realtime.feed import SnapshotFeed, SubscriptionScope
from trackly.statuses.model import Status
from trackly.statuses.service import StatusRegistry
from trackly.work_items.kanban import MOVE_FAILED_MESSAGE, KanbanBoard
from trackly.work_items.model import WorkItem
from trackly.work_items.service import WorkItemService

from tests.fakes import ADMIN, ALICE, FixedClock, InMemoryStatuses, InMemoryWorkItems

NOW = datetime(2025, 3, 10, 11, 0)


def build(*, fail_updates=False):
    feed = SnapshotFeed()
    statuses = StatusRegistry(
        InMemoryStatuses(
            [
                Status(status_id=1, key="todo", label="To do", order=0),
                Status(status_id=2, key="doing", label="Doing", order=1),
                Status(status_id=3, key="done", label="Done", order=2),
                Status(status_id=4, key="blocked", label="Blocked", order=3, active=False),
            ]
        ),
        feed=feed,
    )
    repo = InMemoryWorkItems(
        [
            WorkItem(work_item_id=1, title="Login page", status="todo"),
            WorkItem(work_item_id=2, title="API", status="doing"),
        ],
        fail_updates=fail_updates,
    )
    service = WorkItemService(repo, statuses, feed=feed, clock=FixedClock(NOW))
    board = KanbanBoard(service, statuses, ALICE)
    scope = SubscriptionScope(feed)
    board.bind(scope)
    return board, repo, service, scope, feed, statuses


def status_of(board, item_id):
    return next(i.status for i in board.local_items if i.work_item_id == item_id)


def test_bind_loads_items_and_active_columns():
    board, _, _, _, _, _ = build()

    assert [s.key for s in board.columns_order] == ["todo", "doing", "done"]
    assert {k: [i.work_item_id for i in v] for k, v in board.columns().items()} == {
        "todo": [1],
        "doing": [2],
        "done": [],
    }


def test_snapshot_is_ignored_while_dragging_and_applied_after():
    board, _, _, _, _, _ = build()
    before = list(board.local_items)
    remote = [WorkItem(work_item_id=9, title="Remote", status="done")]

    board.drag_start(1)
    board.apply_snapshot(remote)
    assert board.local_items == before

    board.drag_cancel()
    board.apply_snapshot(remote)
    assert board.local_items == remote


def test_drop_moves_card_optimistically_and_persists():
    board, repo, _, _, _, _ = build()

    board.drag_start(1)
    moved = board.drag_end("done")

    assert moved is True
    assert board.is_dragging is False
    assert status_of(board, 1) == "done"
    assert repo.get_by_id(1).status == "done"
    assert repo.get_by_id(1).updated_by == ALICE.user_id
    assert repo.get_by_id(1).updated_at == NOW


def test_drop_on_same_column_or_nowhere_is_a_noop():
    board, repo, _, _, _, _ = build()

    board.drag_start(1)
    assert board.drag_end("todo") is False
    board.drag_start(1)
    assert board.drag_end(None) is False

    assert board.is_dragging is False
    assert repo.get_by_id(1).updated_at is None


def test_drop_on_inactive_column_is_rejected():
    board, repo, _, _, _, _ = build()

    board.drag_start(1)
    assert board.drag_end("blocked") is False

    assert status_of(board, 1) == "todo"
    assert repo.get_by_id(1).status == "todo"


def test_failed_move_keeps_local_change_and_reports_error(caplog):
    board, repo, _, _, _, _ = build(fail_updates=True)

    board.drag_start(2)
    with caplog.at_level(logging.ERROR):
        moved = board.drag_end("done")

    assert moved is True
    assert board.is_dragging is False
    assert status_of(board, 2) == "done"
    assert repo.get_by_id(2).status == "doing"
    assert board.last_error == MOVE_FAILED_MESSAGE
    assert "Moving work item 2" in caplog.text


def test_remote_write_resyncs_board_after_drag():
    board, repo, service, _, _, _ = build()
    repo.items[1] = replace(repo.items[1], title="Login page v2")

    service.move(ALICE, 2, "done")

    assert status_of(board, 2) == "done"
    assert next(i.title for i in board.local_items if i.work_item_id == 1) == "Login page v2"


def test_deactivating_a_status_hides_its_column():
    board, _, _, _, _, statuses = build()

    statuses.toggle_active(ADMIN, 2)

    assert [s.key for s in board.columns_order] == ["todo", "done"]
    assert "doing" not in board.columns()


def test_disposing_scope_stops_updates():
    board, _, service, scope, feed, _ = build()

    scope.dispose()
    service.move(ALICE, 1, "done")

    assert status_of(board, 1) == "todo"
    assert feed.listener_count(Collection.WORK_ITEMS) == 0
