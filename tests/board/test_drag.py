"""Tests for drag sessions turning drag events into board moves."""

import itertools

import pytest

from offline_kanban.board import BoardStore, DragSession, MemoryStore


class SpyStore(BoardStore):
    def __init__(self):
        counter = itertools.count(1)
        super().__init__(MemoryStore(), id_factory=lambda: f"t{next(counter)}")
        self.moves: list[tuple[str, str, int]] = []

    def move_task(self, task_id, dest_column_id, dest_index):
        self.moves.append((task_id, dest_column_id, dest_index))
        return super().move_task(task_id, dest_column_id, dest_index)


@pytest.fixture
def store() -> SpyStore:
    store = SpyStore()
    for content in ("A", "B", "C"):
        store.add_task("todo", content)
    store.add_task("done", "D")
    return store


def _ids(board, column_id):
    return [task.id for task in board.column(column_id).tasks]


def test_start_then_cancel_issues_no_move(store):
    """Test that a cancelled drag never moves anything."""
    session = DragSession(store)
    before = store.board

    assert session.drag_start("t1")
    assert session.is_active
    assert session.origin_column_id == "todo"
    assert session.active_task.content == "A"

    session.drag_cancel()

    assert not session.is_active
    assert session.active_task is None
    assert store.moves == []
    assert store.board is before


def test_start_with_unknown_task_stays_idle(store):
    """Test that picking up an unknown task keeps the session idle."""
    session = DragSession(store)
    assert not session.drag_start("ghost")
    assert not session.is_active
    assert session.drag_end("ghost", "done") is store.board
    assert store.moves == []


def test_end_without_start_is_ignored(store):
    """Test that a drop without a pickup is ignored."""
    session = DragSession(store)
    before = store.board
    assert session.drag_end("t1", "done") is before
    assert store.moves == []


def test_drop_outside_any_column_cancels(store):
    """Test that releasing outside every column cancels the drag."""
    session = DragSession(store)
    session.drag_start("t2")
    assert session.drag_end("t2", None) is store.board
    assert store.moves == []
    assert not session.is_active


def test_reorder_uses_sibling_index(store):
    """Test that a drop on a sibling takes the sibling's position."""
    session = DragSession(store)
    session.drag_start("t3")
    session.drag_over("t3", "todo")
    board = session.drag_end("t3", "todo", "t1")

    assert store.moves == [("t3", "todo", 0)]
    assert _ids(board, "todo") == ["t3", "t1", "t2"]
    assert not session.is_active


def test_reorder_without_sibling_goes_to_end(store):
    """Test that a drop on the column itself moves the task last."""
    session = DragSession(store)
    session.drag_start("t1")
    board = session.drag_end("t1", "todo", None)

    assert store.moves == [("t1", "todo", 2)]
    assert _ids(board, "todo") == ["t2", "t3", "t1"]


def test_drop_on_itself_changes_nothing(store):
    """Test that dropping a task onto itself is a no-op."""
    session = DragSession(store)
    before = store.board
    session.drag_start("t2")
    assert session.drag_end("t2", "todo", "t2") is before
    assert store.moves == [("t2", "todo", 1)]


def test_cross_column_drop_appends(store):
    """Test that a drop in another column appends the task."""
    session = DragSession(store)
    session.drag_start("t1")
    board = session.drag_end("t1", "done", "t4")

    assert store.moves == [("t1", "done", 1)]
    assert _ids(board, "done") == ["t4", "t1"]
    assert _ids(board, "todo") == ["t2", "t3"]
    assert board.task("t1").column_id == "done"


def test_drop_on_empty_column(store):
    """Test dropping a task into an empty column."""
    session = DragSession(store)
    session.drag_start("t4")
    board = session.drag_end("t4", "in-progress")

    assert _ids(board, "in-progress") == ["t4"]
    assert board.column("done").tasks == ()


def test_drop_on_unknown_column_is_noop(store):
    """Test that a drop on an unknown column changes nothing."""
    session = DragSession(store)
    before = store.board
    session.drag_start("t1")
    assert session.drag_end("t1", "archive") is before


def test_mismatched_end_discards_session(store):
    """Test that a drop for another task discards the session."""
    session = DragSession(store)
    session.drag_start("t1")
    session.drag_end("t2", "done")
    assert store.moves == []
    assert not session.is_active


def test_commit_happens_once_per_gesture(store):
    """Test that a second drop after the first is ignored."""
    session = DragSession(store)
    session.drag_start("t1")
    session.drag_end("t1", "done")
    session.drag_end("t1", "in-progress")
    assert store.moves == [("t1", "done", 1)]


def test_new_start_replaces_active_session(store):
    """Test that a new pickup replaces the active one."""
    session = DragSession(store)
    session.drag_start("t1")
    session.drag_start("t4")
    assert session.dragged_task_id == "t4"
    assert session.origin_column_id == "done"


def test_task_deleted_mid_drag_is_noop(store):
    """Test that a task deleted during the drag is not resurrected."""
    session = DragSession(store)
    session.drag_start("t1")
    store.delete_task("t1")
    assert session.active_task is None
    before = store.board
    assert session.drag_end("t1", "done") is before
