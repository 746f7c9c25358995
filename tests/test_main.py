"""Tests for the command-line entry point."""

from pathlib import Path

import pytest

import main
from offline_kanban.board import Board, BoardStore, Column, JsonFileStore, Task


@pytest.fixture(autouse=True)
def quiet_board(monkeypatch):
    printed: list[Board] = []
    monkeypatch.setattr(main, "print_board", printed.append)
    return printed


def _board(tmp_path: Path) -> Board:
    return BoardStore(JsonFileStore(tmp_path)).board


def _run(tmp_path: Path, *args: str) -> int:
    return main.main(["--data-dir", str(tmp_path), "--log-level", "WARNING", *args])


def test_add_move_delete_commands(tmp_path: Path, quiet_board) -> None:
    """Test the add, move and delete commands against a saved board."""
    assert _run(tmp_path, "add", "todo", "Write", "docs") == 0
    task = _board(tmp_path).column("todo").tasks[0]
    assert task.content == "Write docs"

    assert _run(tmp_path, "move", task.id[:6], "done") == 0
    assert _board(tmp_path).task(task.id).column_id == "done"

    assert _run(tmp_path, "delete", task.id) == 0
    assert _board(tmp_path).task_count == 0
    assert len(quiet_board) == 3


def test_show_is_default_command(tmp_path: Path, quiet_board) -> None:
    """Test that running without a command prints the board."""
    assert _run(tmp_path) == 0
    assert quiet_board == [Board.default()]


def test_unknown_task_prefix_fails(tmp_path: Path) -> None:
    """Test that an unknown task id exits with an error."""
    assert _run(tmp_path, "delete", "nope") == 1


def test_resolve_task_id() -> None:
    """Test expanding task id prefixes."""
    board = Board(
        columns=(
            Column("todo", "To Do", (Task("abc1", "A", "todo"), Task("abc2", "B", "todo"))),
        )
    )
    assert main.resolve_task_id(board, "abc1") == "abc1"
    assert main.resolve_task_id(board, "abc") is None
    assert main.resolve_task_id(board, "x") is None


def test_reset_command(tmp_path: Path) -> None:
    """Test resetting the saved board."""
    _run(tmp_path, "add", "done", "Old")
    assert _run(tmp_path, "reset") == 0
    assert _board(tmp_path) == Board.default()


def test_move_defaults_to_end_of_column(tmp_path: Path) -> None:
    """Test that move without an index goes to the end."""
    for content in ("A", "B", "C"):
        _run(tmp_path, "add", "todo", content)
    first = _board(tmp_path).column("todo").tasks[0]

    _run(tmp_path, "move", first.id, "todo")
    assert [t.content for t in _board(tmp_path).column("todo").tasks] == ["B", "C", "A"]
