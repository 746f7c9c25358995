"""Tests for terminal rendering of the board."""

from rich.console import Console

from offline_kanban.board import Board, Column, Task
from offline_kanban.board.render import build_table, print_board


def _render(board: Board, **kwargs) -> str:
    console = Console(record=True, width=120, color_system=None)
    print_board(board, console=console, **kwargs)
    return console.export_text()


def test_empty_board_shows_placeholders():
    """Test rendering an empty board."""
    table = build_table(Board.default())
    assert [str(column.header) for column in table.columns] == [
        "To Do (0)",
        "In Progress (0)",
        "Done (0)",
    ]
    assert table.row_count == 1
    assert "(empty)" in _render(Board.default())


def test_tasks_are_listed_in_order():
    """Test that cards are drawn in column order."""
    board = Board(
        columns=(
            Column("todo", "To Do", (Task("abcdef123456", "First", "todo"), Task("b", "Second", "todo"))),
            Column("done", "Done", (Task("c", "Third", "done"),)),
        )
    )
    table = build_table(board)
    assert table.row_count == 2

    text = _render(board)
    assert "abcdef12 First" in text
    assert text.index("First") < text.index("Second")
    assert "Done (1)" in text

    assert "abcdef12" not in _render(board, show_ids=False)
