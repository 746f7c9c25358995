"""Terminal rendering of a board snapshot using rich."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .models import Board

COLUMN_STYLES: dict[str, str] = {
    "todo": "cyan",
    "in-progress": "yellow",
    "done": "green",
}


def build_table(board: Board, show_ids: bool = True) -> Table:
    """
    Lay the board out as a table with one table column per board column.

    Args:
        board: Snapshot to draw
        show_ids: Prefix each card with a short form of its task id

    Returns:
        A rich ``Table`` ready to print
    """
    table = Table(title="Offline Kanban", expand=True, show_lines=False)
    for column in board.columns:
        style = COLUMN_STYLES.get(column.id, "magenta")
        table.add_column(
            f"{column.title} ({len(column.tasks)})",
            header_style=f"bold {style}",
            style=style,
            overflow="fold",
        )

    rows = max((len(column.tasks) for column in board.columns), default=0)
    if rows == 0:
        table.add_row(*(Text("(empty)", style="dim") for _ in board.columns))
        return table

    for row in range(rows):
        cells: list[Text] = []
        for column in board.columns:
            if row >= len(column.tasks):
                cells.append(Text(""))
                continue
            task = column.tasks[row]
            cell = Text()
            if show_ids:
                cell.append(f"{task.id[:8]} ", style="dim")
            cell.append(task.content)
            cells.append(cell)
        table.add_row(*cells)
    return table


def print_board(board: Board, console: Console | None = None, show_ids: bool = True) -> None:
    (console or Console()).print(build_table(board, show_ids=show_ids))
