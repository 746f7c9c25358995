"""Command-line entry point: serve the board or edit it from the shell."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger

from offline_kanban.board import Board, BoardStore, JsonFileStore, STORAGE_KEY
from offline_kanban.board.persistence import DEFAULT_DATA_DIR
from offline_kanban.board.render import print_board
from offline_kanban.board.server import DEFAULT_HOST, DEFAULT_PORT, BoardServer
from offline_kanban.utils.logging import setup_logger


def resolve_task_id(board: Board, prefix: str) -> str | None:
    """Expand a (possibly shortened) task id to the full id, if unambiguous."""
    if board.task(prefix) is not None:
        return prefix
    matches = [task.id for task in board.all_tasks() if task.id.startswith(prefix)]
    if len(matches) == 1:
        return matches[0]
    if matches:
        logger.error(f"Task id prefix '{prefix}' is ambiguous: {', '.join(matches)}")
    else:
        logger.error(f"No task matches '{prefix}'")
    return None


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Offline Kanban board")
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=DEFAULT_DATA_DIR,
        help="Directory holding the saved board",
    )
    parser.add_argument(
        "--key",
        default=STORAGE_KEY,
        help="Storage key of the board snapshot",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ...)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file",
    )

    commands = parser.add_subparsers(dest="command")

    serve = commands.add_parser("serve", help="Run the HTTP/WebSocket board server")
    serve.add_argument("--host", default=DEFAULT_HOST)
    serve.add_argument("--port", type=int, default=DEFAULT_PORT)

    commands.add_parser("show", help="Print the board")

    add = commands.add_parser("add", help="Add a task to a column")
    add.add_argument("column", help="Column id (todo, in-progress, done)")
    add.add_argument("content", nargs="+", help="Task text")

    delete = commands.add_parser("delete", help="Delete a task")
    delete.add_argument("task_id", help="Task id or unique prefix")

    move = commands.add_parser("move", help="Move a task to a column position")
    move.add_argument("task_id", help="Task id or unique prefix")
    move.add_argument("column", help="Destination column id")
    move.add_argument(
        "--index",
        type=int,
        default=None,
        help="Position in the destination column (default: end)",
    )

    commands.add_parser("reset", help="Replace the board with empty default columns")

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logger(level=args.log_level, log_file=args.log_file)

    store = BoardStore(JsonFileStore(args.data_dir), key=args.key)
    command = args.command or "show"

    if command == "serve":
        server = BoardServer(store, host=args.host, port=args.port)
        try:
            server.run()
        except KeyboardInterrupt:
            logger.info("Shutting down...")
        finally:
            server.stop()
        return 0

    before = store.board
    if command == "add":
        store.add_task(args.column, " ".join(args.content))
    elif command == "delete":
        task_id = resolve_task_id(store.board, args.task_id)
        if task_id is None:
            return 1
        store.delete_task(task_id)
    elif command == "move":
        task_id = resolve_task_id(store.board, args.task_id)
        if task_id is None:
            return 1
        dest = store.board.column(args.column)
        index = args.index
        if index is None:
            index = len(dest.tasks) if dest is not None else 0
        store.move_task(task_id, args.column, index)
    elif command == "reset":
        store.reset()

    if command != "show" and store.board is before:
        logger.warning("Nothing changed")
    print_board(store.board)
    return 0


if __name__ == "__main__":
    sys.exit(main())
