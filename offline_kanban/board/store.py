"""Board ownership and the transitions that change it."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import replace
from typing import Final

from loguru import logger

from .models import Board, SnapshotError, Task
from .persistence import KeyValueStore, MemoryStore, PersistenceError

STORAGE_KEY: Final[str] = "kanban-board"

BoardCallback = Callable[[Board], None]


def _new_task_id() -> str:
    return str(uuid.uuid4())


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


class BoardStore:
    """
    Owner of the current board snapshot.

    Every command takes ids, never objects, and treats an unknown id or blank
    content as nothing to do: the current board is returned unchanged (the
    very same object). A command that does change the board stores the new
    snapshot, saves it under ``key`` and hands it to every subscriber.
    """

    def __init__(
        self,
        storage: KeyValueStore | None = None,
        key: str = STORAGE_KEY,
        id_factory: Callable[[], str] = _new_task_id,
    ) -> None:
        """
        Initialize the store and load the persisted board.

        Args:
            storage: Key-value backend; an in-memory store when omitted
            key: Key the snapshot is saved under
            id_factory: Produces ids for new tasks
        """
        self.storage: KeyValueStore = storage if storage is not None else MemoryStore()
        self.key = key
        self._id_factory = id_factory
        self._subscribers: list[BoardCallback] = []
        self._board = self._load()

    @property
    def board(self) -> Board:
        """Current snapshot."""
        return self._board

    # -------------------- loading --------------------
    def _load(self) -> Board:
        try:
            value = self.storage.load(self.key)
        except PersistenceError as exc:
            logger.warning(f"Could not read board '{self.key}': {exc}. Using defaults.")
            return Board.default()
        if value is None:
            logger.info(f"No saved board under '{self.key}', starting fresh")
            return Board.default()
        try:
            board = Board.from_json(value)
        except SnapshotError as exc:
            logger.warning(f"Saved board '{self.key}' is unreadable: {exc}. Using defaults.")
            return Board.default()
        logger.debug(
            f"Loaded board '{self.key}': {len(board.columns)} columns, "
            f"{board.task_count} tasks"
        )
        return board

    def reload(self) -> Board:
        """Replace the in-memory board with whatever is persisted."""
        board = self._load()
        if board != self._board:
            self._board = board
            self._notify_subscribers()
        return self._board

    def reset(self) -> Board:
        """Replace the board with the default empty columns."""
        return self._commit(Board.default(), "reset")

    # -------------------- commands --------------------
    def add_task(self, column_id: str, content: str) -> Board:
        """
        Append a new task to the end of a column.

        Args:
            column_id: Column receiving the task
            content: Task text; surrounding whitespace is stripped

        Returns:
            The new board, or the current one if the column is unknown or the
            content is blank
        """
        board = self._board
        column = board.column(column_id)
        text = content.strip() if isinstance(content, str) else ""
        if column is None:
            logger.debug(f"add_task ignored: unknown column '{column_id}'")
            return board
        if not text:
            logger.debug(f"add_task ignored: empty content for '{column_id}'")
            return board

        task_id = self._id_factory()
        while board.task(task_id) is not None:
            task_id = self._id_factory()
        task = Task(id=task_id, content=text, column_id=column.id)
        return self._commit(
            board.with_column(replace(column, tasks=column.tasks + (task,))),
            f"add {task_id} to {column.id}",
        )

    def delete_task(self, task_id: str) -> Board:
        """Remove a task from whichever column holds it."""
        board = self._board
        found = board.find_task(task_id)
        if found is None:
            logger.debug(f"delete_task ignored: unknown task '{task_id}'")
            return board
        column, index = found
        tasks = column.tasks[:index] + column.tasks[index + 1 :]
        return self._commit(
            board.with_column(replace(column, tasks=tasks)),
            f"delete {task_id} from {column.id}",
        )

    def move_task(self, task_id: str, dest_column_id: str, dest_index: int) -> Board:
        """
        Move a task to a position in a column.

        Within its own column the task is taken out and put back so that it
        ends up at ``dest_index`` (clamped to the column's positions). Into
        another column it is inserted before ``dest_index`` (clamped to
        ``[0, len(destination)]``) and takes that column's id.

        Args:
            task_id: Task to move
            dest_column_id: Column to move it into
            dest_index: Target position in the destination column

        Returns:
            The new board, or the current one if either id is unknown or the
            task is already at that position
        """
        board = self._board
        found = board.find_task(task_id)
        if found is None:
            logger.debug(f"move_task ignored: unknown task '{task_id}'")
            return board
        dest = board.column(dest_column_id)
        if dest is None:
            logger.debug(f"move_task ignored: unknown column '{dest_column_id}'")
            return board

        origin, index = found
        task = origin.tasks[index]
        tasks = list(origin.tasks)
        del tasks[index]

        if origin.id == dest.id:
            position = _clamp(dest_index, 0, len(tasks))
            if position == index:
                logger.debug(f"move_task ignored: '{task_id}' already at {index}")
                return board
            tasks.insert(position, task)
            new_board = board.with_column(replace(origin, tasks=tuple(tasks)))
        else:
            dest_tasks = list(dest.tasks)
            position = _clamp(dest_index, 0, len(dest_tasks))
            dest_tasks.insert(position, replace(task, column_id=dest.id))
            new_board = board.with_column(
                replace(origin, tasks=tuple(tasks))
            ).with_column(replace(dest, tasks=tuple(dest_tasks)))

        return self._commit(new_board, f"move {task_id} to {dest.id}[{position}]")

    def reorder_task(self, task_id: str, dest_index: int) -> Board:
        """Move a task to another position inside its current column."""
        found = self._board.find_task(task_id)
        if found is None:
            logger.debug(f"reorder_task ignored: unknown task '{task_id}'")
            return self._board
        column, _ = found
        return self.move_task(task_id, column.id, dest_index)

    # -------------------- persistence / notification --------------------
    def _commit(self, board: Board, action: str) -> Board:
        self._board = board
        logger.debug(f"Board updated: {action}")
        self._persist(board)
        self._notify_subscribers()
        return board

    def _persist(self, board: Board) -> None:
        try:
            self.storage.save(self.key, board.to_json())
        except PersistenceError as exc:
            logger.warning(f"Failed to save board '{self.key}': {exc}")

    def subscribe(self, callback: BoardCallback) -> None:
        """
        Subscribe to board updates.

        Args:
            callback: Called with the new board after every change
        """
        self._subscribers.append(callback)

    def unsubscribe(self, callback: BoardCallback) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def _notify_subscribers(self) -> None:
        board = self._board
        for callback in self._subscribers.copy():
            try:
                callback(board)
            except Exception:
                logger.exception(f"Board subscriber {callback!r} failed")
