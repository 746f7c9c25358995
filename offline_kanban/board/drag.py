"""Drag gesture tracking: turns drag-input events into a single board move."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from .models import Board, Task
from .store import BoardStore


@dataclass(frozen=True)
class _ActiveDrag:
    dragged_task_id: str
    origin_column_id: str


class DragSession:
    """
    Two-state machine (idle / active) for one drag gesture at a time.

    ``drag_start`` picks a task up, ``drag_end`` decides where it lands and
    issues at most one ``BoardStore.move_task`` call, ``drag_cancel`` drops it.
    Events arriving while idle are ignored, so a commit can only follow a
    start.
    """

    def __init__(self, store: BoardStore) -> None:
        self.store = store
        self._active: _ActiveDrag | None = None

    @property
    def is_active(self) -> bool:
        return self._active is not None

    @property
    def dragged_task_id(self) -> str | None:
        return self._active.dragged_task_id if self._active else None

    @property
    def origin_column_id(self) -> str | None:
        return self._active.origin_column_id if self._active else None

    @property
    def active_task(self) -> Task | None:
        """Task being dragged, for drawing the floating preview."""
        if self._active is None:
            return None
        return self.store.board.task(self._active.dragged_task_id)

    def drag_start(self, item_id: str) -> bool:
        """
        Pick up a task.

        Args:
            item_id: Id of the dragged task

        Returns:
            True if a session is now active
        """
        if self._active is not None:
            logger.debug(f"Drag of '{self._active.dragged_task_id}' superseded by '{item_id}'")
            self._active = None
        found = self.store.board.find_task(item_id)
        if found is None:
            logger.debug(f"drag_start ignored: unknown task '{item_id}'")
            return False
        column, _ = found
        self._active = _ActiveDrag(dragged_task_id=item_id, origin_column_id=column.id)
        logger.debug(f"Drag started: '{item_id}' from '{column.id}'")
        return True

    def drag_over(self, item_id: str, target_container_id: str | None) -> None:
        """Hover updates never change where the task lands."""
        if self._active is not None:
            logger.trace(f"Drag of '{item_id}' over {target_container_id!r}")

    def drag_end(
        self,
        item_id: str,
        target_container_id: str | None,
        target_sibling_id: str | None = None,
    ) -> Board:
        """
        Drop the dragged task and commit the move.

        Args:
            item_id: Id of the dropped task
            target_container_id: Column under the pointer, None when dropped
                outside every column
            target_sibling_id: Task under the pointer, used to pick the
                position for reorders inside the origin column

        Returns:
            The board after the drop
        """
        active, self._active = self._active, None
        if active is None:
            logger.debug(f"drag_end ignored: no drag in progress for '{item_id}'")
            return self.store.board
        if item_id != active.dragged_task_id:
            logger.debug(
                f"drag_end for '{item_id}' does not match '{active.dragged_task_id}'; dropped"
            )
            return self.store.board
        if target_container_id is None:
            logger.debug(f"Drag of '{item_id}' released outside any column")
            return self.store.board

        board = self.store.board
        if target_container_id == active.origin_column_id:
            dest_index = self._sibling_index(board, target_container_id, target_sibling_id)
        else:
            dest = board.column(target_container_id)
            dest_index = len(dest.tasks) if dest is not None else 0
        return self.store.move_task(item_id, target_container_id, dest_index)

    def drag_cancel(self) -> None:
        if self._active is not None:
            logger.debug(f"Drag of '{self._active.dragged_task_id}' cancelled")
        self._active = None

    @staticmethod
    def _sibling_index(board: Board, column_id: str, sibling_id: str | None) -> int:
        column = board.column(column_id)
        if column is None:
            return 0
        if sibling_id is not None:
            index = column.index_of(sibling_id)
            if index is not None:
                return index
        return len(column.tasks) - 1
