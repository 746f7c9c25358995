"""Immutable board snapshots: tasks, columns and the board itself."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from typing import Any, Final

from loguru import logger

DEFAULT_COLUMNS: Final[tuple[tuple[str, str], ...]] = (
    ("todo", "To Do"),
    ("in-progress", "In Progress"),
    ("done", "Done"),
)


class SnapshotError(ValueError):
    """Raised when a persisted snapshot cannot be turned into a board."""


@dataclass(frozen=True)
class Task:
    """A single unit of work owned by exactly one column."""

    id: str
    content: str
    column_id: str

    def to_dict(self) -> dict[str, Any]:
        """Convert task to dictionary for serialization."""
        return {"id": self.id, "content": self.content, "columnId": self.column_id}


@dataclass(frozen=True)
class Column:
    """A named, ordered list of tasks."""

    id: str
    title: str
    tasks: tuple[Task, ...] = ()

    def index_of(self, task_id: str) -> int | None:
        for index, task in enumerate(self.tasks):
            if task.id == task_id:
                return index
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "tasks": [task.to_dict() for task in self.tasks],
        }


@dataclass(frozen=True)
class Board:
    """
    The complete ordered set of columns and their tasks.

    Boards are never patched in place; transitions build a new value with
    ``with_column`` or ``replace``. Task membership is only ever changed by
    ``BoardStore``, which keeps ``Task.column_id`` aligned with the column
    that holds the task.
    """

    columns: tuple[Column, ...] = field(default_factory=tuple)

    @classmethod
    def default(cls) -> Board:
        """Build the initial three-column board."""
        return cls(
            columns=tuple(
                Column(id=column_id, title=title) for column_id, title in DEFAULT_COLUMNS
            )
        )

    # -------------------- queries --------------------
    def column(self, column_id: str) -> Column | None:
        for column in self.columns:
            if column.id == column_id:
                return column
        return None

    def find_task(self, task_id: str) -> tuple[Column, int] | None:
        """
        Locate a task by id.

        Returns:
            The containing column and the task's index in it, or None
        """
        for column in self.columns:
            index = column.index_of(task_id)
            if index is not None:
                return column, index
        return None

    def task(self, task_id: str) -> Task | None:
        found = self.find_task(task_id)
        if found is None:
            return None
        column, index = found
        return column.tasks[index]

    def all_tasks(self) -> list[Task]:
        return [task for column in self.columns for task in column.tasks]

    @property
    def task_count(self) -> int:
        return sum(len(column.tasks) for column in self.columns)

    def with_column(self, column: Column) -> Board:
        """Return a board where the column sharing ``column.id`` is swapped out."""
        return replace(
            self,
            columns=tuple(column if col.id == column.id else col for col in self.columns),
        )

    # -------------------- serialization --------------------
    def to_dict(self) -> dict[str, Any]:
        return {"columns": [column.to_dict() for column in self.columns]}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Any) -> Board:
        """
        Rebuild a board from its serialized form, repairing what it can.

        Columns without an id or with a duplicate id are dropped. Tasks without
        an id, with blank content, or whose id was already seen anywhere on the
        board are dropped. Each kept task gets the id of the column it was
        found in, whatever ``columnId`` the snapshot carried.

        Args:
            data: Decoded snapshot, ``{"columns": [...]}``

        Returns:
            A board satisfying the uniqueness and membership invariants

        Raises:
            SnapshotError: If the snapshot does not have the expected shape
        """
        if not isinstance(data, dict) or not isinstance(data.get("columns"), list):
            raise SnapshotError("snapshot must be a mapping with a 'columns' list")

        columns: list[Column] = []
        seen_columns: set[str] = set()
        seen_tasks: set[str] = set()
        for raw_column in data["columns"]:
            if not isinstance(raw_column, dict):
                logger.warning(f"Skipping malformed column entry: {raw_column!r}")
                continue
            column_id = raw_column.get("id")
            if not isinstance(column_id, str) or not column_id:
                logger.warning(f"Skipping column without id: {raw_column!r}")
                continue
            if column_id in seen_columns:
                logger.warning(f"Skipping duplicate column '{column_id}'")
                continue
            seen_columns.add(column_id)

            tasks: list[Task] = []
            raw_tasks = raw_column.get("tasks") or []
            if not isinstance(raw_tasks, list):
                logger.warning(f"Column '{column_id}' has non-list tasks; dropping them")
                raw_tasks = []
            for raw_task in raw_tasks:
                task = _task_from_dict(raw_task, column_id, seen_tasks)
                if task is not None:
                    seen_tasks.add(task.id)
                    tasks.append(task)

            columns.append(
                Column(
                    id=column_id,
                    title=str(raw_column.get("title") or column_id),
                    tasks=tuple(tasks),
                )
            )
        return cls(columns=tuple(columns))

    @classmethod
    def from_json(cls, value: str) -> Board:
        try:
            data = json.loads(value)
        except (TypeError, RecursionError, json.JSONDecodeError) as exc:
            raise SnapshotError(f"snapshot is not valid JSON: {exc}") from exc
        return cls.from_dict(data)


def _task_from_dict(raw: Any, column_id: str, seen: set[str]) -> Task | None:
    if not isinstance(raw, dict):
        logger.warning(f"Skipping malformed task entry in '{column_id}': {raw!r}")
        return None
    task_id = raw.get("id")
    content = raw.get("content")
    if not isinstance(task_id, str) or not task_id:
        logger.warning(f"Skipping task without id in '{column_id}'")
        return None
    if task_id in seen:
        logger.warning(f"Skipping duplicate task '{task_id}' in '{column_id}'")
        return None
    if not isinstance(content, str) or not content.strip():
        logger.warning(f"Skipping task '{task_id}' with empty content")
        return None
    if raw.get("columnId") != column_id:
        logger.warning(
            f"Task '{task_id}' claimed column {raw.get('columnId')!r}; "
            f"realigning to '{column_id}'"
        )
    return Task(id=task_id, content=content, column_id=column_id)
