"""Key-value storage backends for board snapshots."""

from __future__ import annotations

import contextlib
import os
import re
from pathlib import Path
from typing import Final, Protocol

from loguru import logger

FILE_SUFFIX: Final[str] = ".json"
PART_EXTENSION: Final[str] = ".part"
DEFAULT_DATA_DIR: Final[Path] = Path("~/.local/share/offline-kanban")
_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class PersistenceError(RuntimeError):
    """Raised when a snapshot cannot be read from or written to storage."""


class KeyValueStore(Protocol):
    """Durable string storage keyed by string.

    ``load`` returns None when nothing has been stored under ``key`` yet.
    Backends raise ``PersistenceError`` when the storage itself fails.
    """

    def load(self, key: str) -> str | None: ...

    def save(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Process-local store, used when no durable backend is configured."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def load(self, key: str) -> str | None:
        return self._values.get(key)

    def save(self, key: str, value: str) -> None:
        self._values[key] = value


class JsonFileStore:
    """
    Store each key as one JSON file inside a directory.

    Writes go to a ``.part`` sibling first and are moved over the target with
    ``Path.replace`` so a crash mid-write leaves the previous snapshot intact.
    """

    def __init__(self, directory: str | os.PathLike = DEFAULT_DATA_DIR) -> None:
        """
        Initialize the file store.

        Args:
            directory: Directory holding one ``<key>.json`` file per key.
                Created lazily on the first save.
        """
        self.directory = Path(directory).expanduser()

    def path_for(self, key: str) -> Path:
        if not key:
            raise PersistenceError("Storage key must not be empty")
        return self.directory / f"{_UNSAFE_KEY_CHARS.sub('_', key)}{FILE_SUFFIX}"

    def load(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug(f"No snapshot stored for '{key}' at {path}")
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise PersistenceError(f"Failed to read {path}: {exc}") from exc

    def save(self, key: str, value: str) -> None:
        path = self.path_for(key)
        partial_path = path.parent / f"{path.name}{PART_EXTENSION}"
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            partial_path.write_text(value, encoding="utf-8")
            partial_path.replace(path)
        except OSError as exc:
            with contextlib.suppress(OSError):
                partial_path.unlink(missing_ok=True)
            raise PersistenceError(f"Failed to write {path}: {exc}") from exc
        logger.debug(f"Saved snapshot '{key}' ({len(value)} bytes) to {path}")
