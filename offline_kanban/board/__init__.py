"""Board module: snapshot model, store, drag sessions and persistence."""

from .drag import DragSession
from .models import Board, Column, SnapshotError, Task
from .persistence import JsonFileStore, KeyValueStore, MemoryStore, PersistenceError
from .store import STORAGE_KEY, BoardStore

__all__ = [
    "Board",
    "BoardStore",
    "Column",
    "DragSession",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "PersistenceError",
    "STORAGE_KEY",
    "SnapshotError",
    "Task",
]
