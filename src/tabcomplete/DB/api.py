# tabcomplete/DB/api.py
from __future__ import annotations
import os
from typing import Protocol, Iterable, Iterator, Optional, Sequence

from ..models import QueueItem, FollowUp


class ItemStore(Protocol):
    # Create
    def create(self, item: QueueItem) -> None: ...
    def bulk_create(self, items: Iterable[QueueItem]) -> int: ...
    def add_follow_up(self, item_id: str, follow_up: FollowUp) -> QueueItem: ...
    # Read
    def read(self, item_id: str) -> QueueItem: ...
    def list_items(self) -> list[QueueItem]: ...
    def count(self) -> int: ...
    def texts(self) -> Iterator[str]: ...
    # Update
    def update_text(self, item_id: str, text: str) -> QueueItem: ...
    # Delete
    def delete(self, item_id: str) -> None: ...
    # lifecycle
    def close(self) -> None: ...


def make_store(dsn: str, *, items: Optional[Sequence[QueueItem]] = None) -> ItemStore:
    """
    Factory:
      - sqlite:///path -> SQLiteStore (file and schema are created when missing)
      - memory://      -> MemoryStore (seeded with items when given)
    """
    if dsn.startswith("sqlite:///"):
        from .sqlite_store import SQLiteStore
        path = dsn.removeprefix("sqlite:///")
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        store = SQLiteStore(path)
        if items:
            store.bulk_create(items)
        return store

    if dsn.startswith("memory://"):
        from .memory_store import MemoryStore
        return MemoryStore(items=items)

    raise ValueError(f"Unsupported store DSN: {dsn}")
