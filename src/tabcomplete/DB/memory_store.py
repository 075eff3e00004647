# tabcomplete/DB/memory_store.py
from __future__ import annotations
from dataclasses import replace
from typing import Dict, Iterable, Iterator, Optional, Sequence
from ..models import QueueItem, FollowUp

class MemoryStore:
    """Simple in-memory item store (useful for tests or ephemeral runs)."""
    def __init__(self, items: Optional[Sequence[QueueItem]] = None) -> None:
        self._rows: Dict[str, QueueItem] = {}
        if items:
            self.bulk_create(items)

    # C
    def create(self, item: QueueItem) -> None:
        self._rows[item.id] = item

    def bulk_create(self, items: Iterable[QueueItem]) -> int:
        n = 0
        for item in items:
            self._rows[item.id] = item; n += 1
        return n

    def add_follow_up(self, item_id: str, follow_up: FollowUp) -> QueueItem:
        item = self.read(item_id)
        updated = replace(item, follow_ups=item.follow_ups + (follow_up,))
        self._rows[item_id] = updated
        return updated

    # R
    def read(self, item_id: str) -> QueueItem:
        try:
            return self._rows[item_id]
        except KeyError:
            raise KeyError(item_id)

    def list_items(self) -> list[QueueItem]:
        return list(self._rows.values())

    def count(self) -> int:
        return len(self._rows)

    def texts(self) -> Iterator[str]:
        for item in self._rows.values():
            yield from item.texts()

    # U
    def update_text(self, item_id: str, text: str) -> QueueItem:
        updated = replace(self.read(item_id), text=text)
        self._rows[item_id] = updated
        return updated

    # D
    def delete(self, item_id: str) -> None:
        self._rows.pop(item_id, None)

    def close(self) -> None:
        self._rows.clear()
