# tabcomplete/DB/sqlite_store.py
from __future__ import annotations
import sqlite3
from typing import Iterable, Iterator
from ..models import QueueItem, FollowUp

_SCHEMA = """
CREATE TABLE IF NOT EXISTS items (
  id TEXT PRIMARY KEY,
  text TEXT NOT NULL,
  is_completed INTEGER NOT NULL DEFAULT 0
);
CREATE TABLE IF NOT EXISTS follow_ups (
  id TEXT PRIMARY KEY,
  item_id TEXT NOT NULL REFERENCES items(id) ON DELETE CASCADE,
  text TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS follow_ups_item ON follow_ups(item_id);
"""

class SQLiteStore:
    """SQLite-backed item store; rows are read back in insertion order."""
    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        self.conn = sqlite3.connect(db_path, check_same_thread=False)
        self.conn.execute("PRAGMA journal_mode=WAL;")
        self.conn.execute("PRAGMA foreign_keys=ON;")
        self.conn.executescript(_SCHEMA)

    # ---- Create ----
    def create(self, item: QueueItem) -> None:
        self._write(item)
        self.conn.commit()

    def bulk_create(self, items: Iterable[QueueItem]) -> int:
        n = 0
        for item in items:
            self._write(item); n += 1
        self.conn.commit()
        return n

    def add_follow_up(self, item_id: str, follow_up: FollowUp) -> QueueItem:
        self.read(item_id)  # KeyError for unknown items
        self.conn.execute(
            "INSERT OR REPLACE INTO follow_ups(id, item_id, text) VALUES (?,?,?)",
            (follow_up.id, item_id, follow_up.text),
        )
        self.conn.commit()
        return self.read(item_id)

    def _write(self, item: QueueItem) -> None:
        self.conn.execute("DELETE FROM follow_ups WHERE item_id=?", (item.id,))
        self.conn.execute(
            "INSERT INTO items(id, text, is_completed) VALUES (?,?,?) "
            "ON CONFLICT(id) DO UPDATE SET text=excluded.text, is_completed=excluded.is_completed",
            (item.id, item.text, int(item.is_completed)),
        )
        self.conn.executemany(
            "INSERT OR REPLACE INTO follow_ups(id, item_id, text) VALUES (?,?,?)",
            [(fu.id, item.id, fu.text) for fu in item.follow_ups],
        )

    # ---- Read ----
    def read(self, item_id: str) -> QueueItem:
        row = self.conn.execute(
            "SELECT id, text, is_completed FROM items WHERE id=?", (item_id,)
        ).fetchone()
        if row is None:
            raise KeyError(item_id)
        return self._item(row)

    def list_items(self) -> list[QueueItem]:
        rows = self.conn.execute("SELECT id, text, is_completed FROM items ORDER BY rowid").fetchall()
        return [self._item(r) for r in rows]

    def _item(self, row) -> QueueItem:
        item_id, text, done = row
        fus = self.conn.execute(
            "SELECT id, text FROM follow_ups WHERE item_id=? ORDER BY rowid", (item_id,)
        ).fetchall()
        return QueueItem(
            id=item_id, text=text, is_completed=bool(done),
            follow_ups=tuple(FollowUp(id=fid, text=ftext) for fid, ftext in fus),
        )

    def count(self) -> int:
        (n,) = self.conn.execute("SELECT COUNT(*) FROM items").fetchone()
        return int(n)

    def texts(self) -> Iterator[str]:
        for item in self.list_items():
            yield from item.texts()

    # ---- Update ----
    def update_text(self, item_id: str, text: str) -> QueueItem:
        self.read(item_id)
        self.conn.execute("UPDATE items SET text=? WHERE id=?", (text, item_id))
        self.conn.commit()
        return self.read(item_id)

    # ---- Delete ----
    def delete(self, item_id: str) -> None:
        self.conn.execute("DELETE FROM follow_ups WHERE item_id=?", (item_id,))
        self.conn.execute("DELETE FROM items WHERE id=?", (item_id,))
        self.conn.commit()

    # ---- lifecycle ----
    def close(self) -> None:
        self.conn.close()
