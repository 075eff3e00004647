# tabcomplete/engine.py
from __future__ import annotations

import os
import logging
import threading
import uuid
from typing import Dict, Iterable, List, Optional

from . import config as CFG
from .config import ExperimentalFlags, env_flags
from .models import AutocompleteState, FollowUp, QueueItem
from .loader import load_items, load_state
from .session import AutocompleteSession
from .surface import CANVAS_DRAFT, FOLLOW_UP, INLINE_EDIT, QUICK_CAPTURE, SURFACE_KINDS, InputSurface
from .vocabulary import VocabularyCache
from .DB.api import ItemStore, make_store

log = logging.getLogger(__name__)


class Engine:
    """
    Thin orchestration layer that glues together:
      - item storage via an ItemStore (SQLite or in-memory),
      - the learned vocabulary (memoised per corpus content),
      - one AutocompleteSession per input surface (and per client).

    Public API (used by CLI/Flask/desktop):
      * build(roots=..., state=..., db_dsn=...): ingest -> store
      * load(db_dsn):        attach an existing store
      * vocabulary():        current vocabulary snapshot
      * suggest(text, cursor): one-shot AutocompleteState
      * surface(kind, item_id=None, client=None): the host surface for an input
      * add_item / add_follow_up / update_item: writes that refresh every surface
      * shutdown():          close underlying resources

    Storage DSNs (via tabcomplete.DB.api.make_store):
      - "sqlite:///path/to/items.sqlite"
      - "memory://"

    `lock` serialises store and surface access for threaded hosts
    (Flask's dev server, the desktop loader thread). It is re-entrant, so a
    surface submit that writes back through the engine is safe under it.
    """

    # ------------- lifecycle -------------

    def __init__(
        self,
        *,
        flags: Optional[ExperimentalFlags] = None,
        limit: int = CFG.DEFAULT_LIMIT,
        min_chars: int = CFG.DEFAULT_MIN_CHARS,
    ) -> None:
        self.flags = flags or env_flags()
        self.limit = int(limit)
        self.min_chars = int(min_chars)
        self.lock = threading.RLock()
        self._store: Optional[ItemStore] = None
        self._vocab = VocabularyCache()
        self._surfaces: Dict[str, InputSurface] = {}

    @property
    def enabled(self) -> bool:
        return self.flags.autocomplete

    # /* ~~~ Ingest items from text roots and/or a state file into a store ~~~ */
    def build(
        self,
        roots: Iterable[str] = (),
        *,
        state: Optional[str] = None,          # application-state JSON file
        items: Iterable[QueueItem] = (),      # already-materialised items
        db_dsn: Optional[str] = None,         # e.g. "sqlite:///./items.sqlite" or "memory://"
        verbose: bool = False,
    ) -> None:
        if verbose:
            logging.basicConfig(level=logging.INFO)
            os.environ["TABCOMPLETE_VERBOSE"] = "1"

        collected: List[QueueItem] = list(items)
        roots = list(roots)
        if roots:
            log.info("Loading items from %s", roots)
            collected.extend(load_items(roots))
        if state:
            collected.extend(load_state(state))

        dsn = db_dsn or CFG.DEFAULT_DSN
        log.info("Initializing item store: %s", dsn)
        with self.lock:
            self._close_store()
            self._store = make_store(dsn, items=collected)
            self._on_corpus_changed()
            log.info("Engine build() complete: items=%d vocabulary=%d",
                     self._store.count(), len(self.vocabulary()))

    # /* ~~~ Attach an existing store without ingesting anything ~~~ */
    def load(self, *, db_dsn: str, verbose: bool = False) -> None:
        if verbose:
            logging.basicConfig(level=logging.INFO)
            os.environ["TABCOMPLETE_VERBOSE"] = "1"
        if db_dsn.startswith("sqlite:///"):
            path = db_dsn.removeprefix("sqlite:///")
            if not os.path.exists(path):
                raise FileNotFoundError(path)
        log.info("Initializing item store: %s", db_dsn)
        with self.lock:
            self._close_store()
            self._store = make_store(db_dsn)
            self._on_corpus_changed()
            log.info("Engine load() complete: items=%d", self._store.count())

    @property
    def store(self) -> ItemStore:
        if self._store is None:
            raise RuntimeError("Engine not initialized. Call build() or load() first.")
        return self._store

    # ------------- query -------------

    def vocabulary(self) -> List[str]:
        with self.lock:
            return self._vocab.get(self.store.texts())

    # /* ~~~ One-shot recompute for a text/cursor pair (no carried state) ~~~ */
    def suggest(
        self,
        text: str,
        cursor: Optional[int] = None,
        *,
        limit: Optional[int] = None,
        min_chars: Optional[int] = None,
    ) -> AutocompleteState:
        session = self._new_session(limit=limit, min_chars=min_chars)
        return session.update(text, len(text) if cursor is None else cursor)

    def surface(self, kind: str, item_id: Optional[str] = None, *, client: Optional[str] = None) -> InputSurface:
        """
        Return the surface for an input, creating it (and its session) on first use.

        Surfaces are cached per (client, kind, item_id); hosts serving several
        users pass a client id so nobody drives someone else's session.
        Follow-up and inline-edit surfaces belong to an item and need its id.
        """
        if kind not in SURFACE_KINDS:
            raise KeyError(kind)
        if kind in (FOLLOW_UP, INLINE_EDIT) and not item_id:
            raise ValueError(f"{kind} surface requires an item_id")
        key = kind if item_id is None else f"{kind}:{item_id}"
        if client is not None:
            key = f"{client}/{key}"
        with self.lock:
            surf = self._surfaces.get(key)
            if surf is None:
                item = self.store.read(item_id) if item_id is not None else None
                text = item.text if kind == INLINE_EDIT else ""
                surf = InputSurface(kind, self._new_session(),
                                    on_submit=self._submit_handler(kind, item_id), text=text)
                self._surfaces[key] = surf
                log.info("Opened surface %s", key)
            return surf

    def drop_client(self, client: str) -> int:
        """Forget every surface opened for a client; returns how many were dropped."""
        prefix = f"{client}/"
        with self.lock:
            keys = [k for k in self._surfaces if k.startswith(prefix)]
            for k in keys:
                del self._surfaces[k]
        return len(keys)

    # ------------- writes -------------

    def add_item(self, text: str) -> QueueItem:
        text = (text or "").strip()
        if not text:
            raise ValueError("item text must not be empty")
        item = QueueItem(id=uuid.uuid4().hex, text=text)
        with self.lock:
            self.store.create(item)
            self._on_corpus_changed()
        return item

    def add_follow_up(self, item_id: str, text: str) -> QueueItem:
        text = (text or "").strip()
        if not text:
            raise ValueError("follow-up text must not be empty")
        with self.lock:
            item = self.store.add_follow_up(item_id, FollowUp(id=uuid.uuid4().hex, text=text))
            self._on_corpus_changed()
        return item

    def update_item(self, item_id: str, text: str) -> QueueItem:
        with self.lock:
            item = self.store.update_text(item_id, text)
            self._on_corpus_changed()
        return item

    # ------------- teardown -------------

    # /* ~~~ Close underlying resources (DB handles, etc.) ~~~ */
    def shutdown(self) -> None:
        with self.lock:
            try:
                self._close_store()
            finally:
                self._surfaces.clear()
                self._vocab.invalidate()
                log.info("Engine shutdown complete")

    # ------------- internals -------------

    def _close_store(self) -> None:
        if self._store is not None:
            try:
                self._store.close()
            finally:
                self._store = None

    def _new_session(self, *, limit: Optional[int] = None, min_chars: Optional[int] = None) -> AutocompleteSession:
        return AutocompleteSession(
            self.vocabulary(),
            enabled=self.enabled,
            limit=self.limit if limit is None else limit,
            min_chars=self.min_chars if min_chars is None else min_chars,
        )

    def _submit_handler(self, kind: str, item_id: Optional[str]):
        if kind in (QUICK_CAPTURE, CANVAS_DRAFT):
            return self.add_item
        if kind == FOLLOW_UP:
            return lambda text: self.add_follow_up(item_id, text)
        return lambda text: self.update_item(item_id, text)

    def _on_corpus_changed(self) -> None:
        """Recompute the vocabulary once and hand the new snapshot to every surface."""
        self._vocab.invalidate()
        vocab = self.vocabulary()
        for surf in self._surfaces.values():
            surf.refresh(vocab)
