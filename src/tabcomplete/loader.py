from __future__ import annotations
import json
import logging
import os
from typing import Iterable, List
from .models import FollowUp, QueueItem
from .config import INCLUDE_EXTS, EXCLUDE_DIRS, VERBOSE

log = logging.getLogger(__name__)

PROGRESS_EVERY_FILES = 500

def _iter_text_files(roots: Iterable[str]) -> Iterable[tuple[str, str]]:
    """Yield (root, path) for included files recursively under each root."""
    for root in roots:
        root = os.path.abspath(root)
        if os.path.isfile(root):
            yield os.path.dirname(root), root
            continue
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = [d for d in dirnames if d not in EXCLUDE_DIRS]
            for fn in sorted(filenames):
                if os.path.splitext(fn)[1].lower() in INCLUDE_EXTS:
                    yield root, os.path.join(dirpath, fn)

def _rel_to_any_root(path: str, roots_abs: List[str]) -> str:
    """Return the shortest relative path to any of the given absolute roots."""
    best = path
    for r in roots_abs:
        try:
            rel = os.path.relpath(path, r)
            if len(rel) < len(best):
                best = rel
        except ValueError:
            pass
    return best.replace("\\", "/")

def load_items(roots: List[str]) -> List[QueueItem]:
    """
    Scan roots for text/markdown files; every non-blank line becomes one item.
    Item ids are "<relative path>:<line number>" (1-based).
    """
    items: List[QueueItem] = []
    roots_abs = [os.path.abspath(p) for p in roots]
    for r in roots_abs:
        if not os.path.exists(r):
            raise FileNotFoundError(r)

    file_count = 0
    for _, path in _iter_text_files(roots):
        rel = _rel_to_any_root(path, roots_abs)
        try:
            with open(path, "r", encoding="utf-8", errors="ignore") as f:
                raw_lines = [ln.rstrip("\r\n") for ln in f]
        except OSError as exc:
            log.warning("Skipping unreadable file %s: %s", path, exc)
            continue

        for i, line in enumerate(raw_lines, start=1):
            if line.strip():
                items.append(QueueItem(id=f"{rel}:{i}", text=line.strip()))

        file_count += 1
        if VERBOSE and file_count % PROGRESS_EVERY_FILES == 0:
            log.info("scanned files=%d", file_count)

    log.info("Loaded %d items from %d files", len(items), file_count)
    return items

def _coerce_bool(value, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "y")
    return default

def _text(value) -> str:
    return "" if value is None else str(value).strip()

def _follow_ups(raw: dict, item_id: str) -> tuple:
    # older saves spell the key "followups"
    entries = raw.get("followUps")
    if not isinstance(entries, list):
        entries = raw.get("followups")
    if not isinstance(entries, list):
        return ()
    out = []
    for k, fu in enumerate(entries):
        if not isinstance(fu, dict):
            continue
        text = _text(fu.get("text"))
        if text:
            out.append(FollowUp(id=_text(fu.get("id")) or f"{item_id}-fu-{k}", text=text))
    return tuple(out)

def items_from_state(state) -> List[QueueItem]:
    """
    Convert saved application state into QueueItems.

    Accepts {"items": [...]} or, from very early exports, a bare list of items.
    Entries that are not objects or have blank text are skipped; a non-empty
    list with nothing usable in it is rejected.
    """
    if isinstance(state, list):
        state = {"items": state}
    if not isinstance(state, dict):
        raise ValueError("state must be an object or a list of items")
    raw_items = state.get("items")
    if not isinstance(raw_items, list):
        raise ValueError("state is missing an 'items' list")

    items: List[QueueItem] = []
    for n, raw in enumerate(raw_items):
        if not isinstance(raw, dict):
            continue
        text = _text(raw.get("text"))
        if not text:
            continue
        item_id = _text(raw.get("id")) or f"item-{n}"
        completed = _coerce_bool(raw.get("completed"), False)
        items.append(QueueItem(
            id=item_id,
            text=text,
            follow_ups=_follow_ups(raw, item_id),
            is_completed=_coerce_bool(raw.get("isCompleted"), completed),
        ))
    if raw_items and not items:
        raise ValueError("state has no valid items")
    return items

def load_state(path: str) -> List[QueueItem]:
    """Read items (with follow-ups) from a saved application-state JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        state = json.load(f)
    try:
        items = items_from_state(state)
    except ValueError as exc:
        raise ValueError(f"{path}: {exc}") from exc
    log.info("Loaded %d items from state file %s", len(items), path)
    return items
