from __future__ import annotations
from typing import Iterable, List, Tuple

from .config import DEFAULT_LIMIT

# Relevance groups: prefix matches always rank ahead of inner matches
PREFIX_MATCH = 0
CONTAINS_MATCH = 1

def _classify(token_lower: str, p: str) -> int | None:
    if token_lower.startswith(p):
        return PREFIX_MATCH
    if p in token_lower:
        return CONTAINS_MATCH
    return None

def get_suggestions(prefix: str, vocabulary: Iterable[str], limit: int = DEFAULT_LIMIT) -> List[str]:
    """
    Rank vocabulary entries for a partial word.

    Order: prefix matches before substring matches, then ascending by the
    lowercase spelling (code-point order). Case-insensitive duplicates are
    collapsed onto the first one after sorting; at most `limit` are returned.
    """
    trimmed = (prefix or "").strip()
    if not trimmed or limit <= 0:
        return []
    p = trimmed.lower()

    rows: List[Tuple[int, str, str]] = []   # (group, lower, original)
    for token in vocabulary:
        if not token:
            continue
        lower = token.lower()
        group = _classify(lower, p)
        if group is None:
            continue
        rows.append((group, lower, token))

    # stable sort keeps vocabulary order for identical (group, lower) keys
    rows.sort(key=lambda r: (r[0], r[1]))

    out: List[str] = []
    seen: set[str] = set()
    for _, lower, token in rows:
        if lower in seen:
            continue
        seen.add(lower)
        out.append(token)
        if len(out) >= limit:
            break
    return out

rank = get_suggestions
