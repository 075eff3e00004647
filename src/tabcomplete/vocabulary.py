from __future__ import annotations
import hashlib
from typing import Dict, Iterable, List, Optional

from .config import MIN_TOKEN_LENGTH
from .models import QueueItem, corpus_texts
from .tokens import iter_tokens

def extract_vocabulary(texts: Iterable[Optional[str]], min_length: int = MIN_TOKEN_LENGTH) -> List[str]:
    """
    Learn a case-preserving, case-insensitively unique token list from texts.

    - tokens are maximal runs of [A-Za-z0-9._-/]
    - runs shorter than min_length are dropped
    - the first spelling seen for a lowercase key wins, later casings are ignored
    - output is ordered by lowercase key (plain code-point comparison), so the
      result does not depend on the order the texts arrive in
    """
    seen: Dict[str, str] = {}
    for text in texts:
        for tok in iter_tokens(text or ""):
            if len(tok) < min_length:
                continue
            key = tok.lower()
            if key not in seen:
                seen[key] = tok
    return [seen[key] for key in sorted(seen)]

def extract_learned_tokens(items: Iterable[QueueItem]) -> List[str]:
    """Vocabulary over item bodies and their follow-up notes."""
    return extract_vocabulary(corpus_texts(items))

def corpus_fingerprint(texts: Iterable[Optional[str]]) -> str:
    """Content hash of a corpus; equal corpora give equal fingerprints."""
    h = hashlib.sha1()
    for text in texts:
        data = (text or "").encode("utf-8")
        h.update(len(data).to_bytes(8, "little"))
        h.update(data)
    return h.hexdigest()

class VocabularyCache:
    """
    Memoises extract_vocabulary keyed by corpus fingerprint.
    The extractor stays pure; callers invalidate() after a write.
    """
    def __init__(self) -> None:
        self._key: Optional[str] = None
        self._tokens: List[str] = []
        self.hits = 0
        self.misses = 0

    def get(self, texts: Iterable[Optional[str]]) -> List[str]:
        texts = list(texts)
        key = corpus_fingerprint(texts)
        if key == self._key:
            self.hits += 1
            return list(self._tokens)
        self.misses += 1
        self._tokens = extract_vocabulary(texts)
        self._key = key
        return list(self._tokens)

    def invalidate(self) -> None:
        self._key = None
        self._tokens = []
