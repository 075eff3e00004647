from __future__ import annotations
import re
from typing import Iterator

from .config import WORD_CHARS
from .models import TokenInfo

# maximal runs of word characters
TOKEN_RE = re.compile(r"[A-Za-z0-9._\-/]+")

def is_word_char(ch: str) -> bool:
    """ASCII letters, digits and . _ - / are part of a token; anything else is a boundary."""
    return ch in WORD_CHARS

def iter_tokens(text: str) -> Iterator[str]:
    """Yield every maximal word-character run in text, left to right."""
    if not text:
        return
    for m in TOKEN_RE.finditer(text):
        yield m.group(0)

def get_token_before_cursor(text: str, cursor: int) -> TokenInfo:
    """
    Return the partial token ending exactly at the cursor.

    Only the run left of the caret is considered: accepting a completion
    replaces text[start:end] and never touches what follows the cursor.
    Out-of-range cursors are clamped into [0, len(text)].
    """
    text = text or ""
    end = max(0, min(int(cursor), len(text)))
    start = end
    while start > 0 and is_word_char(text[start - 1]):
        start -= 1
    return TokenInfo(token=text[start:end], start=start, end=end)

detect = get_token_before_cursor
