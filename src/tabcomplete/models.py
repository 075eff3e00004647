from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple

@dataclass(frozen=True)
class FollowUp:
    id: str
    text: str

@dataclass(frozen=True)
class QueueItem:
    id: str
    text: str                                    # primary item body
    follow_ups: Tuple[FollowUp, ...] = ()        # attached notes, oldest first
    is_completed: bool = False

    def texts(self) -> Iterator[str]:
        """Body first, then every follow-up in order."""
        yield self.text or ""
        for fu in self.follow_ups:
            yield fu.text or ""

def corpus_texts(items: Iterable[QueueItem]) -> list[str]:
    """Flatten items into the text fragments the vocabulary is learned from."""
    return [t for item in items for t in item.texts()]

@dataclass(frozen=True)
class TokenInfo:
    token: str
    start: int
    end: int                  # the clamped cursor the token was computed for

@dataclass(frozen=True)
class AcceptResult:
    next_value: str
    next_cursor: int
    accepted: str

@dataclass(frozen=True)
class AutocompleteState:
    token: TokenInfo
    suggestions: Tuple[str, ...] = ()
    is_open: bool = False
    selected_index: int = 0

    @property
    def selected(self) -> Optional[str]:
        if not self.suggestions:
            return None
        i = max(0, min(self.selected_index, len(self.suggestions) - 1))
        return self.suggestions[i]

    def to_dict(self) -> dict:
        return {
            "token": {"token": self.token.token, "start": self.token.start, "end": self.token.end},
            "suggestions": list(self.suggestions),
            "is_open": self.is_open,
            "selected_index": self.selected_index,
        }

@dataclass(frozen=True)
class KeyEvent:
    key: str                  # DOM-style name: "Escape", "Tab", "ArrowDown", "Enter", "a"
    shift: bool = False
    ctrl: bool = False
    meta: bool = False

@dataclass(frozen=True)
class KeyIntent:
    handled: bool
    action: Optional[str] = None     # "dismiss" | "accept" | "cycle"
    direction: int = 0               # +1 / -1 for "cycle"

@dataclass(frozen=True)
class KeyOutcome:
    handled: bool
    action: Optional[str] = None
    accept: Optional[AcceptResult] = None

@dataclass
class SurfaceResult:
    handled: bool                         # consumed by autocomplete or by the host fallback
    action: Optional[str] = None          # autocomplete action or "submit" / "clear" / "cancel"
    accept: Optional[AcceptResult] = None
    submitted: Optional[str] = None
