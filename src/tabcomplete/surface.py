from __future__ import annotations
import logging
from typing import Callable, Optional

from .keys import ACCEPT, ENTER, ESCAPE
from .models import AutocompleteState, KeyEvent, SurfaceResult
from .session import AutocompleteSession

log = logging.getLogger(__name__)

QUICK_CAPTURE = "quick-capture"
INLINE_EDIT = "inline-edit"
FOLLOW_UP = "follow-up"
CANVAS_DRAFT = "canvas-draft"

SURFACE_KINDS = (QUICK_CAPTURE, INLINE_EDIT, FOLLOW_UP, CANVAS_DRAFT)

SUBMIT = "submit"
CLEAR = "clear"
CANCEL = "cancel"


def _is_submit_key(kind: str, event: KeyEvent) -> bool:
    if event.key != ENTER:
        return False
    if kind == QUICK_CAPTURE:
        return event.ctrl or event.meta         # plain Enter inserts a newline
    if kind == CANVAS_DRAFT:
        return True
    return not event.shift                      # inline edit / follow-up


class InputSurface:
    """
    One host text input (text buffer + caret) wired to its own session.

    Every key goes to the session first; only keys it does not consume
    fall through to the surface's own Enter / Escape handling.
    """

    def __init__(
        self,
        kind: str,
        session: Optional[AutocompleteSession] = None,
        *,
        on_submit: Optional[Callable[[str], None]] = None,
        text: str = "",
    ) -> None:
        if kind not in SURFACE_KINDS:
            raise ValueError(f"Unknown surface kind: {kind!r}")
        self.kind = kind
        self.session = session or AutocompleteSession()
        self.on_submit = on_submit
        self.text = ""
        self.cursor = 0
        self.original = text          # inline-edit: what Escape restores
        self.set_text(text)

    @property
    def state(self) -> AutocompleteState:
        return self.session.state

    # ------------- host buffer -------------

    def set_text(self, text: str, cursor: Optional[int] = None) -> AutocompleteState:
        """Replace the buffer (typing, paste); the caret defaults to the end."""
        self.text = text or ""
        if cursor is None:
            cursor = len(self.text)
        self.cursor = max(0, min(int(cursor), len(self.text)))
        return self.session.update(self.text, self.cursor)

    def move_cursor(self, cursor: int) -> AutocompleteState:
        return self.set_text(self.text, cursor)

    def refresh(self, vocabulary=None) -> AutocompleteState:
        """Recompute after the vocabulary snapshot changed."""
        return self.session.update(self.text, self.cursor, vocabulary=vocabulary)

    # ------------- keyboard -------------

    def key(self, event: KeyEvent) -> SurfaceResult:
        outcome = self.session.handle_key(event)
        if outcome.handled:
            if outcome.action == ACCEPT and outcome.accept is not None:
                self.set_text(outcome.accept.next_value, outcome.accept.next_cursor)
            return SurfaceResult(handled=True, action=outcome.action, accept=outcome.accept)

        if _is_submit_key(self.kind, event):
            return self._submit()
        if event.key == ESCAPE:
            return self._escape()
        return SurfaceResult(handled=False)

    def _submit(self) -> SurfaceResult:
        trimmed = self.text.strip()
        if not trimmed:
            return SurfaceResult(handled=True, action=SUBMIT)
        if self.on_submit is not None:
            self.on_submit(trimmed)
        log.info("%s submitted %d chars", self.kind, len(trimmed))
        if self.kind == INLINE_EDIT:
            self.original = trimmed
            self.set_text(trimmed)
        else:
            self.set_text("")
        return SurfaceResult(handled=True, action=SUBMIT, submitted=trimmed)

    def _escape(self) -> SurfaceResult:
        if self.kind == INLINE_EDIT:
            self.set_text(self.original)
            return SurfaceResult(handled=True, action=CANCEL)
        self.set_text("")
        return SurfaceResult(handled=True, action=CLEAR if self.kind != CANVAS_DRAFT else CANCEL)
