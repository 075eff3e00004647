from __future__ import annotations
import logging
from typing import Iterable, Optional

from .config import DEFAULT_LIMIT, DEFAULT_MIN_CHARS
from .keys import ACCEPT, CYCLE, DISMISS, resolve_key
from .models import AcceptResult, AutocompleteState, KeyEvent, KeyOutcome, TokenInfo
from .search import get_suggestions
from .tokens import get_token_before_cursor

log = logging.getLogger(__name__)


class AutocompleteSession:
    """
    Tab-autocomplete state machine for exactly one text input.

    Closed / Open is recomputed from (text, cursor, vocabulary, enabled) on
    every update(); the only state carried between updates is the selected
    index, the previous token text, and whether the popover was dismissed
    for the current token.

    The host owns the text buffer: accept() only computes the replacement,
    the host writes it back and calls update() again. Accept against the
    same text/cursor the session was last updated with.
    """

    def __init__(
        self,
        vocabulary: Iterable[str] = (),
        *,
        enabled: bool = True,
        limit: int = DEFAULT_LIMIT,
        min_chars: int = DEFAULT_MIN_CHARS,
    ) -> None:
        self.vocabulary: list[str] = list(vocabulary)
        self.enabled = bool(enabled)
        self.limit = int(limit)
        self.min_chars = int(min_chars)

        self._text = ""
        self._cursor = 0
        self._last_token = ""
        self._dismissed = False
        self._state = AutocompleteState(token=TokenInfo("", 0, 0))

    # ------------- recompute -------------

    @property
    def state(self) -> AutocompleteState:
        return self._state

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor(self) -> int:
        return self._cursor

    def update(
        self,
        text: str,
        cursor: int,
        *,
        vocabulary: Optional[Iterable[str]] = None,
        enabled: Optional[bool] = None,
    ) -> AutocompleteState:
        if vocabulary is not None:
            self.vocabulary = list(vocabulary)
        if enabled is not None:
            self.enabled = bool(enabled)

        self._text = text or ""
        token = get_token_before_cursor(self._text, cursor)
        self._cursor = token.end

        suggestions = self._suggest(token)

        prev = self._state
        if token.token != self._last_token:
            self._last_token = token.token
            self._dismissed = False
            selected = 0
        elif prev.selected_index >= len(suggestions):
            selected = 0
        else:
            selected = prev.selected_index

        is_open = self.enabled and bool(suggestions) and not self._dismissed
        self._state = AutocompleteState(
            token=token,
            suggestions=tuple(suggestions),
            is_open=is_open,
            selected_index=selected,
        )
        log.debug("recompute token=%r open=%s n=%d sel=%d",
                  token.token, is_open, len(suggestions), selected)
        return self._state

    def configure(
        self,
        *,
        limit: Optional[int] = None,
        min_chars: Optional[int] = None,
        enabled: Optional[bool] = None,
    ) -> AutocompleteState:
        """Change options and recompute against the current text/cursor."""
        if limit is not None:
            self.limit = int(limit)
        if min_chars is not None:
            self.min_chars = int(min_chars)
        return self.update(self._text, self._cursor, enabled=enabled)

    def _suggest(self, token: TokenInfo) -> list[str]:
        if not self.enabled:
            return []
        trimmed = token.token.strip()
        if len(trimmed) < self.min_chars:
            return []
        return get_suggestions(trimmed, self.vocabulary, self.limit)

    # ------------- transitions -------------

    def cycle(self, direction: int) -> AutocompleteState:
        s = self._state
        n = len(s.suggestions)
        if n == 0:
            return s
        step = 1 if direction >= 0 else -1
        self._state = AutocompleteState(
            token=s.token,
            suggestions=s.suggestions,
            is_open=s.is_open,
            selected_index=(s.selected_index + step) % n,
        )
        return self._state

    def dismiss(self) -> AutocompleteState:
        s = self._state
        self._dismissed = True
        self._state = AutocompleteState(
            token=s.token,
            suggestions=s.suggestions,
            is_open=False,
            selected_index=s.selected_index,
        )
        return self._state

    def accept(self) -> Optional[AcceptResult]:
        s = self._state
        if not self.enabled or not s.is_open or not s.suggestions:
            return None
        accepted = s.selected
        assert accepted is not None
        start, end = s.token.start, s.token.end
        return AcceptResult(
            next_value=self._text[:start] + accepted + self._text[end:],
            next_cursor=start + len(accepted),
            accepted=accepted,
        )

    # ------------- keyboard -------------

    def handle_key(self, event: KeyEvent) -> KeyOutcome:
        intent = resolve_key(self._state, event, enabled=self.enabled)
        if not intent.handled:
            return KeyOutcome(handled=False)
        if intent.action == DISMISS:
            self.dismiss()
        elif intent.action == CYCLE:
            self.cycle(intent.direction)
        elif intent.action == ACCEPT:
            return KeyOutcome(handled=True, action=ACCEPT, accept=self.accept())
        return KeyOutcome(handled=True, action=intent.action)
