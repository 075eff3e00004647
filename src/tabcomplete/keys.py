from __future__ import annotations
from typing import Mapping

from .models import AutocompleteState, KeyEvent, KeyIntent

ESCAPE = "Escape"
TAB = "Tab"
ARROW_DOWN = "ArrowDown"
ARROW_UP = "ArrowUp"
ENTER = "Enter"

DISMISS = "dismiss"
ACCEPT = "accept"
CYCLE = "cycle"

NOT_HANDLED = KeyIntent(handled=False)

# Tk keysym -> DOM-style key name
_TK_KEYSYMS = {
    "Escape": ESCAPE,
    "Tab": TAB,
    "ISO_Left_Tab": TAB,          # Shift+Tab on X11
    "Down": ARROW_DOWN,
    "Up": ARROW_UP,
    "Return": ENTER,
    "KP_Enter": ENTER,
}

# Tk event.state bit masks
TK_SHIFT = 0x0001
TK_CONTROL = 0x0004
TK_COMMAND = 0x0008            # Mod1: Command on macOS, Alt elsewhere


def resolve_key(state: AutocompleteState, event: KeyEvent, *, enabled: bool = True) -> KeyIntent:
    """
    Decide what a keydown means for the autocomplete layer.

    Checked in order, first match wins:
      1. Escape while open        -> dismiss
      2. Tab while open           -> Shift+Tab cycles back, Tab accepts
      3. ArrowDown/Up while open  -> cycle forward / back
    Anything else, or any key while closed, is left for the host.
    """
    if not enabled or not state.is_open:
        return NOT_HANDLED

    if event.key == ESCAPE:
        return KeyIntent(handled=True, action=DISMISS)

    if event.key == TAB:
        if event.shift:
            return KeyIntent(handled=True, action=CYCLE, direction=-1)
        return KeyIntent(handled=True, action=ACCEPT)

    if event.key in (ARROW_DOWN, ARROW_UP):
        return KeyIntent(handled=True, action=CYCLE, direction=1 if event.key == ARROW_DOWN else -1)

    return NOT_HANDLED


def key_event_from_tk(keysym: str, state: int = 0) -> KeyEvent:
    """Translate a Tk <KeyPress> (event.keysym, event.state) into a KeyEvent."""
    key = _TK_KEYSYMS.get(keysym, keysym)
    shift = bool(state & TK_SHIFT) or keysym == "ISO_Left_Tab"
    return KeyEvent(
        key=key,
        shift=shift,
        ctrl=bool(state & TK_CONTROL),
        meta=bool(state & TK_COMMAND),
    )


def key_event_from_dict(data: Mapping[str, object]) -> KeyEvent:
    """Build a KeyEvent from a JSON body like {"key": "Tab", "shift": true}."""
    key = data.get("key")
    if not isinstance(key, str) or not key:
        raise ValueError("key event requires a non-empty 'key'")
    return KeyEvent(
        key=key,
        shift=bool(data.get("shift", False)),
        ctrl=bool(data.get("ctrl", False)),
        meta=bool(data.get("meta", False)),
    )
