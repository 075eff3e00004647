"""
Tab-Autocomplete Engine

This package provides the inline tab-autocomplete used by every text input of
the queue tracker. It learns a vocabulary from the user's own items and
follow-up notes, finds the partial word left of the caret, ranks completions
deterministically and drives an accept / cycle / dismiss keyboard protocol.

The package is split by concern:
- Vocabulary extraction from stored text
- Token boundary detection at the cursor
- Suggestion ranking
- The per-input session state machine and its key handling
- Item storage and the orchestrating Engine

Main Functions:
    extract_vocabulary(texts): Learn the vocabulary from text fragments
    get_token_before_cursor(text, cursor): Partial word ending at the cursor
    get_suggestions(prefix, vocabulary, limit): Ranked completions

Example Usage:
    from tabcomplete import AutocompleteSession, KeyEvent, extract_vocabulary

    vocab = extract_vocabulary(["fix the build", "bug triage"])
    session = AutocompleteSession(vocab)
    session.update("fix bui", 7)
    outcome = session.handle_key(KeyEvent("Tab"))
    print(outcome.accept.next_value)      # "fix build"
"""

from .models import AcceptResult, AutocompleteState, KeyEvent, QueueItem, FollowUp, TokenInfo
from .vocabulary import extract_vocabulary, extract_learned_tokens
from .tokens import get_token_before_cursor, detect
from .search import get_suggestions, rank
from .keys import resolve_key
from .session import AutocompleteSession
from .surface import InputSurface
from .engine import Engine

__version__ = "1.0.0"
__all__ = [
    "AcceptResult", "AutocompleteState", "KeyEvent", "QueueItem", "FollowUp", "TokenInfo",
    "extract_vocabulary", "extract_learned_tokens",
    "get_token_before_cursor", "detect",
    "get_suggestions", "rank",
    "resolve_key", "AutocompleteSession", "InputSurface", "Engine",
]
