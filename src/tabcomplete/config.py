from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Mapping, Optional

# Suggestion list size and the shortest token that opens the popover
DEFAULT_LIMIT: int = 6
DEFAULT_MIN_CHARS: int = 3

# Learned tokens shorter than this are dropped from the vocabulary
MIN_TOKEN_LENGTH: int = 3

# Characters that make up a token: ASCII letters, digits and . _ - /
WORD_CHARS: frozenset[str] = frozenset(
    "abcdefghijklmnopqrstuvwxyz"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "0123456789"
    "._-/"
)

# file types the loader reads as one queue item per non-blank line
INCLUDE_EXTS = [".txt", ".md"]

# folders to skip while scanning roots
EXCLUDE_DIRS = {".git", ".hg", ".svn", ".idea", ".vscode", "node_modules", "__pycache__"}

# Item store DSN: "memory://" or "sqlite:///path/to/items.sqlite"
DEFAULT_DSN: str = "memory://"

# Progress logging (set TABCOMPLETE_VERBOSE=1 to enable)
VERBOSE = os.environ.get("TABCOMPLETE_VERBOSE") == "1"

FLAG_ENV = "TABCOMPLETE_EXPERIMENTAL_AUTOCOMPLETE"


@dataclass(frozen=True)
class ExperimentalFlags:
    autocomplete: bool = True


def parse_bool_env(value: object) -> bool:
    if value is True:
        return True
    if not isinstance(value, str):
        return False
    return value.strip().lower() in ("true", "1", "yes")


def env_flags(environ: Optional[Mapping[str, str]] = None) -> ExperimentalFlags:
    """Read feature flags from the environment; unset means the default."""
    env = os.environ if environ is None else environ
    raw = env.get(FLAG_ENV)
    if raw is None:
        return ExperimentalFlags()
    return ExperimentalFlags(autocomplete=parse_bool_env(raw))


def merge_flags(base: ExperimentalFlags, overrides: Optional[Mapping[str, object]] = None) -> ExperimentalFlags:
    """Apply boolean overrides on top of base; anything non-boolean is ignored."""
    overrides = overrides or {}
    value = overrides.get("autocomplete")
    return ExperimentalFlags(
        autocomplete=value if isinstance(value, bool) else base.autocomplete,
    )
