"""Public API for the front ends: one shared Engine behind initialize()/suggest()."""
from __future__ import annotations
import time
import logging
from tabcomplete.engine import Engine
from tabcomplete.models import AutocompleteState

log = logging.getLogger(__name__)

_engine: Engine | None = None

def initialize(roots: list[str] | None = None,
               state: str | None = None,
               db: str | None = None,
               load: bool = False,
               verbose: bool = False,
               **engine_opts) -> Engine:
    """
    Init modes:
      1) load=True: attach an existing item store at `db` (sqlite:///...).
      2) otherwise: ingest `roots` and/or the `state` JSON file into `db` (default memory://).
    """
    global _engine
    t0 = time.perf_counter()
    if _engine is not None:
        _engine.shutdown()

    eng = Engine(**engine_opts)
    if load:
        if not db:
            raise ValueError("initialize(load=True) requires db")
        eng.load(db_dsn=db, verbose=verbose)
    else:
        eng.build(roots or [], state=state, db_dsn=db, verbose=verbose)
    _engine = eng
    log.info("init complete in %.2fs", time.perf_counter() - t0)
    return eng

def get_engine() -> Engine:
    if _engine is None:
        raise RuntimeError("Engine not initialized. Call initialize(...) first.")
    return _engine

def suggest(text: str, cursor: int | None = None) -> AutocompleteState:
    """Return the autocomplete state for text with the caret at cursor (default: end)."""
    return get_engine().suggest(text, cursor)
