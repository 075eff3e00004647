from pathlib import Path
import pytest
import tabcomplete_ui

def _seed(tmp: Path) -> str:
    root = tmp / "Queue"; root.mkdir()
    (root / "notes.txt").write_text("Benchmark parser\n", encoding="utf-8")
    return str(root)

@pytest.mark.e2e
def test_initialize_then_suggest(tmp_path: Path):
    eng = tabcomplete_ui.initialize(roots=[_seed(tmp_path)], limit=2)
    try:
        assert tabcomplete_ui.get_engine() is eng
        assert tabcomplete_ui.suggest("run bench").suggestions == ("Benchmark",)
        assert tabcomplete_ui.suggest("run bench", 2).suggestions == ()
    finally:
        eng.shutdown()
        tabcomplete_ui._engine = None

def test_initialize_load_needs_db():
    with pytest.raises(ValueError):
        tabcomplete_ui.initialize(load=True)

def test_get_engine_before_initialize():
    tabcomplete_ui._engine = None
    with pytest.raises(RuntimeError):
        tabcomplete_ui.get_engine()
