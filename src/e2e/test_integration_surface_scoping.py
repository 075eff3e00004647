from pathlib import Path
import pytest
from tabcomplete.config import ExperimentalFlags
from tabcomplete.engine import Engine
from tabcomplete.models import KeyEvent

def _seed(tmp: Path) -> str:
    root = tmp / "Queue"; root.mkdir()
    (root / "notes.txt").write_text("Upgrade kubernetes nodes\n", encoding="utf-8")
    return str(root)

@pytest.mark.e2e
def test_item_bound_surfaces_need_an_item(tmp_path: Path):
    eng = Engine(flags=ExperimentalFlags(autocomplete=True))
    try:
        eng.build(roots=[_seed(tmp_path)])
        for kind in ("follow-up", "inline-edit"):
            with pytest.raises(ValueError):
                eng.surface(kind)
            with pytest.raises(KeyError):
                eng.surface(kind, item_id="missing")
        with pytest.raises(KeyError):
            eng.surface("sidebar")
        assert eng.store.count() == 1
    finally:
        eng.shutdown()

@pytest.mark.e2e
def test_clients_get_separate_sessions(tmp_path: Path):
    eng = Engine(flags=ExperimentalFlags(autocomplete=True))
    try:
        eng.build(roots=[_seed(tmp_path)])
        a = eng.surface("quick-capture", client="a")
        b = eng.surface("quick-capture", client="b")
        assert a is not b and a is not eng.surface("quick-capture")

        a.set_text("fix kub")
        b.set_text("hello world")
        res = a.key(KeyEvent("Tab"))
        assert res.handled and a.text == "fix kubernetes"
        assert b.text == "hello world"

        assert eng.drop_client("a") == 1
        assert eng.surface("quick-capture", client="a") is not a
        assert eng.surface("quick-capture", client="b") is b
    finally:
        eng.shutdown()
