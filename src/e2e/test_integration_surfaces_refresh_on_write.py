from pathlib import Path
import pytest
from tabcomplete.config import ExperimentalFlags
from tabcomplete.engine import Engine
from tabcomplete.models import KeyEvent

def _seed(tmp: Path) -> str:
    root = tmp / "Queue"; root.mkdir()
    (root / "notes.txt").write_text("Deploy kube-proxy to staging\n", encoding="utf-8")
    return str(root)

@pytest.mark.e2e
def test_new_item_reaches_open_surfaces(tmp_path: Path):
    eng = Engine(flags=ExperimentalFlags(autocomplete=True))
    try:
        eng.build(roots=[_seed(tmp_path)])
        surf = eng.surface("quick-capture")
        assert surf.set_text("kub").suggestions == ("kube-proxy",)

        eng.add_item("Kubeadm join workers")
        assert surf.state.suggestions == ("kube-proxy", "Kubeadm")
        assert eng.surface("quick-capture") is surf
    finally:
        eng.shutdown()

@pytest.mark.e2e
def test_quick_capture_submit_adds_item(tmp_path: Path):
    eng = Engine(flags=ExperimentalFlags(autocomplete=True))
    try:
        eng.build(roots=[_seed(tmp_path)])
        surf = eng.surface("quick-capture")
        surf.set_text("rollback staging")
        res = surf.key(KeyEvent("Enter", ctrl=True))
        assert res.submitted == "rollback staging"
        assert eng.store.count() == 2
        assert "rollback" in eng.vocabulary()
    finally:
        eng.shutdown()

@pytest.mark.e2e
def test_follow_up_and_inline_edit_surfaces(tmp_path: Path):
    eng = Engine(flags=ExperimentalFlags(autocomplete=True))
    try:
        eng.build(roots=[_seed(tmp_path)])
        item = eng.add_item("first item")

        follow = eng.surface("follow-up", item_id=item.id)
        follow.set_text("ask about canary")
        assert follow.key(KeyEvent("Enter")).submitted == "ask about canary"
        assert [fu.text for fu in eng.store.read(item.id).follow_ups] == ["ask about canary"]
        assert "canary" in eng.vocabulary()

        edit = eng.surface("inline-edit", item_id=item.id)
        assert edit.text == "first item"
        edit.set_text("first item renamed")
        edit.key(KeyEvent("Enter"))
        assert eng.store.read(item.id).text == "first item renamed"

        with pytest.raises(ValueError):
            eng.add_item("   ")
        with pytest.raises(KeyError):
            eng.add_follow_up("missing", "text")
    finally:
        eng.shutdown()
