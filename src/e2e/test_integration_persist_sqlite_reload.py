from pathlib import Path
import pytest
from tabcomplete.engine import Engine

def _seed(tmp: Path) -> str:
    root = tmp / "Queue"; root.mkdir()
    (root / "notes.txt").write_text("Migrate billing service\n", encoding="utf-8")
    return str(root)

@pytest.mark.e2e
def test_persist_sqlite_then_reload(tmp_path: Path):
    dsn = f"sqlite:///{tmp_path / 'state' / 'items.sqlite'}"
    eng = Engine()
    eng.build(roots=[_seed(tmp_path)], db_dsn=dsn)
    eng.add_follow_up("notes.txt:1", "freeze invoices first")
    vocab = eng.vocabulary()
    eng.shutdown()

    eng2 = Engine()
    try:
        eng2.load(db_dsn=dsn)
        assert eng2.vocabulary() == vocab
        assert "invoices" in vocab
        assert eng2.suggest("the inv").suggestions == ("invoices",)
        item = eng2.store.read("notes.txt:1")
        assert [fu.text for fu in item.follow_ups] == ["freeze invoices first"]
    finally:
        eng2.shutdown()

@pytest.mark.e2e
def test_load_missing_database(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        Engine().load(db_dsn=f"sqlite:///{tmp_path / 'absent.sqlite'}")
