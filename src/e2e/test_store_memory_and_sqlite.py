from pathlib import Path
import pytest
from tabcomplete.DB import make_store
from tabcomplete.models import FollowUp, QueueItem

ITEMS = [QueueItem(id="1", text="Rotate keys"), QueueItem(id="2", text="Review access")]

@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path: Path):
    dsn = "memory://" if request.param == "memory" else f"sqlite:///{tmp_path / 'db' / 'items.sqlite'}"
    s = make_store(dsn, items=ITEMS)
    yield s
    s.close()

def test_crud(store):
    assert store.count() == 2
    assert [it.id for it in store.list_items()] == ["1", "2"]

    updated = store.add_follow_up("1", FollowUp("f1", "use vault"))
    assert updated.follow_ups == (FollowUp("f1", "use vault"),)
    assert store.read("1").follow_ups[0].text == "use vault"

    assert store.update_text("2", "Review all access").text == "Review all access"
    assert list(store.texts()) == ["Rotate keys", "use vault", "Review all access"]

    store.delete("1")
    assert store.count() == 1
    with pytest.raises(KeyError):
        store.read("1")

def test_unknown_item(store):
    with pytest.raises(KeyError):
        store.add_follow_up("missing", FollowUp("x", "y"))

def test_unsupported_dsn():
    with pytest.raises(ValueError):
        make_store("postgres://db")

def test_reingest_keeps_position(store):
    store.bulk_create([QueueItem(id="1", text="Rotate all keys", is_completed=True)])
    assert [it.id for it in store.list_items()] == ["1", "2"]
    assert store.read("1").text == "Rotate all keys" and store.read("1").is_completed
