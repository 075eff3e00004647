from pathlib import Path
import pytest
from tabcomplete.config import ExperimentalFlags
from tabcomplete.engine import Engine
from tabcomplete_ui.web import app as flask_app

def _seed(tmp: Path) -> str:
    root = tmp / "Queue"; root.mkdir()
    (root / "notes.txt").write_text("Upgrade kubernetes nodes\n", encoding="utf-8")
    return str(root)

@pytest.mark.e2e
def test_frontend_clients_isolated(tmp_path: Path):
    eng = Engine(flags=ExperimentalFlags(autocomplete=True))
    eng.build(roots=[_seed(tmp_path)], db_dsn="memory://")

    import tabcomplete_ui.web as webmod
    webmod._engine = eng
    try:
        first = flask_app.test_client()
        second = flask_app.test_client()
        base = "/api/surfaces/quick-capture"

        first.post(f"{base}/input", json={"text": "fix kub"})
        second.post(f"{base}/input", json={"text": "hello world"})

        data = first.post(f"{base}/key", json={"key": "Tab"}).get_json()
        assert data["handled"] is True
        assert data["text"] == "fix kubernetes"

        data = second.post(f"{base}/key", json={"key": "Tab"}).get_json()
        assert data["handled"] is False and data["text"] == "hello world"
    finally:
        webmod._engine = None
        eng.shutdown()

@pytest.mark.e2e
def test_frontend_follow_up_needs_item(tmp_path: Path):
    eng = Engine(flags=ExperimentalFlags(autocomplete=True))
    eng.build(roots=[_seed(tmp_path)], db_dsn="memory://")

    import tabcomplete_ui.web as webmod
    webmod._engine = eng
    try:
        client = flask_app.test_client()
        rv = client.post("/api/surfaces/follow-up/input", json={"text": "important note"})
        assert rv.status_code == 400
        rv = client.post("/api/surfaces/follow-up/key", json={"key": "Enter"})
        assert rv.status_code == 400

        rv = client.post("/api/surfaces/follow-up/input?item_id=notes.txt:1", json={"text": "important note"})
        assert rv.status_code == 200
        rv = client.post("/api/surfaces/follow-up/key?item_id=notes.txt:1", json={"key": "Enter"})
        assert rv.get_json()["submitted"] == "important note"
        assert [fu.text for fu in eng.store.read("notes.txt:1").follow_ups] == ["important note"]
    finally:
        webmod._engine = None
        eng.shutdown()

@pytest.mark.e2e
def test_frontend_cursor_move(tmp_path: Path):
    eng = Engine(flags=ExperimentalFlags(autocomplete=True))
    eng.build(roots=[_seed(tmp_path)], db_dsn="memory://")

    import tabcomplete_ui.web as webmod
    webmod._engine = eng
    try:
        client = flask_app.test_client()
        base = "/api/surfaces/quick-capture"
        data = client.post(f"{base}/input", json={"text": "upg then kub", "cursor": 3}).get_json()
        assert data["state"]["suggestions"] == ["Upgrade"]

        data = client.post(f"{base}/cursor", json={"cursor": 12}).get_json()
        assert data["text"] == "upg then kub" and data["cursor"] == 12
        assert data["state"]["suggestions"] == ["kubernetes"]

        assert client.post(f"{base}/cursor", json={}).status_code == 400
    finally:
        webmod._engine = None
        eng.shutdown()
