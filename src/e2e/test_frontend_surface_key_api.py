from pathlib import Path
import pytest
from tabcomplete.config import ExperimentalFlags
from tabcomplete.engine import Engine
from tabcomplete_ui.web import app as flask_app

def _seed(tmp: Path) -> str:
    root = tmp / "Queue"; root.mkdir()
    (root / "notes.txt").write_text("Deploy kube-proxy\nCheck Kubelet logs\n", encoding="utf-8")
    return str(root)

@pytest.mark.e2e
def test_frontend_surface_key_api(tmp_path: Path):
    eng = Engine(flags=ExperimentalFlags(autocomplete=True))
    eng.build(roots=[_seed(tmp_path)], db_dsn="memory://")

    import tabcomplete_ui.web as webmod
    webmod._engine = eng
    try:
        client = flask_app.test_client()
        base = "/api/surfaces/quick-capture"

        rv = client.post(f"{base}/input", json={"text": "restart kub"})
        assert rv.status_code == 200
        assert rv.get_json()["state"]["is_open"] is True

        rv = client.post(f"{base}/key", json={"key": "ArrowDown"})
        assert rv.get_json()["state"]["selected_index"] == 1

        rv = client.post(f"{base}/key", json={"key": "Tab"})
        data = rv.get_json()
        assert data["handled"] is True and data["action"] == "accept"
        assert data["accept"]["accepted"] == "Kubelet"
        assert (data["text"], data["cursor"]) == ("restart Kubelet", 15)

        rv = client.post(f"{base}/key", json={"key": "Enter", "ctrl": True})
        data = rv.get_json()
        assert data["submitted"] == "restart Kubelet" and data["text"] == ""
        assert eng.store.count() == 3

        rv = client.post(f"{base}/key", json={"key": "a"})
        assert rv.get_json()["handled"] is False
    finally:
        webmod._engine = None
        eng.shutdown()

@pytest.mark.e2e
def test_frontend_surface_errors(tmp_path: Path):
    eng = Engine()
    eng.build(roots=[_seed(tmp_path)])

    import tabcomplete_ui.web as webmod
    webmod._engine = eng
    try:
        client = flask_app.test_client()
        assert client.post("/api/surfaces/sidebar/input", json={"text": "x"}).status_code == 404
        assert client.post("/api/surfaces/quick-capture/key", json={"shift": True}).status_code == 400
        assert client.post("/api/surfaces/quick-capture/input", json={}).status_code == 400
    finally:
        webmod._engine = None
        eng.shutdown()
