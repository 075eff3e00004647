import json
from pathlib import Path
import pytest
from tabcomplete_ui.__main__ import main

def _seed(tmp: Path) -> str:
    root = tmp / "Queue"; root.mkdir()
    (root / "notes.txt").write_text("Deploy kube-proxy\nCheck Kubelet logs\n", encoding="utf-8")
    return str(root)

@pytest.mark.e2e
def test_cli_text_json(tmp_path: Path, capsys):
    assert main(["--roots", _seed(tmp_path), "--text", "restart kub", "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["suggestions"] == ["kube-proxy", "Kubelet"]
    assert data["is_open"] is True

@pytest.mark.e2e
def test_cli_vocab_and_disable(tmp_path: Path, capsys):
    assert main(["--roots", _seed(tmp_path), "--vocab", "--disable", "--text", "kub"]) == 0
    out = capsys.readouterr().out
    assert "Kubelet" in out
    assert "closed" in out and "(no suggestions)" in out

@pytest.mark.e2e
def test_cli_repl(tmp_path: Path, capsys, monkeypatch):
    lines = iter(["fix kub", ""])
    monkeypatch.setattr("builtins.input", lambda _prompt="": next(lines))
    assert main(["--roots", _seed(tmp_path), "--repl"]) == 0
    assert "Tab -> 'fix kube-proxy'" in capsys.readouterr().out

def test_cli_load_requires_db():
    with pytest.raises(SystemExit):
        main(["--load"])
