from __future__ import annotations
import argparse
import logging
import os
import secrets
import uuid
from flask import Flask, request, jsonify, Response, session
from tabcomplete.engine import Engine
from tabcomplete.config import DEFAULT_LIMIT, env_flags, merge_flags
from tabcomplete.keys import key_event_from_dict
from tabcomplete.surface import SURFACE_KINDS, InputSurface

log = logging.getLogger(__name__)

app = Flask(__name__)
# signs the per-browser client id cookie; set it to keep ids across restarts
app.secret_key = os.environ.get("TABCOMPLETE_SECRET_KEY") or secrets.token_hex(16)
_engine: Engine | None = None

def _eng() -> Engine:
    if _engine is None:
        raise RuntimeError("Engine not initialized")
    return _engine

def _body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}

def _client_id() -> str:
    client = session.get("client")
    if not isinstance(client, str):
        client = uuid.uuid4().hex
        session["client"] = client
    return client

def _surface(kind: str) -> InputSurface:
    if kind not in SURFACE_KINDS:
        raise KeyError(kind)
    item_id = request.args.get("item_id") or _body().get("item_id")
    return _eng().surface(kind, item_id=item_id, client=_client_id())

def _surface_payload(surf: InputSurface, **extra) -> dict:
    out = {"kind": surf.kind, "text": surf.text, "cursor": surf.cursor, "state": surf.state.to_dict()}
    out.update(extra)
    return out

# ---------- errors ----------
@app.errorhandler(KeyError)
def _not_found(exc: KeyError):
    return jsonify({"error": f"not found: {exc.args[0] if exc.args else ''}"}), 404

@app.errorhandler(ValueError)
def _bad_request(exc: ValueError):
    return jsonify({"error": str(exc)}), 400

@app.errorhandler(RuntimeError)
def _unavailable(exc: RuntimeError):
    log.warning("request failed: %s", exc)
    return jsonify({"error": str(exc)}), 503

# ---------- API ----------
@app.get("/api/health")
def api_health():
    return jsonify({"ok": _engine is not None})

@app.get("/api/vocabulary")
def api_vocabulary():
    return jsonify(_eng().vocabulary())

@app.get("/api/suggest")
def api_suggest():
    text = request.args.get("text", "", type=str)
    cursor = request.args.get("cursor", None, type=int)
    limit = request.args.get("limit", DEFAULT_LIMIT, type=int)
    st = _eng().suggest(text, cursor, limit=limit)
    return jsonify(st.to_dict())

@app.post("/api/surfaces/<kind>/input")
def api_surface_input(kind: str):
    data = _body()
    text = data.get("text")
    if not isinstance(text, str):
        raise ValueError("'text' is required")
    cursor = data.get("cursor")
    eng = _eng()
    with eng.lock:
        surf = _surface(kind)
        surf.set_text(text, cursor if isinstance(cursor, int) else None)
        return jsonify(_surface_payload(surf))

@app.post("/api/surfaces/<kind>/cursor")
def api_surface_cursor(kind: str):
    cursor = _body().get("cursor")
    if not isinstance(cursor, int):
        raise ValueError("'cursor' is required")
    eng = _eng()
    with eng.lock:
        surf = _surface(kind)
        surf.move_cursor(cursor)
        return jsonify(_surface_payload(surf))

@app.post("/api/surfaces/<kind>/key")
def api_surface_key(kind: str):
    event = key_event_from_dict(_body())
    eng = _eng()
    with eng.lock:
        surf = _surface(kind)
        res = surf.key(event)
        accept = None
        if res.accept is not None:
            accept = {"next_value": res.accept.next_value, "next_cursor": res.accept.next_cursor,
                      "accepted": res.accept.accepted}
        return jsonify(_surface_payload(surf, handled=res.handled, action=res.action,
                                        accept=accept, submitted=res.submitted))

@app.post("/api/items")
def api_add_item():
    item = _eng().add_item(_body().get("text") or "")
    return jsonify({"id": item.id, "text": item.text}), 201

@app.post("/api/items/<item_id>/follow-ups")
def api_add_follow_up(item_id: str):
    item = _eng().add_follow_up(item_id, _body().get("text") or "")
    return jsonify({"id": item.id, "follow_ups": [fu.text for fu in item.follow_ups]}), 201

# ---------- UI ----------
@app.get("/")
def home():
    # A tiny page: the textarea is the quick-capture surface, the popover mirrors its state.
    html = r"""
<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width,initial-scale=1" />
<title>Queue • Tab autocomplete</title>
<style>
:root{
  --bg:#050805; --panel:#0a120a; --ink:#b8f5b8; --muted:#5f8f5f;
  --accent:#39ff14; --border:#163016; --sel:rgba(57,255,20,.18);
}
*{box-sizing:border-box}
body{ margin:0; background:var(--bg); color:var(--ink);
  font:15px/1.45 ui-monospace,SFMono-Regular,Menlo,Consolas,"Liberation Mono",monospace; }
.container{ max-width:820px; margin:24px auto; padding:0 16px; }
.card{ background:var(--panel); border:1px solid var(--border); border-radius:12px; padding:18px; }
h1{ font-size:18px; margin:0 0 10px 0; }
.wrap{ position:relative; }
textarea{ width:100%; min-height:96px; padding:12px; border-radius:8px; border:1px solid var(--border);
  background:#030603; color:var(--ink); font:inherit; outline:none; resize:vertical; }
textarea:focus{ border-color:var(--accent) }
.popover{ display:none; margin-top:6px; border:1px solid var(--border); border-radius:8px; overflow:hidden; }
.opt{ padding:6px 10px; }
.opt.selected{ background:var(--sel); color:var(--accent); }
.hint{ padding:4px 10px; color:var(--muted); font-size:12px; border-top:1px solid var(--border); }
.meta{ color:var(--muted); font-size:12px; margin-top:8px; }
ul{ padding-left:18px; }
kbd{ border:1px solid var(--border); padding:0 5px; border-radius:4px; }
</style>
</head>
<body>
  <div class="container">
    <div class="card">
      <h1>&gt; Quick capture</h1>
      <div class="wrap">
        <textarea id="q" role="combobox" aria-autocomplete="list" aria-expanded="false"
          placeholder="Type a discussion point... (Ctrl/Cmd+Enter to add)" spellcheck="false" autofocus></textarea>
        <div id="pop" class="popover" role="listbox" aria-label="Autocomplete suggestions"></div>
      </div>
      <div class="meta"><kbd>Tab</kbd> accept • <kbd>Shift+Tab</kbd>/<kbd>↑</kbd><kbd>↓</kbd> cycle •
        <kbd>Esc</kbd> dismiss (again to clear) • <kbd>Ctrl+Enter</kbd> add</div>
      <ul id="items"></ul>
    </div>
  </div>

<script>
const q = document.querySelector("#q"), pop = document.querySelector("#pop"), items = document.querySelector("#items");
const SURFACE = "/api/surfaces/quick-capture";
let state = { is_open:false, suggestions:[], selected_index:0 };

function render(st){
  state = st;
  q.setAttribute("aria-expanded", st.is_open ? "true" : "false");
  if(!st.is_open || st.suggestions.length === 0){ pop.style.display = "none"; pop.innerHTML = ""; return; }
  pop.style.display = "block";
  pop.innerHTML = st.suggestions.map((s,i)=>
    `<div class="opt ${i===st.selected_index?"selected":""}" role="option" aria-selected="${i===st.selected_index}">${s.replace(/[&<>]/g, c=>({"&":"&amp;","<":"&lt;",">":"&gt;"}[c]))}</div>`
  ).join("") + `<div class="hint">Tab to accept</div>`;
}

async function post(path, body){
  const resp = await fetch(path, { method:"POST", headers:{"Content-Type":"application/json"}, body:JSON.stringify(body) });
  return resp.json();
}

async function sync(){
  const data = await post(`${SURFACE}/input`, { text:q.value, cursor:q.selectionStart ?? q.value.length });
  render(data.state);
}

async function moveCaret(){
  const data = await post(`${SURFACE}/cursor`, { cursor:q.selectionStart ?? q.value.length });
  render(data.state);
}

q.addEventListener("input", sync);
q.addEventListener("keyup", (ev)=>{ if(ev.key.startsWith("Arrow") && !state.is_open) moveCaret(); });
q.addEventListener("click", moveCaret);
q.addEventListener("keydown", async (ev)=>{
  const open = state.is_open;
  const acKey = open && (ev.key === "Escape" || ev.key === "Tab" || ev.key === "ArrowDown" || ev.key === "ArrowUp");
  const hostKey = ev.key === "Escape" || (ev.key === "Enter" && (ev.ctrlKey || ev.metaKey));
  if(!acKey && !hostKey) return;
  ev.preventDefault();
  const sent = q.value;
  const data = await post(`${SURFACE}/key`, { key:ev.key, shift:ev.shiftKey, ctrl:ev.ctrlKey, meta:ev.metaKey });
  if(data.submitted){
    const li = document.createElement("li"); li.textContent = data.submitted; items.prepend(li);
  }
  // typed while the request was in flight: keep the newer text, resync from it
  if(q.value !== sent){ sync(); return; }
  if(data.text !== q.value){ q.value = data.text; }
  q.setSelectionRange(data.cursor, data.cursor);
  render(data.state);
});
</script>
</body>
</html>
"""
    return Response(html, mimetype="text/html")

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Run Flask UI on top of Engine")
    ap.add_argument("--roots", nargs="+", default=[])
    ap.add_argument("--state", default=None)
    ap.add_argument("--db", dest="db", default=None)  # DSN: "sqlite:///path" or "memory://"
    ap.add_argument("--load", action="store_true")
    ap.add_argument("--disable", action="store_true")
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=8000)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    flags = env_flags()
    if args.disable:
        flags = merge_flags(flags, {"autocomplete": False})

    global _engine
    _engine = Engine(flags=flags)
    if args.load:
        if not args.db:
            ap.error("--load requires --db")
        _engine.load(db_dsn=args.db, verbose=args.verbose)
    else:
        _engine.build(args.roots, state=args.state, db_dsn=args.db, verbose=args.verbose)

    try:
        app.run(host=args.host, port=args.port, debug=args.verbose)
    finally:
        _engine.shutdown()
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
