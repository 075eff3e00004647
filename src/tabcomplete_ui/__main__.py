from __future__ import annotations
import argparse, json
from tabcomplete import Engine
from tabcomplete.config import DEFAULT_LIMIT, DEFAULT_MIN_CHARS, ExperimentalFlags, env_flags, merge_flags
from tabcomplete.keys import TAB
from tabcomplete.models import KeyEvent

def _print_state(st, as_json: bool) -> None:
    if as_json:
        print(json.dumps(st.to_dict(), ensure_ascii=False, indent=2))
        return
    tok = st.token
    print(f"token {tok.token!r} [{tok.start},{tok.end})  {'open' if st.is_open else 'closed'}")
    if not st.suggestions:
        print("(no suggestions)"); return
    for i, s in enumerate(st.suggestions):
        mark = ">" if i == st.selected_index else " "
        print(f"{mark} {i + 1:<2} {s}")

def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Tab-autocomplete CLI (Engine-backed)")
    p.add_argument("--roots", nargs="+", default=[], help="Folders/files of .txt/.md items (one per line)")
    p.add_argument("--state", default=None, help="Application-state JSON file with items and follow-ups")
    p.add_argument("--db", default=None, help="Item store DSN: sqlite:///path or memory://")
    p.add_argument("--load", action="store_true", help="Attach an existing --db instead of ingesting")
    p.add_argument("--limit", type=int, default=DEFAULT_LIMIT, help="Maximum suggestions")
    p.add_argument("--min-chars", type=int, default=DEFAULT_MIN_CHARS, help="Shortest token that opens suggestions")
    p.add_argument("--disable", action="store_true", help="Turn autocomplete off (suggestions stay closed)")
    p.add_argument("--text", default=None, help="Single text to complete")
    p.add_argument("--cursor", type=int, default=None, help="Caret position in --text (default: end)")
    p.add_argument("--vocab", action="store_true", help="Print the learned vocabulary")
    p.add_argument("--repl", action="store_true", help="Interactive loop after init")
    p.add_argument("--gui", action="store_true", help="Open the desktop window")
    p.add_argument("--json", action="store_true", help="Emit JSON")
    p.add_argument("--verbose", action="store_true")

    args = p.parse_args(argv)

    flags: ExperimentalFlags = env_flags()
    if args.disable:
        flags = merge_flags(flags, {"autocomplete": False})

    if args.gui:
        from .desktop import run
        return run(roots=args.roots, state=args.state, db=args.db, flags=flags)

    eng = Engine(flags=flags, limit=args.limit, min_chars=args.min_chars)
    try:
        if args.load:
            if not args.db:
                p.error("--load requires --db")
            eng.load(db_dsn=args.db, verbose=args.verbose)
        else:
            eng.build(args.roots, state=args.state, db_dsn=args.db, verbose=args.verbose)

        if args.vocab:
            vocab = eng.vocabulary()
            if args.json:
                print(json.dumps(vocab, ensure_ascii=False, indent=2))
            else:
                print("\n".join(vocab) if vocab else "(empty vocabulary)")

        if args.text is not None:
            _print_state(eng.suggest(args.text, args.cursor), args.json)

        if args.repl:
            print("Type text (empty line to exit). The caret sits at the end of the line.")
            surf = eng.surface("quick-capture")
            while True:
                try:
                    line = input("> ")
                except (EOFError, KeyboardInterrupt):
                    break
                if not line:
                    break
                st = surf.set_text(line)
                _print_state(st, args.json)
                res = surf.session.handle_key(KeyEvent(TAB))
                if res.accept is not None:
                    print(f"Tab -> {res.accept.next_value!r}")
        return 0
    finally:
        eng.shutdown()

if __name__ == "__main__":
    raise SystemExit(main())
