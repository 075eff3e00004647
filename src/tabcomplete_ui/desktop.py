# desktop.py
# CustomTkinter desktop host for the tab-autocomplete engine (dark theme).
# - Quick-capture box and a follow-up box, each with its own autocomplete session.
# - Background loading thread (keeps UI responsive).
# - Suggestion popover re-rendered from the session state on every key.

from __future__ import annotations
import logging
import threading
from typing import Dict, List, Optional

import tkinter.messagebox as mb
import customtkinter as ctk

from tabcomplete.config import ExperimentalFlags
from tabcomplete.engine import Engine
from tabcomplete.keys import key_event_from_tk
from tabcomplete.models import AutocompleteState
from tabcomplete.surface import FOLLOW_UP, QUICK_CAPTURE, InputSurface

log = logging.getLogger(__name__)


# -------------------- small helpers --------------------

def shorten(text: str, max_chars: int = 48) -> str:
    """Shorten long item texts neatly for menus."""
    if len(text) <= max_chars:
        return text
    return text[: max_chars - 3] + "..."


def popover_text(state: AutocompleteState) -> str:
    """Plain-text rendering of the suggestion list; empty when closed."""
    if not state.is_open or not state.suggestions:
        return ""
    lines = [("> " if i == state.selected_index else "  ") + s for i, s in enumerate(state.suggestions)]
    lines.append("Tab to accept")
    return "\n".join(lines)


# -------------------- main app --------------------

class QueueApp(ctk.CTk):
    """Dark-themed window: quick capture, item list, and follow-up notes."""

    def __init__(self, roots: List[str], state: Optional[str], db: Optional[str],
                 flags: Optional[ExperimentalFlags] = None) -> None:
        super().__init__()

        ctk.set_appearance_mode("dark")
        ctk.set_default_color_theme("green")

        self.title("Queue")
        self.geometry("760x640")
        self.minsize(640, 520)

        # State
        self.engine = Engine(flags=flags)
        self._loaded = False
        self._loading_thread: Optional[threading.Thread] = None
        self._item_ids: Dict[str, str] = {}     # menu label -> item id

        self.font_title = ctk.CTkFont(size=18, weight="bold")
        self.font_mono = ctk.CTkFont(family="Cascadia Mono, Menlo, Consolas, Courier New", size=13)

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(3, weight=1)

        self._build_header()
        self._build_capture()
        self._build_follow_up()
        self._build_items()

        self.protocol("WM_DELETE_WINDOW", self._on_close)
        self._start_loading(roots, state, db)

    # --------- UI sections ---------

    def _build_header(self) -> None:
        header = ctk.CTkFrame(self, corner_radius=10)
        header.grid(row=0, column=0, sticky="ew", padx=12, pady=(12, 6))
        header.grid_columnconfigure(0, weight=1)
        ctk.CTkLabel(header, text="> Queue", font=self.font_title).grid(row=0, column=0, sticky="w", padx=12, pady=10)
        self.lbl_status = ctk.CTkLabel(header, text="Status: loading…", anchor="e")
        self.lbl_status.grid(row=0, column=1, sticky="e", padx=12, pady=10)

    def _build_capture(self) -> None:
        box = ctk.CTkFrame(self, corner_radius=10)
        box.grid(row=1, column=0, sticky="ew", padx=12, pady=6)
        box.grid_columnconfigure(0, weight=1)

        self.txt_capture = ctk.CTkTextbox(box, height=90, wrap="word", font=self.font_mono)
        self.txt_capture.grid(row=0, column=0, sticky="ew", padx=12, pady=(12, 4))
        self.lbl_capture_pop = ctk.CTkLabel(box, text="", justify="left", anchor="w", font=self.font_mono)
        self.lbl_capture_pop.grid(row=1, column=0, sticky="ew", padx=12)
        ctk.CTkLabel(box, text="Ctrl/Cmd+Enter to add • Esc to clear", anchor="w").grid(
            row=2, column=0, sticky="w", padx=12, pady=(0, 10))

        self.txt_capture.bind("<KeyPress>", self._on_capture_key)
        self.txt_capture.bind("<KeyRelease>", lambda _ev: self._sync_capture())
        self.txt_capture.bind("<ButtonRelease-1>", lambda _ev: self._capture_caret_moved())

    def _build_follow_up(self) -> None:
        box = ctk.CTkFrame(self, corner_radius=10)
        box.grid(row=2, column=0, sticky="ew", padx=12, pady=6)
        box.grid_columnconfigure(1, weight=1)

        self.menu_item = ctk.CTkOptionMenu(box, values=["(no items)"], command=self._on_item_selected)
        self.menu_item.grid(row=0, column=0, padx=(12, 6), pady=(12, 4))
        self.entry_follow = ctk.CTkEntry(box, placeholder_text="Add a follow-up… (Enter)", font=self.font_mono)
        self.entry_follow.grid(row=0, column=1, sticky="ew", padx=(0, 12), pady=(12, 4))
        self.lbl_follow_pop = ctk.CTkLabel(box, text="", justify="left", anchor="w", font=self.font_mono)
        self.lbl_follow_pop.grid(row=1, column=1, sticky="ew", padx=(0, 12), pady=(0, 10))

        self.entry_follow.bind("<KeyPress>", self._on_follow_key)
        self.entry_follow.bind("<KeyRelease>", lambda _ev: self._sync_follow())

    def _build_items(self) -> None:
        frame = ctk.CTkFrame(self, corner_radius=10)
        frame.grid(row=3, column=0, sticky="nsew", padx=12, pady=(6, 12))
        frame.grid_columnconfigure(0, weight=1)
        frame.grid_rowconfigure(0, weight=1)
        self.txt_items = ctk.CTkTextbox(frame, wrap="word", font=self.font_mono)
        self.txt_items.grid(row=0, column=0, sticky="nsew", padx=12, pady=12)
        self.txt_items.configure(state="disabled")

    # --------- loading pipeline (threaded) ---------

    def _start_loading(self, roots: List[str], state: Optional[str], db: Optional[str]) -> None:
        self._loading_thread = threading.Thread(
            target=self._load_worker, args=(roots, state, db), daemon=True
        )
        self._loading_thread.start()

    def _load_worker(self, roots: List[str], state: Optional[str], db: Optional[str]) -> None:
        try:
            self.engine.build(roots, state=state, db_dsn=db)
        except Exception as exc:
            log.exception("Failed to load items")
            self.after(0, lambda: self._on_load_error(exc))
            return
        self.after(0, self._on_load_ok)

    def _on_load_ok(self) -> None:
        self._loaded = True
        self._refresh_items()
        self._set_status(f"{self.engine.store.count()} items • {len(self.engine.vocabulary())} words")
        self.txt_capture.focus_set()

    def _on_load_error(self, exc: Exception) -> None:
        self._set_status("Error while loading items.")
        mb.showerror("Load error", f"Failed to load items.\n{exc}")

    # --------- quick capture ---------

    def _capture_surface(self) -> Optional[InputSurface]:
        return self.engine.surface(QUICK_CAPTURE) if self._loaded else None

    def _capture_cursor(self) -> int:
        return len(self.txt_capture.get("1.0", "insert"))

    def _sync_capture(self) -> None:
        surf = self._capture_surface()
        if surf is None:
            return
        surf.set_text(self.txt_capture.get("1.0", "end-1c"), self._capture_cursor())
        self.lbl_capture_pop.configure(text=popover_text(surf.state))

    def _capture_caret_moved(self) -> None:
        surf = self._capture_surface()
        if surf is None:
            return
        surf.move_cursor(self._capture_cursor())
        self.lbl_capture_pop.configure(text=popover_text(surf.state))

    def _on_capture_key(self, ev):
        surf = self._capture_surface()
        if surf is None:
            return None
        self._sync_capture()
        res = surf.key(key_event_from_tk(ev.keysym, ev.state))
        if not res.handled:
            return None
        if surf.text != self.txt_capture.get("1.0", "end-1c"):
            self.txt_capture.delete("1.0", "end")
            self.txt_capture.insert("1.0", surf.text)
        self.txt_capture.mark_set("insert", f"1.0+{surf.cursor}c")
        self.lbl_capture_pop.configure(text=popover_text(surf.state))
        if res.submitted:
            self._refresh_items()
        return "break"

    # --------- follow-ups ---------

    def _follow_surface(self) -> Optional[InputSurface]:
        item_id = self._item_ids.get(self.menu_item.get())
        if not self._loaded or item_id is None:
            return None
        return self.engine.surface(FOLLOW_UP, item_id=item_id)

    def _sync_follow(self) -> None:
        surf = self._follow_surface()
        if surf is None:
            return
        surf.set_text(self.entry_follow.get(), self.entry_follow.index("insert"))
        self.lbl_follow_pop.configure(text=popover_text(surf.state))

    def _on_follow_key(self, ev):
        surf = self._follow_surface()
        if surf is None:
            return None
        self._sync_follow()
        res = surf.key(key_event_from_tk(ev.keysym, ev.state))
        if not res.handled:
            return None
        self.entry_follow.delete(0, "end")
        self.entry_follow.insert(0, surf.text)
        self.entry_follow.icursor(surf.cursor)
        self.lbl_follow_pop.configure(text=popover_text(surf.state))
        if res.submitted:
            self._refresh_items()
        return "break"

    def _on_item_selected(self, _label: str) -> None:
        self.entry_follow.delete(0, "end")
        self.lbl_follow_pop.configure(text="")

    # --------- misc UI helpers ---------

    def _refresh_items(self) -> None:
        items = self.engine.store.list_items()
        self._item_ids = {f"{i + 1}. {shorten(it.text)}": it.id for i, it in enumerate(items)}
        labels = list(self._item_ids) or ["(no items)"]
        current = self.menu_item.get()
        self.menu_item.configure(values=labels)
        self.menu_item.set(current if current in self._item_ids else labels[-1])

        lines = []
        for it in items:
            lines.append(f"> {it.text}")
            lines.extend(f"    - {fu.text}" for fu in it.follow_ups)
        self.txt_items.configure(state="normal")
        self.txt_items.delete("0.0", "end")
        self.txt_items.insert("end", "\n".join(lines))
        self.txt_items.configure(state="disabled")

    def _set_status(self, text: str) -> None:
        self.lbl_status.configure(text=f"Status: {text}")

    # --------- lifecycle ---------

    def _on_close(self) -> None:
        self.engine.shutdown()
        self.destroy()


def run(roots: Optional[List[str]] = None, state: Optional[str] = None, db: Optional[str] = None,
        flags: Optional[ExperimentalFlags] = None) -> int:
    app = QueueApp(roots or [], state, db, flags=flags)
    app.mainloop()
    return 0


if __name__ == "__main__":
    raise SystemExit(run())
