from __future__ import annotations

import tkinter as tk
from tkinter import ttk


class Status:
    """
    Bottom status line.
        - set(text): the base description on the left (layer, counts, mode hint)
        - flash(text, ms): replaces the base briefly ("Saved family.json")
        - flag(key, text) / unflag(key): persistent conditions on the right
    """

    FLASH_MS = 1800
    SEP = "   "

    def __init__(self, root: tk.Misc):
        self.var = tk.StringVar(value="")
        self._root = root
        self._base = ""
        self._flash = ""
        self._flash_job: str | None = None
        self._flags: dict[str, str] = {}

    def set(self, text: str):
        self._base = text
        self._render()

    def flash(self, text: str, ms: int = FLASH_MS):
        if self._flash_job is not None:
            self._root.after_cancel(self._flash_job)
        self._flash = text
        self._flash_job = self._root.after(ms, self._end_flash)
        self._render()

    def flag(self, key: str, text: str):
        if self._flags.get(key) != text:
            self._flags[key] = text
            self._render()

    def unflag(self, key: str):
        if self._flags.pop(key, None) is not None:
            self._render()

    def _end_flash(self):
        self._flash_job = None
        self._flash = ""
        self._render()

    def _render(self):
        left = self._flash or self._base
        right = self.SEP.join(self._flags.values())
        self.var.set(f"{left}{self.SEP}[{right}]" if right else left)


def create_status(master: tk.Misc, status: Status) -> tk.Widget:
    bar = ttk.Label(master, textvariable=status.var, anchor="w", padding=(8, 2))
    bar.pack(fill="x", side="bottom")
    return bar
