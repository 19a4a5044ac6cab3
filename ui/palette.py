from __future__ import annotations

import tkinter as tk
from collections.abc import Callable, Iterable
from tkinter import ttk

from models.colour import Colour, Colours, normalise_hex

SWATCH = 22


class Colour_Palette(ttk.Frame):
    """Row of colour swatches; clicking one reports its "#RRGGBB"."""

    def __init__(
        self,
        master,
        colours: Iterable[Colour],
        on_select: Callable[[str], None],
        selected: str | None = None,
    ):
        super().__init__(master)
        self._on_select = on_select
        self._swatches: list[tuple[tk.Canvas, str]] = []

        for col in colours:
            sw = tk.Canvas(self, width=SWATCH, height=SWATCH, highlightthickness=0, cursor="hand2")
            sw.configure(highlightbackground=Colours.sys.ink.hex, highlightcolor=Colours.sys.ink.hex)
            sw.create_rectangle(0, 0, SWATCH, SWATCH, outline=Colours.sys.ink.hex, fill=col.hex)
            sw.pack(side="left", padx=2)

            sw.bind("<Button-1>", lambda _e, hexa=col.hex: self._select(hexa))
            self._swatches.append((sw, col.hex))

        if selected:
            self._update_highlight(selected)

    def _select(self, hexa: str):
        self._on_select(hexa)
        self._update_highlight(hexa)

    def _update_highlight(self, selected: str):
        try:
            target = normalise_hex(selected)
        except ValueError:
            target = ""
        for canvas, hexa in self._swatches:
            canvas.configure(highlightthickness=3 if hexa == target else 0)
