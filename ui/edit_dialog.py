from __future__ import annotations

import tkinter as tk
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from tkinter import messagebox, simpledialog, ttk
from typing import Any

from models.catalogue import EMOTIONS, Emotion, Generation
from models.colour import Colours
from models.styling import CONNECTION_STYLES, Connection_Type
from models.world import Connection
from ui.palette import Colour_Palette

EMOTION_COLUMNS = 5
TEXT_ROWS = 4


class EKind(StrEnum):
    STR = "str"
    TEXT = "text"
    CHOICE = "choice"
    COLOUR = "colour"


@dataclass(frozen=True)
class Field_Spec:
    name: str
    label: str | None = None
    kind: EKind = EKind.STR
    required: bool = False
    # label -> value; a callable is resolved when the form opens
    choices: Mapping[str, Any] | Callable[[], Mapping[str, Any]] | None = None

    @property
    def title(self) -> str:
        return self.label or self.name

    def options(self) -> dict[str, Any]:
        src = self.choices() if callable(self.choices) else self.choices
        return dict(src or {})


def generation_choices() -> dict[str, Generation]:
    return {g.label: g for g in Generation}


class Generic_Edit_Dialog(simpledialog.Dialog):
    """Form built from a list of Field_Spec.

    `result` holds {field name: value} after OK, or None if cancelled.
    Readers raise ValueError for bad input; the first one is shown and the form stays open.
    """

    def __init__(
        self,
        parent: tk.Misc,
        title: str,
        schema: Sequence[Field_Spec],
        values: Mapping[str, Any] | None = None,
    ):
        self.schema = list(schema)
        self.values: dict[str, Any] = dict(values or {})
        self.widgets: dict[str, tk.Widget] = {}
        self._vars: dict[str, tk.StringVar] = {}
        self._options: dict[str, dict[str, Any]] = {}
        self._collected: dict[str, Any] | None = None
        self.result: dict[str, Any] | None = None
        super().__init__(parent, title)

    def body(self, master: tk.Frame) -> tk.Widget:
        master.grid_columnconfigure(1, weight=1)
        builders: dict[EKind, Callable[[tk.Widget, Field_Spec, Any], tk.Widget]] = {
            EKind.STR: self._entry,
            EKind.TEXT: self._text,
            EKind.CHOICE: self._choice,
            EKind.COLOUR: self._colour,
        }
        for row, fld in enumerate(self.schema):
            ttk.Label(master, text=fld.title).grid(row=row, column=0, sticky="nw", padx=6, pady=4)
            w = builders[fld.kind](master, fld, self.values.get(fld.name))
            w.grid(row=row, column=1, sticky="ew", padx=6, pady=4)
            self.widgets[fld.name] = w
        return next(iter(self.widgets.values()), master)

    def buttonbox(self):
        box = ttk.Frame(self)
        ttk.Button(box, text="OK", command=self.ok).pack(side="left", padx=5, pady=5)
        ttk.Button(box, text="Cancel", command=self.cancel).pack(side="left", padx=5, pady=5)
        box.pack(fill="x")
        self.bind("<Return>", lambda e: self.ok())
        self.bind("<Escape>", lambda e: self.cancel())

    def validate(self) -> bool:
        readers: dict[EKind, Callable[[Field_Spec], Any]] = {
            EKind.STR: self._read_var,
            EKind.TEXT: self._read_text,
            EKind.CHOICE: self._read_choice,
            EKind.COLOUR: self._read_var,
        }
        try:
            out = {fld.name: self._checked(fld, readers[fld.kind](fld)) for fld in self.schema}
        except ValueError as xcp:
            messagebox.showerror("Invalid input", str(xcp), parent=self)
            return False
        self._collected = out
        return True

    def apply(self):
        self.result = self._collected

    @staticmethod
    def _checked(fld: Field_Spec, value: Any) -> Any:
        if fld.required and value in ("", None):
            raise ValueError(f"{fld.title} is required")
        return value

    # ---- builders ----
    def _entry(self, parent: tk.Widget, fld: Field_Spec, init: Any) -> tk.Widget:
        var = self._vars[fld.name] = tk.StringVar(value="" if init is None else str(init))
        return ttk.Entry(parent, textvariable=var, width=34)

    def _text(self, parent: tk.Widget, fld: Field_Spec, init: Any) -> tk.Widget:
        txt = tk.Text(parent, height=TEXT_ROWS, width=40, wrap="word")
        if init:
            txt.insert("1.0", str(init))
        return txt

    def _choice(self, parent: tk.Widget, fld: Field_Spec, init: Any) -> tk.Widget:
        options = self._options[fld.name] = fld.options()
        labels = list(options)
        current = next((k for k, v in options.items() if v == init), labels[0] if labels else "")
        var = self._vars[fld.name] = tk.StringVar(value=current)
        return ttk.Combobox(parent, values=labels, textvariable=var, state="readonly", width=32)

    def _colour(self, parent: tk.Widget, fld: Field_Spec, init: Any) -> tk.Widget:
        var = self._vars[fld.name] = tk.StringVar(value=str(init or ""))
        return Colour_Palette(parent, Colours.palette(), on_select=var.set, selected=var.get())

    # ---- readers ----
    def _read_var(self, fld: Field_Spec) -> str:
        return self._vars[fld.name].get().strip()

    def _read_text(self, fld: Field_Spec) -> str:
        return self.widgets[fld.name].get("1.0", "end-1c").strip()  # pyright: ignore

    def _read_choice(self, fld: Field_Spec) -> Any:
        label = self._vars[fld.name].get()
        try:
            return self._options[fld.name][label]
        except KeyError:
            raise ValueError(f"{fld.title}: pick one of the listed options") from None


class Emotion_Picker(simpledialog.Dialog):
    """Grid of emotion glyphs. `result` is the chosen glyph, "" to clear, or None on cancel."""

    def __init__(self, parent: tk.Misc, current: str | None = None):
        self.current = current
        self.result: str | None = None
        super().__init__(parent, "Choose emotion")

    def body(self, master: tk.Frame) -> tk.Widget:
        first: tk.Widget = master
        for i, emo in enumerate(EMOTIONS):
            btn = ttk.Button(master, text=f"{emo.glyph}\n{emo.name}", width=12, command=lambda e=emo: self._pick(e))
            btn.grid(row=i // EMOTION_COLUMNS, column=i % EMOTION_COLUMNS, padx=3, pady=3)
            if emo.glyph == self.current or i == 0:
                first = btn
        return first

    def buttonbox(self):
        box = ttk.Frame(self)
        ttk.Button(box, text="No emotion", command=self._clear).pack(side="left", padx=5, pady=5)
        ttk.Button(box, text="Cancel", command=self.cancel).pack(side="left", padx=5, pady=5)
        box.pack(fill="x")
        self.bind("<Escape>", lambda e: self.cancel())

    def _pick(self, emo: Emotion) -> None:
        self.result = emo.glyph
        self.cancel()

    def _clear(self) -> None:
        self.result = ""
        self.cancel()


class Connections_Dialog(simpledialog.Dialog):
    """One row per bond: label, type combobox, Delete. Changes apply immediately.

    Args;
        rows: returns the current (connection, "A -> B") pairs; called again after a delete.
        on_type: called with (connection id, new type) when a combobox changes.
        on_delete: called with the connection id.
    """

    def __init__(
        self,
        parent: tk.Misc,
        title: str,
        rows: Callable[[], Sequence[tuple[Connection, str]]],
        on_type: Callable[[int, Connection_Type], Any],
        on_delete: Callable[[int], Any],
    ):
        self.rows = rows
        self.on_type = on_type
        self.on_delete = on_delete
        self._labels = {style.label: kind for kind, style in CONNECTION_STYLES.items()}
        self._vars: list[tk.StringVar] = []
        self._table: ttk.Frame | None = None
        super().__init__(parent, title)

    def body(self, master: tk.Frame) -> tk.Widget:
        self._table = ttk.Frame(master)
        self._table.pack(fill="both", expand=True)
        self._fill()
        return self._table

    def buttonbox(self):
        box = ttk.Frame(self)
        ttk.Button(box, text="Close", command=self.cancel).pack(side="left", padx=5, pady=5)
        box.pack(fill="x")
        self.bind("<Escape>", lambda e: self.cancel())

    def _fill(self) -> None:
        assert self._table is not None
        for child in self._table.winfo_children():
            child.destroy()
        self._vars.clear()
        rows = list(self.rows())
        if not rows:
            ttk.Label(self._table, text="No bonds yet.").grid(row=0, column=0, padx=6, pady=4)
            return
        labels = list(self._labels)
        for row, (conn, text) in enumerate(rows):
            ttk.Label(self._table, text=text).grid(row=row, column=0, sticky="w", padx=6, pady=4)
            var = tk.StringVar(value=CONNECTION_STYLES[conn.type].label)
            self._vars.append(var)
            box = ttk.Combobox(self._table, values=labels, textvariable=var, state="readonly", width=20)
            box.grid(row=row, column=1, padx=6, pady=4)
            box.bind("<<ComboboxSelected>>", lambda e, cid=conn.id, v=var: self.on_type(cid, self._labels[v.get()]))
            ttk.Button(self._table, text="Delete", command=lambda cid=conn.id: self._delete(cid)).grid(
                row=row, column=2, padx=6, pady=4
            )

    def _delete(self, conn_id: int) -> None:
        self.on_delete(conn_id)
        self._fill()
