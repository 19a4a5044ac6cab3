from __future__ import annotations

import tkinter as tk
from collections.abc import Callable
from dataclasses import dataclass
from tkinter import ttk

from models.world import Time_Layer


@dataclass
class Header_Handles:
    frame: ttk.Frame
    name_var: tk.StringVar
    layer_var: tk.StringVar
    pan_var: tk.BooleanVar
    zoom_var: tk.StringVar
    undo: ttk.Button
    redo: ttk.Button


@dataclass
class Header_Actions:
    on_undo: Callable[[], None]
    on_redo: Callable[[], None]
    on_layer: Callable[[str], None]
    on_pan_mode: Callable[[bool], None]
    on_zoom_in: Callable[[], None]
    on_zoom_out: Callable[[], None]
    on_reset_view: Callable[[], None]
    on_add: Callable[[], None]
    on_template: Callable[[], None]
    on_notes: Callable[[], None]
    on_open: Callable[[], None]
    on_save: Callable[[], None]
    on_export: Callable[[], None]
    on_clear: Callable[[], None]
    on_rename: Callable[[str], None]


def _add_labeled(master: ttk.Frame, make_widget, text: str = "", right_label: bool = False):
    f = ttk.Frame(master)
    if not right_label and text:
        ttk.Label(f, text=text).pack(side="left")
    w = make_widget(f)
    w.pack(side="left")
    if right_label and text:
        ttk.Label(f, text=text).pack(side="left")
    f.pack(side="left", padx=4)
    return w


def create_header(master, actions: Header_Actions, *, name: str, layer: Time_Layer) -> Header_Handles:
    """Builds the header strip and returns handles."""
    frame = ttk.Frame(master, padding=(4, 4))
    frame.pack(fill="x", side="top")

    name_var = tk.StringVar(value=name)
    entry = _add_labeled(frame, lambda p: ttk.Entry(p, textvariable=name_var, width=24), "Name:")
    entry.bind("<Return>", lambda _e: actions.on_rename(name_var.get()))
    entry.bind("<FocusOut>", lambda _e: actions.on_rename(name_var.get()))

    # Layers
    layer_var = tk.StringVar(value=layer.value)
    for t in Time_Layer:
        _add_labeled(
            frame,
            lambda p, t=t: ttk.Radiobutton(
                p,
                text=t.value.title(),
                value=t.value,
                variable=layer_var,
                command=lambda: actions.on_layer(layer_var.get()),
            ),
        )

    ttk.Separator(frame, orient="vertical").pack(side="left", fill="y", padx=4)

    # History
    undo = _add_labeled(frame, lambda p: ttk.Button(p, text="Undo", command=actions.on_undo))
    redo = _add_labeled(frame, lambda p: ttk.Button(p, text="Redo", command=actions.on_redo))

    # View
    pan_var = tk.BooleanVar(value=False)
    _add_labeled(
        frame,
        lambda p: ttk.Checkbutton(p, text="Pan", variable=pan_var, command=lambda: actions.on_pan_mode(pan_var.get())),
    )
    _add_labeled(frame, lambda p: ttk.Button(p, text="−", width=3, command=actions.on_zoom_out))
    zoom_var = tk.StringVar(value="100%")
    _add_labeled(frame, lambda p: ttk.Label(p, textvariable=zoom_var, width=5, anchor="center"))
    _add_labeled(frame, lambda p: ttk.Button(p, text="+", width=3, command=actions.on_zoom_in))
    _add_labeled(frame, lambda p: ttk.Button(p, text="Reset view", command=actions.on_reset_view))

    ttk.Separator(frame, orient="vertical").pack(side="left", fill="y", padx=4)

    # Document
    _add_labeled(frame, lambda p: ttk.Button(p, text="Add member…", command=actions.on_add))
    _add_labeled(frame, lambda p: ttk.Button(p, text="Family template", command=actions.on_template))
    _add_labeled(frame, lambda p: ttk.Button(p, text="Notes…", command=actions.on_notes))
    _add_labeled(frame, lambda p: ttk.Button(p, text="Open…", command=actions.on_open))
    _add_labeled(frame, lambda p: ttk.Button(p, text="Save…", command=actions.on_save))
    _add_labeled(frame, lambda p: ttk.Button(p, text="Export…", command=actions.on_export))
    _add_labeled(frame, lambda p: ttk.Button(p, text="Clear", command=actions.on_clear))

    return Header_Handles(
        frame=frame,
        name_var=name_var,
        layer_var=layer_var,
        pan_var=pan_var,
        zoom_var=zoom_var,
        undo=undo,
        redo=redo,
    )
