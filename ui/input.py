"""Tk event -> host-neutral event conversion, with modifier tracking."""

from __future__ import annotations

import logging
import tkinter as tk
from typing import Final

from controllers.events import Key_Event, Modifiers, Pointer_Event, Wheel_Event

logger = logging.getLogger(__name__)

_KEYSYM_MOD: Final[dict[str, str]] = {
    **dict.fromkeys(("Shift_L", "Shift_R"), "shift"),
    **dict.fromkeys(("Control_L", "Control_R"), "ctrl"),
    **dict.fromkeys(("Alt_L", "Alt_R", "Option_L", "Option_R", "ISO_Level3_Shift"), "alt"),
    **dict.fromkeys(("Meta_L", "Meta_R", "Super_L", "Super_R", "Command"), "meta"),
}
_MOD_NAMES: Final = ("shift", "ctrl", "alt", "meta")

# Tk `state` bits; alt is 0x8 on X11 and 0x20000 on win32
_STATE_BITS: Final = (("shift", 0x0001), ("ctrl", 0x0004), ("alt", 0x0008 | 0x20000))
_AQUA_COMMAND: Final = 0x0010

_PRESS: Final = {"KeyPress", "2"}
_RELEASE: Final = {"KeyRelease", "3"}

# X11 reports wheel motion as buttons 4 (up) and 5 (down)
_X11_WHEEL_UP: Final = 4
_X11_WHEEL_DOWN: Final = 5


class Modifier_Tracker:
    """Modifier keys currently held; Tk's `state` mask lags on key events and rarely reports Command."""

    def __init__(self) -> None:
        self.held: set[str] = set()
        self.aqua: bool | None = None

    def feed(self, evt: tk.Event) -> None:
        mod = _KEYSYM_MOD.get(getattr(evt, "keysym", ""))
        if mod is None:
            return
        kind = str(getattr(evt, "type", ""))
        if kind in _PRESS:
            self.held.add(mod)
        elif kind in _RELEASE:
            self.held.discard(mod)

    def learn_platform(self, evt: tk.Event) -> None:
        if self.aqua is not None:
            return
        widget = getattr(evt, "widget", None)
        if widget is None or isinstance(widget, str):
            return
        try:
            self.aqua = widget.tk.call("tk", "windowingsystem") == "aqua"
        except tk.TclError as xcp:
            logger.debug("windowing system unknown: %s", xcp)

    def modifiers(self, state: int = 0) -> Modifiers:
        on = set(self.held)
        on.update(name for name, bits in _STATE_BITS if state & bits)
        if self.aqua and state & _AQUA_COMMAND:
            on.add("meta")
        return Modifiers(**{name: name in on for name in _MOD_NAMES})

    def clear(self) -> None:
        self.held.clear()


_tracker = Modifier_Tracker()


def handle_key_event(evt: tk.Event) -> None:
    _tracker.learn_platform(evt)
    _tracker.feed(evt)


def reset_mods() -> None:
    """Forget held keys; releases are lost while the window is unfocused."""
    _tracker.clear()


def get_mods(evt: tk.Event) -> Modifiers:
    handle_key_event(evt)
    return _tracker.modifiers(int(getattr(evt, "state", 0) or 0))


# ---- conversion ----
def to_pointer(evt: tk.Event, button: int | None = None) -> Pointer_Event:
    if button is None:
        num = getattr(evt, "num", None)
        button = num if isinstance(num, int) else 1
    return Pointer_Event(x=float(evt.x), y=float(evt.y), button=button, mods=get_mods(evt))


def to_wheel(evt: tk.Event, canvas: tk.Misc) -> Wheel_Event:
    """Normalise <MouseWheel> (delta) and X11 <Button-4/5> into one event."""
    num = getattr(evt, "num", None)
    if num in (_X11_WHEEL_UP, _X11_WHEEL_DOWN):
        down = num == _X11_WHEEL_DOWN
    else:
        down = int(getattr(evt, "delta", 0) or 0) < 0
    over = canvas.winfo_containing(evt.x_root, evt.y_root) is canvas
    return Wheel_Event(x=float(evt.x), y=float(evt.y), down=down, over_canvas=over, mods=get_mods(evt))


def to_key(evt: tk.Event) -> Key_Event:
    return Key_Event(key=getattr(evt, "keysym", "") or "", mods=get_mods(evt))
