"""Host-neutral input events, in screen coordinates."""

from __future__ import annotations

from dataclasses import dataclass, field

from models.world import Point


@dataclass(frozen=True, slots=True)
class Modifiers:
    shift: bool = False
    ctrl: bool = False
    alt: bool = False
    meta: bool = False

    @property
    def command(self) -> bool:
        """Ctrl on most platforms, Cmd on macOS."""
        return self.ctrl or self.meta


@dataclass(frozen=True, slots=True)
class Pointer_Event:
    x: float
    y: float
    button: int = 1
    mods: Modifiers = field(default_factory=Modifiers)

    @property
    def p(self) -> Point:
        return Point(x=self.x, y=self.y)


@dataclass(frozen=True, slots=True)
class Wheel_Event:
    x: float
    y: float
    down: bool
    over_canvas: bool = True
    mods: Modifiers = field(default_factory=Modifiers)


@dataclass(frozen=True, slots=True)
class Key_Event:
    key: str
    mods: Modifiers = field(default_factory=Modifiers)
