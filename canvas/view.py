"""World <-> screen mapping."""

from __future__ import annotations

from typing import Final

from models.world import Point, clamp

MIN_ZOOM: Final = 0.5
MAX_ZOOM: Final = 2.5
ZOOM_STEP: Final = 0.1


class View_Transform:
    """Affine world/screen mapping: screen = world * zoom + pan."""

    def __init__(self, pan: Point | None = None, zoom: float = 1.0) -> None:
        self.pan: Point = pan or Point()
        self.zoom: float = clamp(zoom, MIN_ZOOM, MAX_ZOOM)

    def world_to_screen(self, p: Point) -> Point:
        """Map a world point onto the drawing surface.

        Args;
            p: World-space point.

        Returns;
            The screen-space point.
        """
        return Point(x=p.x * self.zoom + self.pan.x, y=p.y * self.zoom + self.pan.y)

    def screen_to_world(self, p: Point) -> Point:
        """Map a pointer position back into world space.

        Args;
            p: Screen-space point.

        Returns;
            The world-space point.
        """
        return Point(x=(p.x - self.pan.x) / self.zoom, y=(p.y - self.pan.y) / self.zoom)

    def set_zoom(self, z: float) -> float:
        self.zoom = clamp(z, MIN_ZOOM, MAX_ZOOM)
        return self.zoom

    def adjust_zoom(self, delta: float) -> float:
        # rounding keeps repeated 0.1 steps from drifting off the decimal grid
        return self.set_zoom(round(self.zoom + delta, 10))

    def set_pan(self, x: float, y: float) -> None:
        self.pan = Point(x=x, y=y)

    def pan_from(self, anchor_pan: Point, anchor_pointer: Point, pointer: Point) -> None:
        """Set pan for an in-progress pan gesture."""
        self.set_pan(anchor_pan.x + (pointer.x - anchor_pointer.x), anchor_pan.y + (pointer.y - anchor_pointer.y))

    def reset(self) -> None:
        self.pan = Point()
        self.zoom = 1.0
