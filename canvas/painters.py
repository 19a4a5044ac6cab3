"""Canvas painters for grid, connections, and members."""

from __future__ import annotations

import tkinter as tk
from enum import StrEnum

from canvas.scene import EMOTION_OFFSET, NAME_OFFSET, Scene, arrow_head, heading, initials
from models.colour import Colours
from models.styling import style_for
from models.world import GRID, MEMBER_RADIUS, WORLD_HEIGHT, WORLD_WIDTH, Member

GRID_OVERSCAN = 100
SELECT_WIDTH = 3
CONNECTING_DASH = (6, 4)
RUBBER_BAND_DASH = (5, 5)


class Tag(StrEnum):
    grid = "grid"
    connection = "connection"
    member = "member"
    overlay = "overlay"


class Painters:
    """Repaints a tk.Canvas from a Scene. Stateless apart from the canvas."""

    def __init__(self, canvas: tk.Canvas) -> None:
        """Create painters for a canvas.

        Args;
            canvas: The canvas to draw on.
        """
        self.canvas = canvas

    # ------- transform -------
    @staticmethod
    def _xy(scene: Scene, x: float, y: float) -> tuple[float, float]:
        return x * scene.zoom + scene.pan.x, y * scene.zoom + scene.pan.y

    @staticmethod
    def _font(scene: Scene, size: int, bold: bool = False) -> tuple[str, int] | tuple[str, int, str]:
        px = max(1, round(size * scene.zoom))
        return ("Helvetica", -px, "bold") if bold else ("Helvetica", -px)

    # ------- full repaint -------
    def paint(self, scene: Scene) -> None:
        self.canvas.delete("all")
        self.paint_grid(scene)
        self.paint_connections(scene)
        self.paint_members(scene)
        self.paint_rubber_band(scene)

    # ------- grid -------
    def paint_grid(self, scene: Scene) -> None:
        """Paint the background grid over the world bounds."""
        col = Colours.sys.grid.hex
        top = self._xy(scene, 0, -GRID_OVERSCAN)[1]
        bottom = self._xy(scene, 0, WORLD_HEIGHT)[1]
        left = self._xy(scene, -GRID_OVERSCAN, 0)[0]
        right = self._xy(scene, WORLD_WIDTH, 0)[0]
        for i in range(0, WORLD_WIDTH + 1, GRID):
            x = self._xy(scene, i, 0)[0]
            self.canvas.create_line(x, top, x, bottom, fill=col, width=1, tags=Tag.grid)
        for i in range(0, WORLD_HEIGHT + 1, GRID):
            y = self._xy(scene, 0, i)[1]
            self.canvas.create_line(left, y, right, y, fill=col, width=1, tags=Tag.grid)

    # ------- connections -------
    def paint_connections(self, scene: Scene) -> None:
        for conn, a, b in scene.drawable_connections():
            style = style_for(conn.type)
            x1, y1 = self._xy(scene, a.x, a.y)
            x2, y2 = self._xy(scene, b.x, b.y)
            self.canvas.create_line(
                x1,
                y1,
                x2,
                y2,
                fill=style.col.hex,
                width=max(1, style.width * scene.zoom),
                dash=style.dash or "",
                tags=(Tag.connection, f"conn:{conn.id}"),
            )

    # ------- members -------
    def paint_members(self, scene: Scene) -> None:
        for m in scene.members:
            self._paint_member(scene, m)

    def _paint_member(self, scene: Scene, m: Member) -> None:
        ink = Colours.sys.ink.hex
        tags = (Tag.member, f"member:{m.id}")
        cx, cy = self._xy(scene, m.x, m.y)
        r = MEMBER_RADIUS * scene.zoom

        outline, dash = "", ""
        if m.id == scene.connecting_from:
            outline, dash = Colours.sys.connecting.hex, CONNECTING_DASH
        elif m.id == scene.selected_id:
            outline = ink
        self.canvas.create_oval(
            cx - r,
            cy - r,
            cx + r,
            cy + r,
            fill=m.color,
            outline=outline,
            width=SELECT_WIDTH if outline else 0,
            dash=dash,
            tags=tags,
        )

        # direction indicator
        tip = heading(m)
        tx, ty = self._xy(scene, tip.x, tip.y)
        self.canvas.create_line(cx, cy, tx, ty, fill=ink, width=max(1, 3 * scene.zoom), tags=tags)
        head: list[float] = []
        for p in arrow_head(m):
            head.extend(self._xy(scene, p.x, p.y))
        self.canvas.create_polygon(*head, fill=ink, outline="", tags=tags)

        self.canvas.create_text(
            cx, cy, text=initials(m), fill=Colours.sys.white.hex, font=self._font(scene, 14, bold=True), tags=tags
        )
        if m.emotion:
            ex, ey = self._xy(scene, m.x + EMOTION_OFFSET, m.y - EMOTION_OFFSET)
            self.canvas.create_text(ex, ey, text=m.emotion, font=self._font(scene, 20), tags=tags)
        nx, ny = self._xy(scene, m.x, m.y + NAME_OFFSET)
        self.canvas.create_text(nx, ny, text=m.name, fill=ink, font=self._font(scene, 12), tags=tags)

    # ------- connect gesture -------
    def paint_rubber_band(self, scene: Scene) -> None:
        seg = scene.rubber_band()
        if seg is None:
            return
        start, end = seg
        self.canvas.create_line(
            start.x,
            start.y,
            end.x,
            end.y,
            fill=Colours.sys.rubber_band.hex,
            width=2,
            dash=RUBBER_BAND_DASH,
            tags=Tag.overlay,
        )

    def update_rubber_band(self, scene: Scene) -> None:
        """Cheap path for pointer moves while connecting."""
        self.canvas.delete(Tag.overlay)
        self.paint_rubber_band(scene)
