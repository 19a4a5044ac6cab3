"""Read-only view of editor state for painters and exporters."""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass

from models.world import Connection, Member, Point

ARROW_LENGTH = 40
ARROW_BARB = 12
ARROW_SPREAD = 150
NAME_OFFSET = 50
EMOTION_OFFSET = 25


def heading(m: Member, length: float = ARROW_LENGTH) -> Point:
    """End point of a member's direction indicator."""
    r = math.radians(m.rotation)
    return Point(x=m.x + math.cos(r) * length, y=m.y + math.sin(r) * length)


def arrow_head(m: Member) -> tuple[Point, Point, Point]:
    tip = heading(m)
    barbs = []
    for spread in (ARROW_SPREAD, -ARROW_SPREAD):
        r = math.radians(m.rotation + spread)
        barbs.append(Point(x=tip.x + math.cos(r) * ARROW_BARB, y=tip.y + math.sin(r) * ARROW_BARB))
    return tip, barbs[0], barbs[1]


def initials(m: Member) -> str:
    return "".join(part[0] for part in m.name.split() if part)[:2].upper()


@dataclass(frozen=True, slots=True)
class Scene:
    members: tuple[Member, ...]
    connections: tuple[Connection, ...]
    selected_id: int | None
    connecting_from: int | None
    pan: Point
    zoom: float
    pointer: Point | None = None

    def member(self, member_id: int | None) -> Member | None:
        if member_id is None:
            return None
        return next((m for m in self.members if m.id == member_id), None)

    def endpoints(self, conn: Connection) -> tuple[Member, Member] | None:
        a, b = self.member(conn.from_), self.member(conn.to)
        if a is None or b is None:
            return None
        return a, b

    def drawable_connections(self) -> Iterator[tuple[Connection, Member, Member]]:
        """Connections whose endpoints both resolve; dangling ones are skipped."""
        by_id = {m.id: m for m in self.members}
        for conn in self.connections:
            a, b = by_id.get(conn.from_), by_id.get(conn.to)
            if a is not None and b is not None:
                yield conn, a, b

    def rubber_band(self) -> tuple[Point, Point] | None:
        """Screen-space segment from the connect origin to the pointer."""
        origin = self.member(self.connecting_from)
        if origin is None or self.pointer is None:
            return None
        start = Point(x=origin.x * self.zoom + self.pan.x, y=origin.y * self.zoom + self.pan.y)
        return start, self.pointer
