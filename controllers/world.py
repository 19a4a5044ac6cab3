"""Live-layer members and connections."""

from __future__ import annotations

import logging
import time
from typing import Any, Final

from pydantic import ValidationError

from models.catalogue import DEFAULT_GENERATION, Generation, generation_colour
from models.styling import Connection_Type
from models.world import Connection, Layer_Data, Member, Point

logger = logging.getLogger(__name__)

DEFAULT_SPAWN: Final = Point(x=400, y=300)
PATCHABLE: Final = frozenset({"name", "role", "notes", "color", "emotion", "rotation", "generation", "x", "y"})


class World_Model:
    """Members, connections and notes of the live layer. Mutated in place."""

    def __init__(self, layer: Layer_Data | None = None) -> None:
        self.members: list[Member] = []
        self.connections: list[Connection] = []
        self.notes: str = ""
        self._last_conn_id = 0
        if layer is not None:
            self.load(layer)

    # ---------- layer in/out ----------
    def load(self, layer: Layer_Data) -> None:
        """Adopt a copy of `layer` as live state."""
        data = layer.model_copy(deep=True)
        self.members = list(data.members)
        self.connections = list(data.connections)
        self.notes = data.notes

    def as_layer(self) -> Layer_Data:
        """Return a deep copy of the live state."""
        return Layer_Data(members=self.members, connections=self.connections, notes=self.notes).model_copy(deep=True)

    def clear(self) -> None:
        self.members = []
        self.connections = []
        self.notes = ""

    # ---------- lookups ----------
    def member(self, member_id: int | None) -> Member | None:
        if member_id is None:
            return None
        return next((m for m in self.members if m.id == member_id), None)

    def connection(self, conn_id: int) -> Connection | None:
        return next((c for c in self.connections if c.id == conn_id), None)

    def connections_of(self, member_id: int) -> list[Connection]:
        return [c for c in self.connections if c.touches(member_id)]

    def next_member_id(self) -> int:
        return max((m.id for m in self.members), default=0) + 1

    def next_connection_id(self) -> int:
        """Millisecond timestamp, bumped when needed so ids stay strictly increasing."""
        cid = time.time_ns() // 1_000_000
        floor = max(self._last_conn_id, max((c.id for c in self.connections), default=0))
        if cid <= floor:
            cid = floor + 1
        self._last_conn_id = cid
        return cid

    # ---------- members ----------
    def add_member(
        self,
        name: str,
        generation: Generation | int = DEFAULT_GENERATION,
        *,
        x: float | None = None,
        y: float | None = None,
        role: str = "",
        notes: str = "",
        color: str | None = None,
    ) -> Member | None:
        """Append a new member.

        Args;
            name: Display name; blank names are rejected.
            generation: Family rank, 1-4.
            x: World x, defaults to the spawn point. Clamped to the world.
            y: World y, defaults to the spawn point. Clamped to the world.
            role: Optional role text.
            notes: Optional notes.
            color: Hex colour, defaults to the generation colour.

        Returns;
            The new member, or None if the input was rejected.
        """
        if not name or not name.strip():
            logger.debug("add_member rejected: blank name")
            return None
        p = Point(x=DEFAULT_SPAWN.x if x is None else x, y=DEFAULT_SPAWN.y if y is None else y).clamped_to_world()
        try:
            member = Member(
                id=self.next_member_id(),
                name=name,
                x=p.x,
                y=p.y,
                generation=generation,
                role=role,
                notes=notes,
                color=color or generation_colour(int(generation)),
                rotation=0,
                emotion=None,
            )
        except ValidationError as xcp:
            logger.debug("add_member rejected: %s", xcp)
            return None
        self.members.append(member)
        logger.debug("added member %d %r", member.id, member.name)
        return member

    def update_member(self, member_id: int, **patch: Any) -> Member | None:
        """Apply `patch` to a member. Invalid patches leave the member untouched.

        Returns;
            The updated member, or None when rejected or the id is unknown.
        """
        unknown = set(patch) - PATCHABLE
        if unknown:
            raise TypeError(f"update_member got unexpected fields: {sorted(unknown)}")
        idx = next((i for i, m in enumerate(self.members) if m.id == member_id), None)
        if idx is None:
            logger.debug("update_member: no member %s", member_id)
            return None
        current = self.members[idx]
        try:
            if "x" in patch or "y" in patch:
                p = Point(x=patch.get("x", current.x), y=patch.get("y", current.y)).clamped_to_world()
                patch["x"], patch["y"] = p.x, p.y
            updated = Member.model_validate({**current.model_dump(), **patch})
        except ValidationError as xcp:
            logger.debug("update_member %s rejected: %s", member_id, xcp)
            return None
        self.members[idx] = updated
        return updated

    def move_member(self, member_id: int, p: Point) -> Member | None:
        """Write a position without validation round-trips; used per drag motion."""
        m = self.member(member_id)
        if m is None:
            return None
        q = p.clamped_to_world()
        m.x, m.y = q.x, q.y
        return m

    def delete_member(self, member_id: int) -> bool:
        """Remove a member and every connection touching it. Unknown ids are a no-op."""
        before = len(self.members)
        self.members = [m for m in self.members if m.id != member_id]
        if len(self.members) == before:
            return False
        self.connections = [c for c in self.connections if not c.touches(member_id)]
        logger.debug("deleted member %d", member_id)
        return True

    # ---------- connections ----------
    def add_connection(
        self, from_id: int, to_id: int, kind: Connection_Type | str = Connection_Type.strong
    ) -> Connection | None:
        if from_id == to_id:
            return None
        if self.member(from_id) is None or self.member(to_id) is None:
            logger.debug("add_connection: stale endpoint %s -> %s", from_id, to_id)
            return None
        conn = Connection(id=self.next_connection_id(), from_=from_id, to=to_id, type=Connection_Type(kind))
        self.connections.append(conn)
        return conn

    def delete_connection(self, conn_id: int) -> bool:
        before = len(self.connections)
        self.connections = [c for c in self.connections if c.id != conn_id]
        return len(self.connections) != before

    def update_connection_type(self, conn_id: int, kind: Connection_Type | str) -> Connection | None:
        conn = self.connection(conn_id)
        if conn is None:
            return None
        conn.type = Connection_Type(kind)
        return conn
