"""The editor state tree and the named entry points UI collaborators call."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from canvas.scene import Scene
from canvas.view import View_Transform
from controllers.gestures import Connecting, Gesture, Idle
from controllers.history import History_Manager
from controllers.layers import Layer_Manager
from controllers.world import World_Model
from disk.storage import document_to_json, parse_document
from models.catalogue import DEFAULT_GENERATION, FAMILY_TEMPLATE, FAMILY_TEMPLATE_LINKS, Generation
from models.document import DEFAULT_NAME, Document, Snapshot
from models.styling import Connection_Type
from models.world import Connection, Member, Point, Time_Layer

logger = logging.getLogger(__name__)

Listener = Callable[[bool], None]


class Editor:
    """Owns every piece of editable state; mutations go through the methods below.

    Listeners are called with `dirty=True` when the document changed and
    `dirty=False` for view-only changes (selection, gesture, pointer).
    """

    def __init__(self, doc: Document | None = None, *, viewport: tuple[int, int] = (800, 600)) -> None:
        self.name: str = DEFAULT_NAME
        self.world = World_Model()
        self.view = View_Transform()
        self.layers = Layer_Manager()
        self.history = History_Manager()
        self.selected_id: int | None = None
        self.gesture: Gesture = Idle()
        self.pointer: Point | None = None
        self.viewport = viewport
        self._listeners: list[Listener] = []
        self._apply(doc or Document())

    # ========= listeners =========
    def subscribe(self, fn: Listener) -> Callable[[], None]:
        self._listeners.append(fn)
        return lambda: self._listeners.remove(fn)

    def notify(self, dirty: bool = True) -> None:
        for fn in list(self._listeners):
            fn(dirty)

    # ========= document <-> live state =========
    @property
    def active_layer(self) -> Time_Layer:
        return self.layers.active

    def document(self) -> Document:
        """The whole document, with the live layer merged into its slot. Does not flush."""
        return Document(
            name=self.name,
            layers=self.layers.all_layers(self.world.as_layer()),
            active_layer=self.layers.active,
            pan=self.view.pan,
            zoom=self.view.zoom,
        )

    def snapshot(self) -> Snapshot:
        return Snapshot.capture(self.document())

    def _apply(self, doc: Document) -> None:
        self.name = doc.name
        self.world.load(self.layers.replace(doc.layers, doc.active_layer))
        self.view.set_pan(doc.pan.x, doc.pan.y)
        self.view.set_zoom(doc.zoom)
        if self.world.member(self.selected_id) is None:
            self.selected_id = None

    def serialize(self) -> Document:
        """Flush the live layer into its slot and return the document."""
        self.layers.flush(self.world.as_layer())
        return self.document()

    def serialize_json(self) -> str:
        return document_to_json(self.serialize())

    def deserialize(self, raw: str | bytes | Mapping[str, Any]) -> Document:
        """Replace the whole document. Atomic: on Parse_Error nothing changes.

        Raises;
            Parse_Error: `raw` is not a valid document.
        """
        doc = parse_document(raw)
        self.load(doc)
        return doc

    def load(self, doc: Document) -> None:
        """Adopt an already-decoded document and start a fresh history."""
        self.selected_id = None
        self.gesture = Idle()
        self._apply(doc)
        self.history.clear()
        logger.info("document loaded: %s (%s)", self.name, self.layers.active.value)
        self.notify(True)

    # ========= history =========
    def push_history(self) -> None:
        self.history.push(self.snapshot())

    def _record(self, mutate: Callable[[], Any]) -> Any:
        """Run `mutate`; push the pre-state only if it reports a change (non-None, non-False)."""
        before = self.snapshot()
        result = mutate()
        if result is None or result is False:
            return result
        self.history.push(before)
        self.notify(True)
        return result

    def undo(self) -> bool:
        target = self.history.undo(self.snapshot())
        if target is None:
            return False
        self._apply(target.restore())
        self.notify(True)
        return True

    def redo(self) -> bool:
        target = self.history.redo(self.snapshot())
        if target is None:
            return False
        self._apply(target.restore())
        self.notify(True)
        return True

    # ========= selection =========
    @property
    def selected(self) -> Member | None:
        return self.world.member(self.selected_id)

    @property
    def connecting_from(self) -> int | None:
        return self.gesture.from_id if isinstance(self.gesture, Connecting) else None

    def select(self, member_id: int | None) -> None:
        self.selected_id = member_id if self.world.member(member_id) is not None else None
        self.notify(False)

    def set_gesture(self, gesture: Gesture) -> None:
        self.gesture = gesture
        self.notify(False)

    # ========= members =========
    def spawn_point(self) -> Point:
        """World point under the centre of the viewport."""
        w, h = self.viewport
        return self.view.screen_to_world(Point(x=w / 2, y=h / 2))

    def add_member(
        self,
        name: str,
        generation: Generation | int = DEFAULT_GENERATION,
        *,
        role: str = "",
        notes: str = "",
        at: Point | None = None,
    ) -> Member | None:
        """Form submit / quick add. Blank names are rejected without a history entry."""
        p = at or self.spawn_point()
        return self._record(lambda: self.world.add_member(name, generation, x=p.x, y=p.y, role=role, notes=notes))

    def quick_add_member(self, name: str, generation: Generation | int, at: Point) -> Member | None:
        return self.add_member(name, generation, at=at)

    def update_member(self, member_id: int, **patch: Any) -> Member | None:
        """Edit name/role/notes, colour, emotion or rotation. One history entry per call."""
        return self._record(lambda: self.world.update_member(member_id, **patch))

    def rotate_member(self, member_id: int, degrees: float, *, record: bool = True) -> Member | None:
        """Set a member's heading; `record=False` for continuous gestures like the wheel."""
        if record:
            return self.update_member(member_id, rotation=degrees)
        m = self.world.update_member(member_id, rotation=degrees)
        if m is not None:
            self.notify(True)
        return m

    def drag_member(self, member_id: int, p: Point) -> Member | None:
        """Per-motion write during a drag; the press already pushed history."""
        m = self.world.move_member(member_id, p)
        if m is not None:
            self.notify(True)
        return m

    def delete_member(self, member_id: int) -> bool:
        """Delete a member and its connections. Callers confirm first; unknown ids are a no-op."""

        def _delete() -> bool:
            if not self.world.delete_member(member_id):
                return False
            if self.selected_id == member_id:
                self.selected_id = None
            if self.connecting_from == member_id:
                self.gesture = Idle()
            return True

        return bool(self._record(_delete))

    # ========= connections =========
    def add_connection(
        self, from_id: int, to_id: int, kind: Connection_Type | str = Connection_Type.strong
    ) -> Connection | None:
        return self._record(lambda: self.world.add_connection(from_id, to_id, kind))

    def bonds_of(self, member_id: int) -> list[tuple[Connection, str]]:
        """Connections touching `member_id`, each with an "A -> B" label from member names."""

        def name(mid: int) -> str:
            m = self.world.member(mid)
            return m.name if m is not None else f"#{mid}"

        return [(c, f"{name(c.from_)} -> {name(c.to)}") for c in self.world.connections_of(member_id)]

    def delete_connection(self, conn_id: int) -> bool:
        return bool(self._record(lambda: self.world.delete_connection(conn_id)))

    def update_connection_type(self, conn_id: int, kind: Connection_Type | str) -> Connection | None:
        conn = self.world.connection(conn_id)
        if conn is None or conn.type == Connection_Type(kind):
            return None
        return self._record(lambda: self.world.update_connection_type(conn_id, kind))

    # ========= layers / document-level =========
    def switch_layer(self, target: Time_Layer | str) -> None:
        """Park the live layer and bring `target` live. Not undoable by itself."""
        target = Time_Layer(target)
        self.world.load(self.layers.switch(target, self.world.as_layer()))
        self.selected_id = None
        self.gesture = Idle()
        self.notify(True)

    def set_name(self, name: str) -> None:
        self.name = name.strip() or DEFAULT_NAME
        self.notify(True)

    def set_notes(self, notes: str) -> None:
        self.world.notes = notes
        self.notify(True)

    def clear(self) -> None:
        """Empty the live layer and reset the view. Callers confirm first."""

        def _clear() -> bool:
            self.world.clear()
            self.view.reset()
            self.selected_id = None
            self.gesture = Idle()
            return True

        self._record(_clear)

    def apply_template(self) -> None:
        """Replace the live members/connections with the base family. Callers confirm first."""
        cx, cy = self.viewport[0] / 2, self.viewport[1] / 2

        def _template() -> bool:
            self.world.members = []
            self.world.connections = []
            for t in FAMILY_TEMPLATE:
                self.world.members.append(
                    Member(
                        id=t.id,
                        name=t.name,
                        x=cx + t.dx,
                        y=cy + t.dy,
                        generation=t.generation,
                        role=t.name,
                        color=t.colour,
                        rotation=t.rotation,
                    )
                )
            for link in FAMILY_TEMPLATE_LINKS:
                self.world.connections.append(Connection(id=link.id, from_=link.a, to=link.b, type=link.kind))
            self.view.reset()
            self.selected_id = None
            self.gesture = Idle()
            return True

        self._record(_template)

    # ========= view =========
    def adjust_zoom(self, delta: float) -> float:
        z = self.view.adjust_zoom(delta)
        self.notify(True)
        return z

    def set_zoom(self, zoom: float) -> float:
        z = self.view.set_zoom(zoom)
        self.notify(True)
        return z

    def reset_view(self) -> None:
        self.view.reset()
        self.notify(True)

    # ========= render contract =========
    def scene(self) -> Scene:
        return Scene(
            members=tuple(self.world.members),
            connections=tuple(self.world.connections),
            selected_id=self.selected_id,
            connecting_from=self.connecting_from,
            pan=self.view.pan,
            zoom=self.view.zoom,
            pointer=self.pointer,
        )
