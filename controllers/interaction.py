"""Pointer/keyboard/wheel state machine."""

from __future__ import annotations

import logging
from typing import Final, assert_never

from canvas.hit_test import hit_member
from canvas.view import ZOOM_STEP
from controllers.editor import Editor
from controllers.events import Key_Event, Pointer_Event, Wheel_Event
from controllers.gestures import Action, Connecting, Dialogs, Dragging, Idle, Panning
from models.styling import Connection_Type
from models.world import Point

logger = logging.getLogger(__name__)

ROTATE_STEP: Final = 5
PRIMARY: Final = 1

_KEY_ACTIONS: Final[dict[str, Action]] = {
    "delete": Action.delete,
    "backspace": Action.delete,
    "r": Action.rotate,
    "c": Action.connect,
    "b": Action.connections,
    "e": Action.edit,
}


class Interaction_Controller:
    """Routes raw input into Editor mutations. Gesture state lives on the Editor."""

    def __init__(self, editor: Editor, dialogs: Dialogs, *, confirm_destructive: bool = True) -> None:
        self.editor = editor
        self.dialogs = dialogs
        self.confirm_destructive = confirm_destructive
        self.pan_mode = False

    # ---------- helpers ----------
    def _world(self, evt: Pointer_Event) -> Point:
        return self.editor.view.screen_to_world(evt.p)

    def _confirm(self, message: str) -> bool:
        if not self.confirm_destructive:
            return True
        return bool(self.dialogs.confirm(message))

    def set_pan_mode(self, enabled: bool) -> None:
        self.pan_mode = enabled
        self.editor.notify(False)

    @property
    def gesture_active(self) -> bool:
        """True while a drag or pan owns the pointer."""
        return isinstance(self.editor.gesture, (Dragging, Panning))

    # ---------- pointer ----------
    def on_press(self, evt: Pointer_Event) -> None:
        """Handle a primary-button press on the canvas.

        Args;
            evt: The pointer event, in screen coordinates.
        """
        ed = self.editor
        ed.pointer = evt.p
        if evt.button != PRIMARY:
            return

        if self.pan_mode:
            ed.set_gesture(Panning(anchor_pointer=evt.p, anchor_pan=ed.view.pan))
            return

        hit = hit_member(ed.world.members, self._world(evt))
        gesture = ed.gesture

        if hit is None:
            ed.gesture = Idle()
            ed.select(None)
            return

        if isinstance(gesture, Connecting):
            if hit.id != gesture.from_id:
                ed.add_connection(gesture.from_id, hit.id, Connection_Type.strong)
            ed.set_gesture(Idle())
            return

        ed.push_history()
        ed.select(hit.id)
        ed.set_gesture(Dragging(hit.id))

    def on_motion(self, evt: Pointer_Event) -> None:
        """Track the pointer; moves only matter during a drag or pan."""
        ed = self.editor
        ed.pointer = evt.p
        match ed.gesture:
            case Dragging(member_id=member_id):
                target = self._world(evt).snapped()
                if ed.drag_member(member_id, target) is None:
                    logger.debug("drag target %s vanished; gesture dropped", member_id)
                    ed.set_gesture(Idle())
            case Panning(anchor_pointer=anchor_pointer, anchor_pan=anchor_pan):
                ed.view.pan_from(anchor_pan, anchor_pointer, evt.p)
                ed.notify(True)
            case Connecting():
                ed.notify(False)
            case Idle():
                pass
            case _:
                assert_never(ed.gesture)

    def on_release(self, evt: Pointer_Event) -> None:
        ed = self.editor
        ed.pointer = evt.p
        match ed.gesture:
            case Dragging(member_id=member_id):
                ed.gesture = Idle()
                ed.select(member_id)
            case Panning():
                ed.set_gesture(Idle())
            case _:
                pass

    def on_double_click(self, evt: Pointer_Event) -> None:
        """Double-click on empty canvas asks for a quick-add at that world point."""
        at = self._world(evt)
        if hit_member(self.editor.world.members, at) is None:
            self.dialogs.quick_add(at.clamped_to_world())

    def on_context(self, evt: Pointer_Event) -> None:
        """Secondary click: member menu on a member, quick-add elsewhere."""
        at = self._world(evt)
        hit = hit_member(self.editor.world.members, at)
        if hit is None:
            self.dialogs.quick_add(at.clamped_to_world())
            return
        self.editor.select(hit.id)
        self.dialogs.context_menu(hit, evt.p)

    # ---------- wheel ----------
    def on_wheel(self, evt: Wheel_Event) -> bool:
        """Zoom with a modifier held, otherwise rotate the selected member.

        Returns;
            True if the event was consumed.
        """
        if not evt.over_canvas:
            return False
        ed = self.editor
        if evt.mods.command:
            ed.adjust_zoom(-ZOOM_STEP if evt.down else ZOOM_STEP)
            return True
        m = ed.selected
        if m is None:
            return False
        step = ROTATE_STEP if evt.down else -ROTATE_STEP
        ed.rotate_member(m.id, m.rotation + step, record=False)
        return True

    # ---------- keyboard ----------
    def on_key(self, evt: Key_Event) -> bool:
        """Member shortcuts; only active with a selection.

        Returns;
            True if the key was handled.
        """
        key = evt.key.lower()
        if key == "escape":
            return self.cancel()
        if self.editor.selected is None or evt.mods.command:
            return False
        action = _KEY_ACTIONS.get(key)
        if action is None:
            return False
        self.perform(action)
        return True

    def cancel(self) -> bool:
        """Drop a pending connect gesture; drags and pans end only on release."""
        if isinstance(self.editor.gesture, Connecting):
            self.editor.set_gesture(Idle())
            return True
        return False

    # ---------- actions ----------
    def perform(self, action: Action) -> None:
        """Run a member action against the current selection."""
        ed = self.editor
        m = ed.selected
        if m is None:
            return
        match action:
            case Action.edit:
                self.dialogs.edit_member(m)
            case Action.rotate:
                self.dialogs.rotate_member(m)
            case Action.colour:
                self.dialogs.pick_colour(m)
            case Action.emotion:
                self.dialogs.pick_emotion(m)
            case Action.connect:
                ed.set_gesture(Connecting(m.id))
            case Action.connections:
                self.dialogs.edit_connections(m)
            case Action.delete:
                if self._confirm(f"Delete {m.name}?"):
                    ed.delete_member(m.id)
            case _:
                assert_never(action)

    def clear_all(self) -> bool:
        if not self._confirm("Clear the whole layer?"):
            return False
        self.editor.clear()
        return True

    def apply_template(self) -> bool:
        if not self._confirm("This replaces the current members with a base family template. Continue?"):
            return False
        self.editor.apply_template()
        return True
