"""Tk implementations of the editor's dialog collaborators."""

from __future__ import annotations

import logging
import tkinter as tk
from collections.abc import Callable
from tkinter import messagebox, simpledialog
from typing import Any

from controllers.editor import Editor
from controllers.gestures import Action
from models.catalogue import DEFAULT_GENERATION, Generation
from models.world import Member, Point
from ui.edit_dialog import Connections_Dialog, EKind, Emotion_Picker, Field_Spec, Generic_Edit_Dialog, generation_choices

logger = logging.getLogger(__name__)

NAME_FIELD = Field_Spec("name", "Name", required=True)
ROLE_FIELD = Field_Spec("role", "Role")
GENERATION_FIELD = Field_Spec("generation", "Generation", EKind.CHOICE, choices=generation_choices)
NOTES_FIELD = Field_Spec("notes", "Notes", EKind.TEXT)

MEMBER_SCHEMA = (NAME_FIELD, ROLE_FIELD, GENERATION_FIELD, NOTES_FIELD)
QUICK_ADD_SCHEMA = (NAME_FIELD, GENERATION_FIELD)
COLOUR_SCHEMA = (Field_Spec("color", "Colour", EKind.COLOUR),)
LAYER_NOTES_SCHEMA = (Field_Spec("notes", "Session notes", EKind.TEXT),)


def _safe_tk_call(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    try:
        return func(*args, **kwargs)
    except tk.TclError as exc:
        if "application has been destroyed" in str(exc):
            return None
        raise


class Tk_Dialogs:
    """Modal forms and menus. Results are fed back through Editor entry points."""

    def __init__(self, root: tk.Misc, canvas: tk.Canvas, editor: Editor, *, default_generation: Generation = DEFAULT_GENERATION):
        self.root = root
        self.canvas = canvas
        self.editor = editor
        self.default_generation = default_generation
        self._perform: Callable[[Action], None] | None = None

    def bind(self, perform: Callable[[Action], None]) -> None:
        """Route context-menu picks to the interaction controller."""
        self._perform = perform

    # ---- plain messages ----
    def confirm(self, message: str) -> bool:
        return bool(_safe_tk_call(messagebox.askokcancel, "Confirm", message, parent=self.root))

    def error(self, message: str) -> None:
        _safe_tk_call(messagebox.showerror, "Error", message, parent=self.root)

    def _form(self, title: str, schema, values: dict[str, Any] | None = None) -> dict[str, Any] | None:
        dlg = _safe_tk_call(Generic_Edit_Dialog, self.root, title, schema, values)
        return dlg.result if dlg is not None else None

    # ---- member dialogs ----
    def edit_member(self, member: Member) -> None:
        res = self._form(f"Edit {member.name}", MEMBER_SCHEMA, member.model_dump())
        if res is None:
            return
        if self.editor.update_member(member.id, **res) is None:
            self.error("The member could not be updated; a name is required.")

    def rotate_member(self, member: Member) -> None:
        deg = _safe_tk_call(
            simpledialog.askfloat,
            "Direction",
            "Heading in degrees (0 = right, 90 = down):",
            initialvalue=round(member.rotation),
            parent=self.root,
        )
        if deg is not None:
            self.editor.rotate_member(member.id, deg)

    def pick_colour(self, member: Member) -> None:
        res = self._form(f"Colour for {member.name}", COLOUR_SCHEMA, {"color": member.color})
        if res and res["color"] and res["color"] != member.color:
            self.editor.update_member(member.id, color=res["color"])

    def pick_emotion(self, member: Member) -> None:
        dlg = _safe_tk_call(Emotion_Picker, self.root, member.emotion)
        if dlg is None or dlg.result is None:
            return
        if (dlg.result or None) != member.emotion:
            self.editor.update_member(member.id, emotion=dlg.result)

    def edit_connections(self, member: Member) -> None:
        _safe_tk_call(
            Connections_Dialog,
            self.root,
            f"Bonds of {member.name}",
            lambda: self.editor.bonds_of(member.id),
            self.editor.update_connection_type,
            self.editor.delete_connection,
        )

    # ---- canvas requests ----
    def quick_add(self, at: Point) -> None:
        res = self._form("Quick add", QUICK_ADD_SCHEMA, {"generation": self.default_generation})
        if res is None:
            return
        if self.editor.quick_add_member(res["name"], res["generation"], at) is None:
            self.error("A member needs a name.")

    def add_member(self) -> None:
        res = self._form("Add member", MEMBER_SCHEMA, {"generation": self.default_generation})
        if res is None:
            return
        m = self.editor.add_member(res["name"], res["generation"], role=res["role"], notes=res["notes"])
        if m is None:
            self.error("A member needs a name.")
        else:
            self.editor.select(m.id)

    def edit_notes(self) -> None:
        res = self._form(f"Notes ({self.editor.active_layer.value})", LAYER_NOTES_SCHEMA, {"notes": self.editor.world.notes})
        if res is not None and res["notes"] != self.editor.world.notes:
            self.editor.set_notes(res["notes"])

    def context_menu(self, member: Member, screen: Point) -> None:
        menu = tk.Menu(self.root, tearoff=False)
        menu.add_command(label=member.name, state="disabled")
        menu.add_separator()
        for action in Action:
            if action.destructive:
                menu.add_separator()
            menu.add_command(label=action.label, command=lambda a=action: self._dispatch(a))
        x = self.canvas.winfo_rootx() + int(screen.x)
        y = self.canvas.winfo_rooty() + int(screen.y)
        try:
            menu.tk_popup(x, y)
        finally:
            menu.grab_release()

    def _dispatch(self, action: Action) -> None:
        if self._perform is None:
            logger.warning("context menu action %s with no controller bound", action)
            return
        self._perform(action)
