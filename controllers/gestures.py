"""Gesture states, member actions and the dialog collaborator interface."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol, runtime_checkable

from models.world import Member, Point


@dataclass(frozen=True, slots=True)
class Idle:
    pass


@dataclass(frozen=True, slots=True)
class Dragging:
    member_id: int


@dataclass(frozen=True, slots=True)
class Panning:
    anchor_pointer: Point
    anchor_pan: Point


@dataclass(frozen=True, slots=True)
class Connecting:
    from_id: int


Gesture = Idle | Dragging | Panning | Connecting


class Action(StrEnum):
    """Member actions reachable from the context menu or the keyboard."""

    edit = "edit"
    rotate = "rotate"
    colour = "colour"
    emotion = "emotion"
    connect = "connect"
    connections = "connections"
    delete = "delete"

    @property
    def label(self) -> str:
        return _ACTION_LABELS[self]

    @property
    def destructive(self) -> bool:
        return self is Action.delete


_ACTION_LABELS: dict[Action, str] = {
    Action.edit: "Edit details",
    Action.rotate: "Change direction",
    Action.colour: "Change colour",
    Action.emotion: "Change emotion",
    Action.connect: "Create bond",
    Action.connections: "Manage bonds",
    Action.delete: "Delete",
}


@runtime_checkable
class Dialogs(Protocol):
    """UI collaborators. Open/pick calls are fire-and-forget; results come back through Editor entry points."""

    def confirm(self, message: str) -> bool: ...
    def error(self, message: str) -> None: ...
    def edit_member(self, member: Member) -> None: ...
    def rotate_member(self, member: Member) -> None: ...
    def pick_colour(self, member: Member) -> None: ...
    def pick_emotion(self, member: Member) -> None: ...
    def quick_add(self, at: Point) -> None: ...
    def edit_connections(self, member: Member) -> None: ...
    def context_menu(self, member: Member, screen: Point) -> None: ...
