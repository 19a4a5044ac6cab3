from __future__ import annotations

import math
from enum import StrEnum
from typing import Any, Final, Self

from pydantic import Field, field_validator, model_validator

from models.catalogue import DEFAULT_GENERATION, Generation, generation_colour
from models.colour import Colour
from models.styling import Connection_Type, Model

WORLD_WIDTH: Final = 2000
WORLD_HEIGHT: Final = 2000
WORLD_MARGIN: Final = 40
MEMBER_RADIUS: Final = 30
GRID: Final = 50
SNAP_STRENGTH: Final = 0.35


def norm_angle(deg: float) -> float:
    """Normalise degrees into [0, 360)."""
    a = math.fmod(deg, 360.0)
    if a < 0:
        a += 360.0
    # fmod of a tiny negative can land exactly on 360
    return 0.0 if a >= 360.0 else a


def snap(v: float, strength: float = SNAP_STRENGTH, grid: int = GRID) -> float:
    """Soft pull toward the nearest grid line; half-way values round up."""
    target = math.floor(v / grid + 0.5) * grid
    return v + (target - v) * strength


def clamp(v: float, lo: float, hi: float) -> float:
    return lo if v < lo else hi if v > hi else v


class Time_Layer(StrEnum):
    past = "past"
    present = "present"
    future = "future"


class Point(Model):
    x: float = 0.0
    y: float = 0.0

    def clamped_to_world(self) -> "Point":
        return Point(
            x=clamp(self.x, WORLD_MARGIN, WORLD_WIDTH - WORLD_MARGIN),
            y=clamp(self.y, WORLD_MARGIN, WORLD_HEIGHT - WORLD_MARGIN),
        )

    def snapped(self) -> "Point":
        return Point(x=snap(self.x), y=snap(self.y))

    def distance_to(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


class Member(Model):
    id: int
    name: str = Field(min_length=1)
    x: float = float(WORLD_MARGIN)
    y: float = float(WORLD_MARGIN)
    generation: Generation = DEFAULT_GENERATION
    role: str = ""
    color: str = ""
    notes: str = ""
    rotation: float = 0.0
    emotion: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _fill_colour(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("color"):
            data = dict(data)
            data["color"] = generation_colour(data.get("generation", DEFAULT_GENERATION))
        return data

    @field_validator("role", "notes", mode="before")
    @classmethod
    def _none_is_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("emotion", mode="before")
    @classmethod
    def _blank_is_none(cls, v: Any) -> Any:
        return v or None

    @field_validator("color")
    @classmethod
    def _check_colour(cls, v: str) -> str:
        Colour.from_hex(v)
        return v

    @field_validator("rotation")
    @classmethod
    def _norm_rotation(cls, v: float) -> float:
        return norm_angle(v)

    @property
    def p(self) -> Point:
        return Point(x=self.x, y=self.y)

    def with_xy(self, x: float, y: float) -> Self:
        return self.model_copy(update={"x": x, "y": y})


class Connection(Model):
    id: int
    from_: int = Field(alias="from")
    to: int
    type: Connection_Type = Connection_Type.strong

    def touches(self, member_id: int) -> bool:
        return self.from_ == member_id or self.to == member_id


class Layer_Data(Model):
    members: list[Member] = Field(default_factory=list)
    connections: list[Connection] = Field(default_factory=list)
    notes: str = ""

    @field_validator("members", "connections", mode="before")
    @classmethod
    def _none_is_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("notes", mode="before")
    @classmethod
    def _none_is_blank(cls, v: Any) -> Any:
        return "" if v is None else v

    def is_empty(self) -> bool:
        return not self.members and not self.connections and not self.notes
