from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Final

from pydantic import BaseModel, ConfigDict

from models.colour import Colour


class Model(BaseModel):
    model_config = ConfigDict(
        str_strip_whitespace=True, validate_assignment=True, populate_by_name=True, allow_inf_nan=False
    )


class Connection_Type(StrEnum):
    strong = "strong"
    weak = "weak"
    conflict = "conflict"
    cut = "cut"


@dataclass(frozen=True, slots=True)
class Connection_Style:
    label: str
    col: Colour
    width: int
    dash: tuple[int, ...] = ()


CONNECTION_STYLES: Final[Mapping[Connection_Type, Connection_Style]] = MappingProxyType(
    {
        Connection_Type.strong: Connection_Style("Strong bond", Colour.from_hex("#10B981", "strong"), 3),
        Connection_Type.weak: Connection_Style("Weak bond", Colour.from_hex("#94A3B8", "weak"), 1, (5, 5)),
        Connection_Type.conflict: Connection_Style("Conflict", Colour.from_hex("#EF4444", "conflict"), 2),
        Connection_Type.cut: Connection_Style("Cut-off / exclusion", Colour.from_hex("#DC2626", "cut"), 3, (10, 5)),
    }
)


def style_for(kind: Connection_Type | str) -> Connection_Style:
    """Look up a connection style; unknown kinds draw as strong."""
    try:
        return CONNECTION_STYLES[Connection_Type(kind)]
    except ValueError:
        return CONNECTION_STYLES[Connection_Type.strong]
