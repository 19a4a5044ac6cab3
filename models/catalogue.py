"""Static catalogues: generations, emotions, the family template and relational patterns."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Final

from models.colour import Colour
from models.styling import Connection_Type


class Generation(IntEnum):
    grandparents = 1
    parents = 2
    siblings = 3
    children = 4

    @property
    def label(self) -> str:
        return _GENERATION_LABELS[self]

    @property
    def col(self) -> Colour:
        return _GENERATION_COLOURS[self]


_GENERATION_LABELS: Final[dict[Generation, str]] = {
    Generation.grandparents: "Grandparents / great-grandparents",
    Generation.parents: "Parents / aunts and uncles",
    Generation.siblings: "Siblings / self",
    Generation.children: "Children / nephews and nieces",
}

_GENERATION_COLOURS: Final[dict[Generation, Colour]] = {
    Generation.grandparents: Colour.from_hex("#9333EA", "grandparents"),
    Generation.parents: Colour.from_hex("#3B82F6", "parents"),
    Generation.siblings: Colour.from_hex("#10B981", "siblings"),
    Generation.children: Colour.from_hex("#F59E0B", "children"),
}

DEFAULT_GENERATION: Final = Generation.siblings


def generation_colour(gen: int) -> str:
    try:
        return Generation(gen).col.hex
    except ValueError:
        return Generation.parents.col.hex


@dataclass(frozen=True, slots=True)
class Emotion:
    glyph: str
    name: str
    col: Colour


EMOTIONS: Final[tuple[Emotion, ...]] = (
    Emotion("😊", "Joy", Colour.from_hex("#FDE047")),
    Emotion("😢", "Sadness", Colour.from_hex("#60A5FA")),
    Emotion("😠", "Anger", Colour.from_hex("#F87171")),
    Emotion("😰", "Fear", Colour.from_hex("#A78BFA")),
    Emotion("😐", "Neutral", Colour.from_hex("#9CA3AF")),
    Emotion("🤗", "Love", Colour.from_hex("#FB7185")),
    Emotion("😔", "Guilt", Colour.from_hex("#CBD5E1")),
    Emotion("😌", "Peace", Colour.from_hex("#86EFAC")),
    Emotion("😤", "Frustration", Colour.from_hex("#FDBA74")),
    Emotion("🥺", "Vulnerability", Colour.from_hex("#C4B5FD")),
)


def emotion_for(glyph: str | None) -> Emotion | None:
    if not glyph:
        return None
    return next((e for e in EMOTIONS if e.glyph == glyph), None)


# ---- family template ----
@dataclass(frozen=True, slots=True)
class Template_Member:
    id: int
    name: str
    dx: float
    dy: float
    generation: Generation
    colour: str
    rotation: float


@dataclass(frozen=True, slots=True)
class Template_Connection:
    id: int
    a: int
    b: int
    kind: Connection_Type


FAMILY_TEMPLATE: Final[tuple[Template_Member, ...]] = (
    Template_Member(1, "Mother", -80, -50, Generation.parents, "#3B82F6", 90),
    Template_Member(2, "Father", 80, -50, Generation.parents, "#9333EA", 90),
    Template_Member(3, "Son", -80, 70, Generation.siblings, "#10B981", -90),
    Template_Member(4, "Daughter", 80, 70, Generation.siblings, "#F59E0B", -90),
)

FAMILY_TEMPLATE_LINKS: Final[tuple[Template_Connection, ...]] = (
    Template_Connection(1001, 1, 2, Connection_Type.strong),
    Template_Connection(1002, 1, 3, Connection_Type.strong),
    Template_Connection(1003, 2, 4, Connection_Type.strong),
    Template_Connection(1004, 3, 4, Connection_Type.weak),
)


# ---- relational patterns (summary appendix) ----
@dataclass(frozen=True, slots=True)
class Pattern:
    name: str
    description: str
    indicators: tuple[str, ...]


PATTERNS: Final[tuple[Pattern, ...]] = (
    Pattern(
        "Triangulation",
        "A child stands between two parents in conflict, acting as mediator or as one parent's ally against the other.",
        ("Child between parents", "Crossed bonds", "Divided loyalty"),
    ),
    Pattern(
        "Parentification",
        "A child takes on adult roles and responsibilities, caring for parents or siblings beyond their age.",
        ("Child in a parental position", "Inverted bonds", "Excess responsibility"),
    ),
    Pattern(
        "Systemic exclusion",
        "A family member is forgotten, denied or separated from the family system.",
        ("Isolated member", "No bonds", "Extreme physical distance"),
    ),
    Pattern(
        "Coalition",
        "Two members ally against a third, unbalancing the family system.",
        ("Strong bond between two", "Conflict with a third", "Exclusion of one"),
    ),
    Pattern(
        "Invisible loyalties",
        "Unacknowledged commitments keep members tied to family patterns of the past.",
        ("Repeated patterns", "Unexplained behaviour", "Difficulty differentiating"),
    ),
)
