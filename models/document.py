from __future__ import annotations

from typing import Any, Final

from pydantic import ConfigDict, Field, field_validator

from models.styling import Model
from models.world import Layer_Data, Point, Time_Layer

SCHEMA_VERSION: Final = 2
DEFAULT_NAME: Final = "My Constellation"


class Layer_Set(Model):
    """The three fixed time-layer slots. Unknown keys are dropped on validation."""

    past: Layer_Data = Field(default_factory=Layer_Data)
    present: Layer_Data = Field(default_factory=Layer_Data)
    future: Layer_Data = Field(default_factory=Layer_Data)

    @field_validator("past", "present", "future", mode="before")
    @classmethod
    def _none_is_empty(cls, v: Any) -> Any:
        return Layer_Data() if v is None else v

    def get(self, layer: Time_Layer) -> Layer_Data:
        return getattr(self, layer.value)

    def put(self, layer: Time_Layer, data: Layer_Data) -> None:
        setattr(self, layer.value, data)


class Document(Model):
    name: str = DEFAULT_NAME
    layers: Layer_Set = Field(default_factory=Layer_Set)
    active_layer: Time_Layer = Field(default=Time_Layer.present, alias="activeLayer")
    pan: Point = Field(default_factory=Point)
    zoom: float = 1.0

    def active(self) -> Layer_Data:
        return self.layers.get(self.active_layer)


class Snapshot(Document):
    """Frozen point-in-time copy of a Document; build with `capture`."""

    model_config = ConfigDict(frozen=True)

    @classmethod
    def capture(cls, doc: Document) -> "Snapshot":
        # dump/validate builds fresh containers all the way down
        return cls.model_validate(doc.model_dump())

    def restore(self) -> Document:
        return Document.model_validate(self.model_dump())
