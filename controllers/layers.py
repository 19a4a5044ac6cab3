"""The three fixed time-layers and the live/at-rest split."""

from __future__ import annotations

import logging

from models.document import Layer_Set
from models.world import Layer_Data, Time_Layer

logger = logging.getLogger(__name__)


class Layer_Manager:
    """Holds the at-rest slots. The live layer's slot is only written on flush or switch."""

    def __init__(self, layers: Layer_Set | None = None, active: Time_Layer = Time_Layer.present) -> None:
        self.layers: Layer_Set = layers if layers is not None else Layer_Set()
        self.active: Time_Layer = active

    def flush(self, live: Layer_Data) -> None:
        """Store `live` into the active slot without switching."""
        self.layers.put(self.active, live.model_copy(deep=True))

    def switch(self, target: Time_Layer, live: Layer_Data) -> Layer_Data:
        """Park the live layer and return a copy of `target` to become live.

        Args;
            target: Layer to activate.
            live: Current live data of the active layer.

        Returns;
            Deep copy of the target slot (empty if never populated).
        """
        target = Time_Layer(target)
        self.flush(live)
        self.active = target
        logger.debug("switched to layer %s", target.value)
        return self.layers.get(target).model_copy(deep=True)

    def all_layers(self, live: Layer_Data) -> Layer_Set:
        """A copy of every slot with the active one replaced by `live`."""
        out = self.layers.model_copy(deep=True)
        out.put(self.active, live.model_copy(deep=True))
        return out

    def replace(self, layers: Layer_Set, active: Time_Layer) -> Layer_Data:
        """Adopt a whole layer set (load/undo); returns the new live data."""
        self.layers = layers.model_copy(deep=True)
        self.active = Time_Layer(active)
        return self.layers.get(self.active).model_copy(deep=True)
