"""Bookkeeping shared by the traversal planner and the layer calculator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..architecture import Connection, Layer, NeuralNetwork


@dataclass(frozen=True)
class CalculationCandidate:
    """``connection`` may now contribute to ``target``: its other end is final."""

    connection: Connection
    target: Layer

    @property
    def source(self) -> Layer:
        return self.connection.other_end(self.target)

    def __repr__(self) -> str:
        return f"CalculationCandidate({self.connection!r} => {self.target.name!r})"


class LayerState(Enum):
    UNVISITED = "unvisited"
    IN_PROGRESS = "in_progress"
    CALCULATED = "calculated"
    # Finalised by the planner without any usable input
    UNRESOLVED = "unresolved"


class TraversalState:
    """Per-layer tags for one traversal, stored by the network's layer index."""

    def __init__(self, network: NeuralNetwork, calculated: Iterable[Layer] = ()) -> None:
        self.network = network
        self._tags: list[LayerState] = [LayerState.UNVISITED] * len(network)
        for layer in calculated:
            self[layer] = LayerState.CALCULATED

    def _slot(self, layer: Layer) -> int:
        index = self.network.layer_index(layer)
        if index >= len(self._tags):
            # layer added to the network after this state was created
            self._tags.extend([LayerState.UNVISITED] * (index + 1 - len(self._tags)))
        return index

    def __getitem__(self, layer: Layer) -> LayerState:
        return self._tags[self._slot(layer)]

    def __setitem__(self, layer: Layer, tag: LayerState) -> None:
        self._tags[self._slot(layer)] = tag

    def layers_in(self, tag: LayerState) -> set[Layer]:
        return {layer for layer, current in zip(self.network.layers, self._tags, strict=False) if current is tag}

    @property
    def calculated_layers(self) -> set[Layer]:
        return self.layers_in(LayerState.CALCULATED)

    @property
    def in_progress_layers(self) -> set[Layer]:
        return self.layers_in(LayerState.IN_PROGRESS)

    def reset(self, calculated: Iterable[Layer] = ()) -> None:
        self._tags = [LayerState.UNVISITED] * len(self.network)
        for layer in calculated:
            self[layer] = LayerState.CALCULATED

    def copy(self) -> TraversalState:
        clone = TraversalState(self.network)
        clone._tags = list(self._tags)
        return clone


__all__ = ["CalculationCandidate", "LayerState", "TraversalState"]
