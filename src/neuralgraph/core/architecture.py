"""Network topology: layers, connections and the graph queries used by the calculators.

Layers are graph nodes identified by object identity. Connections are edges
between exactly two layers and carry their own parameters. Every connection can
be traversed from either endpoint; which direction is "forward" for a given
traversal is decided by the set of already calculated layers, not by the edge.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

import torch

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


@dataclass(eq=False)
class Layer:
    """A node of the network graph.

    Attributes:
        name: Human readable identifier, used in logs and error messages
        units: Feature dimension, i.e. the number of rows of the layer's value matrix
        activation: Key of the activation applied once all contributions are summed
        is_bias: Bias layers hold a constant row of ones and feed a single layer

    """

    name: str
    units: int
    activation: str = "Linear"
    is_bias: bool = False

    def __post_init__(self) -> None:
        if int(self.units) <= 0:
            msg = f"Layer {self.name!r} must have a positive number of units; received {self.units}"
            raise ValueError(msg)
        self.units = int(self.units)

    def __repr__(self) -> str:
        return f"Layer({self.name!r}, units={self.units}, activation={self.activation!r})"


class Connection:
    """Edge between ``input_layer`` and ``output_layer``."""

    kind: ClassVar[str] = "connection"

    def __init__(self, input_layer: Layer, output_layer: Layer) -> None:
        self.input_layer = input_layer
        self.output_layer = output_layer

    @property
    def layers(self) -> tuple[Layer, Layer]:
        return self.input_layer, self.output_layer

    def other_end(self, layer: Layer) -> Layer:
        if layer is self.input_layer:
            return self.output_layer
        if layer is self.output_layer:
            return self.input_layer
        msg = f"Layer {layer.name!r} is not an endpoint of {self!r}"
        raise ValueError(msg)

    def is_forward(self, target_layer: Layer) -> bool:
        """True when values flow from ``input_layer`` into ``target_layer``."""
        return target_layer is self.output_layer

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.input_layer.name!r} -> {self.output_layer.name!r})"


class FullyConnected(Connection):
    """Dense weighted connection with weights of shape ``[output units, input units]``."""

    kind: ClassVar[str] = "fully_connected"

    def __init__(self, input_layer: Layer, output_layer: Layer, weights: torch.Tensor | None = None) -> None:
        super().__init__(input_layer, output_layer)
        expected = (output_layer.units, input_layer.units)
        if weights is None:
            weights = torch.zeros(expected)
        if tuple(weights.shape) != expected:
            msg = f"{self!r} expects weights of shape {expected}; received {tuple(weights.shape)}"
            raise ValueError(msg)
        self.weights = weights


class BiasConnection(Connection):
    """Per-unit bias added to ``output_layer`` from a single-unit bias layer."""

    kind: ClassVar[str] = "bias"

    def __init__(self, bias_layer: Layer, target_layer: Layer, weights: torch.Tensor | None = None) -> None:
        if not bias_layer.is_bias or bias_layer.units != 1:
            msg = f"Layer {bias_layer.name!r} is not a single-unit bias layer"
            raise ValueError(msg)
        super().__init__(bias_layer, target_layer)
        if weights is None:
            weights = torch.zeros(target_layer.units)
        if tuple(weights.shape) != (target_layer.units,):
            msg = f"{self!r} expects weights of shape ({target_layer.units},); received {tuple(weights.shape)}"
            raise ValueError(msg)
        self.weights = weights


def _check_volume(layer: Layer, maps: int, rows: int, columns: int) -> None:
    if layer.units != maps * rows * columns:
        msg = (
            f"Layer {layer.name!r} has {layer.units} units but the connection geometry "
            f"requires {maps}x{rows}x{columns}={maps * rows * columns}"
        )
        raise ValueError(msg)


class Conv2DConnection(Connection):
    """2-D convolution between two layers of stacked feature maps.

    A layer's value matrix stores each sample as a flattened
    ``[feature maps, rows, columns]`` volume in one column.
    """

    kind: ClassVar[str] = "conv2d"

    def __init__(
        self,
        input_layer: Layer,
        output_layer: Layer,
        *,
        input_feature_maps: int,
        input_rows: int,
        input_columns: int,
        kernel_rows: int,
        kernel_columns: int,
        output_feature_maps: int,
        stride_rows: int = 1,
        stride_columns: int = 1,
        weights: torch.Tensor | None = None,
    ) -> None:
        super().__init__(input_layer, output_layer)
        if kernel_rows > input_rows or kernel_columns > input_columns:
            msg = f"Kernel {kernel_rows}x{kernel_columns} exceeds input {input_rows}x{input_columns}"
            raise ValueError(msg)
        if stride_rows <= 0 or stride_columns <= 0:
            msg = "Convolution strides must be positive"
            raise ValueError(msg)
        self.input_feature_maps = input_feature_maps
        self.input_rows = input_rows
        self.input_columns = input_columns
        self.kernel_rows = kernel_rows
        self.kernel_columns = kernel_columns
        self.output_feature_maps = output_feature_maps
        self.stride_rows = stride_rows
        self.stride_columns = stride_columns

        _check_volume(input_layer, input_feature_maps, input_rows, input_columns)
        _check_volume(output_layer, output_feature_maps, self.output_rows, self.output_columns)

        expected = (output_feature_maps, input_feature_maps, kernel_rows, kernel_columns)
        if weights is None:
            weights = torch.zeros(expected)
        if tuple(weights.shape) != expected:
            msg = f"{self!r} expects weights of shape {expected}; received {tuple(weights.shape)}"
            raise ValueError(msg)
        self.weights = weights

    @property
    def output_rows(self) -> int:
        return (self.input_rows - self.kernel_rows) // self.stride_rows + 1

    @property
    def output_columns(self) -> int:
        return (self.input_columns - self.kernel_columns) // self.stride_columns + 1


class Subsampling2DConnection(Connection):
    """Non-overlapping pooling over ``region_rows x region_columns`` windows."""

    kind: ClassVar[str] = "subsampling2d"
    POOLING_MODES: ClassVar[tuple[str, ...]] = ("max", "average")

    def __init__(
        self,
        input_layer: Layer,
        output_layer: Layer,
        *,
        feature_maps: int,
        input_rows: int,
        input_columns: int,
        region_rows: int,
        region_columns: int,
        pooling: str = "max",
    ) -> None:
        super().__init__(input_layer, output_layer)
        pooling = pooling.strip().lower()
        if pooling in {"avg", "mean"}:
            pooling = "average"
        if pooling not in self.POOLING_MODES:
            msg = f"Unknown pooling mode {pooling!r}; expected one of {self.POOLING_MODES}"
            raise ValueError(msg)
        if region_rows <= 0 or region_columns <= 0:
            msg = "Pooling regions must be positive"
            raise ValueError(msg)
        self.feature_maps = feature_maps
        self.input_rows = input_rows
        self.input_columns = input_columns
        self.region_rows = region_rows
        self.region_columns = region_columns
        self.pooling = pooling

        _check_volume(input_layer, feature_maps, input_rows, input_columns)
        _check_volume(output_layer, feature_maps, self.output_rows, self.output_columns)

    @property
    def output_rows(self) -> int:
        return self.input_rows // self.region_rows

    @property
    def output_columns(self) -> int:
        return self.input_columns // self.region_columns


class NeuralNetwork:
    """Container of layers and connections exposing topology queries.

    Layers receive a stable index in insertion order; the calculators use it to
    keep per-traversal state in flat arrays.
    """

    def __init__(
        self,
        layers: Iterable[Layer] = (),
        connections: Iterable[Connection] = (),
        *,
        input_layer: Layer | None = None,
        output_layer: Layer | None = None,
    ) -> None:
        self._layers: list[Layer] = []
        self._index: dict[Layer, int] = {}
        self._connections: list[Connection] = []
        self._incident: dict[Layer, list[Connection]] = {}
        for layer in layers:
            self.add_layer(layer)
        for connection in connections:
            self.add_connection(connection)
        self.input_layer = input_layer
        self.output_layer = output_layer

    @property
    def layers(self) -> tuple[Layer, ...]:
        return tuple(self._layers)

    @property
    def connections(self) -> tuple[Connection, ...]:
        return tuple(self._connections)

    def __len__(self) -> int:
        return len(self._layers)

    def __contains__(self, layer: object) -> bool:
        return layer in self._index

    def __iter__(self) -> Iterator[Layer]:
        return iter(self._layers)

    def add_layer(self, layer: Layer) -> Layer:
        if layer not in self._index:
            self._index[layer] = len(self._layers)
            self._layers.append(layer)
            self._incident[layer] = []
        return layer

    def add_connection(self, connection: Connection) -> Connection:
        for layer in connection.layers:
            self.add_layer(layer)
        self._connections.append(connection)
        self._incident[connection.input_layer].append(connection)
        if connection.output_layer is not connection.input_layer:
            self._incident[connection.output_layer].append(connection)
        return connection

    def layer_index(self, layer: Layer) -> int:
        try:
            return self._index[layer]
        except KeyError:
            msg = f"Layer {layer.name!r} is not part of this network"
            raise ValueError(msg) from None

    def connections_of(self, layer: Layer) -> tuple[Connection, ...]:
        """Connections touching ``layer`` in the order they were added."""
        self.layer_index(layer)
        return tuple(self._incident[layer])

    def bias_layers(self) -> tuple[Layer, ...]:
        return tuple(layer for layer in self._layers if layer.is_bias)

    def get_layer(self, name: str) -> Layer:
        for layer in self._layers:
            if layer.name == name:
                return layer
        msg = f"No layer named {name!r}"
        raise KeyError(msg)

    def __repr__(self) -> str:
        return f"NeuralNetwork(layers={len(self._layers)}, connections={len(self._connections)})"


def connections_of(network: NeuralNetwork, layer: Layer) -> tuple[Connection, ...]:
    """Connections incident to ``layer`` within ``network``."""
    return network.connections_of(layer)


def opposite_layer(connection: Connection, layer: Layer) -> Layer:
    """The endpoint of ``connection`` that is not ``layer``."""
    return connection.other_end(layer)


__all__ = [
    "BiasConnection",
    "Connection",
    "Conv2DConnection",
    "FullyConnected",
    "Layer",
    "NeuralNetwork",
    "Subsampling2DConnection",
    "connections_of",
    "opposite_layer",
]
