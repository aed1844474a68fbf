# FILEPATH: src/neuralgraph/core/calculation/registry.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

import torch

from ..architecture import (
    BiasConnection,
    Conv2DConnection,
    FullyConnected,
    Subsampling2DConnection,
)
from ..errors import CalculatorNotFoundError
from . import connections

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from ..architecture import Connection, Layer


class ConnectionCalculator(Protocol):
    """Pure function of a source value and a connection's fixed parameters."""

    def __call__(self, connection: Connection, value: torch.Tensor, target_layer: Layer) -> torch.Tensor: ...


type MergeRule = Callable[[torch.Tensor, torch.Tensor], torch.Tensor]


@dataclass(frozen=True)
class CalculatorEntry:
    kind: str
    activation: str | None
    function: ConnectionCalculator
    merge: MergeRule = field(default=torch.add)
    description: str = ""

    def __call__(self, connection: Connection, value: torch.Tensor, target_layer: Layer) -> torch.Tensor:
        return self.function(connection, value, target_layer)


class ConnectionCalculatorRegistry:
    """Maps ``(connection kind, activation)`` tags to connection calculators.

    Lookup prefers an entry registered for the destination layer's activation
    and falls back to the activation-agnostic entry for the kind.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, str | None], CalculatorEntry] = {}

    def register(
        self,
        kind: str,
        function: ConnectionCalculator | None = None,
        *,
        activation: str | None = None,
        merge: MergeRule | None = None,
        description: str = "",
    ):
        """Register (or override) a calculator; usable as a decorator when ``function`` is omitted."""

        def _add(fn: ConnectionCalculator) -> ConnectionCalculator:
            self._entries[(kind, activation)] = CalculatorEntry(
                kind=kind,
                activation=activation,
                function=fn,
                merge=merge or torch.add,
                description=description or (fn.__doc__ or "").strip(),
            )
            return fn

        if function is None:
            return _add
        return _add(function)

    def unregister(self, kind: str, *, activation: str | None = None) -> None:
        self._entries.pop((kind, activation), None)

    def lookup(self, kind: str, activation: str | None = None) -> CalculatorEntry:
        entry = self._entries.get((kind, activation))
        if entry is None and activation is not None:
            entry = self._entries.get((kind, None))
        if entry is None:
            raise CalculatorNotFoundError(kind, activation)
        return entry

    def resolve(self, connection: Connection, target_layer: Layer) -> CalculatorEntry:
        return self.lookup(connection.kind, target_layer.activation)

    def copy(self) -> ConnectionCalculatorRegistry:
        clone = ConnectionCalculatorRegistry()
        clone._entries = dict(self._entries)
        return clone

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[CalculatorEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)


BUILTIN_CALCULATORS: dict[str, ConnectionCalculator] = {
    FullyConnected.kind: connections.fully_connected,
    BiasConnection.kind: connections.bias,
    Conv2DConnection.kind: connections.conv2d,
    Subsampling2DConnection.kind: connections.subsampling2d,
}


def default_registry() -> ConnectionCalculatorRegistry:
    """A fresh registry holding the built-in calculators."""
    registry = ConnectionCalculatorRegistry()
    for kind, function in BUILTIN_CALCULATORS.items():
        registry.register(kind, function)
    return registry


__all__ = [
    "BUILTIN_CALCULATORS",
    "CalculatorEntry",
    "ConnectionCalculator",
    "ConnectionCalculatorRegistry",
    "MergeRule",
    "default_registry",
]
