"""Typed failures raised by the layer calculation core."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .architecture import Connection, Layer


class CalculationError(RuntimeError):
    """Base class for every failure surfaced by ``calculate``."""


class InvalidCalculationRequestError(CalculationError, ValueError):
    """The caller supplied no base case for the traversal."""


class UnresolvableTargetError(CalculationError):
    """Planning finished without the target layer ever becoming calculable.

    Raised for disconnected targets and for targets only reachable through
    pruned (cyclic) connections.
    """

    def __init__(self, layer: Layer, msg: str | None = None) -> None:
        self.layer = layer
        super().__init__(msg or f"Layer {layer.name!r} cannot be reached from the calculated layers")


class MissingDependencyValueError(CalculationError, KeyError):
    """A layer that should hold a value has no entry in the results map."""

    def __init__(self, layer: Layer, msg: str | None = None) -> None:
        self.layer = layer
        super().__init__(msg or f"No value matrix for layer {layer.name!r}")

    def __str__(self) -> str:
        # KeyError quotes its argument otherwise
        return str(self.args[0])


class ShapeMismatchError(CalculationError, ValueError):
    """A value matrix does not have the shape its layer expects."""

    def __init__(
        self,
        layer: Layer,
        expected: tuple[int, ...],
        actual: tuple[int, ...],
        msg: str | None = None,
    ) -> None:
        self.layer = layer
        self.expected = tuple(expected)
        self.actual = tuple(actual)
        super().__init__(
            msg or f"Layer {layer.name!r} expects a value of shape {self.expected}; received {self.actual}",
        )


class CalculatorNotFoundError(CalculationError, LookupError):
    """No connection calculator is registered for a connection kind."""

    def __init__(self, kind: str, activation: str | None) -> None:
        self.kind = kind
        self.activation = activation
        super().__init__(f"No connection calculator registered for kind={kind!r} (activation={activation!r})")


class UnsupportedDirectionError(CalculationError, NotImplementedError):
    """A connection calculator cannot evaluate a connection towards ``layer``."""

    def __init__(self, connection: Connection, layer: Layer, msg: str | None = None) -> None:
        self.connection = connection
        self.layer = layer
        super().__init__(msg or f"{connection!r} cannot be evaluated towards layer {layer.name!r}")


__all__ = [
    "CalculationError",
    "CalculatorNotFoundError",
    "InvalidCalculationRequestError",
    "MissingDependencyValueError",
    "ShapeMismatchError",
    "UnresolvableTargetError",
    "UnsupportedDirectionError",
]
