"""Layer calculator: plans a traversal and replays it into the results map."""

from __future__ import annotations

from collections.abc import MutableSet
import logging
from typing import TYPE_CHECKING

from ..activations import get_activation
from ..configs import CalculationConfig
from ..errors import (
    InvalidCalculationRequestError,
    MissingDependencyValueError,
    ShapeMismatchError,
    UnresolvableTargetError,
)
from ..validators import validate_contribution, validate_value_matrix
from .planner import plan
from .registry import ConnectionCalculatorRegistry, default_registry

if TYPE_CHECKING:
    from collections.abc import Iterable, MutableMapping, Sequence

    import torch

    from ..activations import ActivationFunction
    from ..architecture import Layer, NeuralNetwork
    from .candidates import CalculationCandidate

logger = logging.getLogger(__name__)


class LayerCalculator:
    """Computes layer values by walking the network graph.

    Which layers count as known decides the direction of the walk, so a single
    calculator serves inference (input known), backward signal propagation
    (output known) and the alternating phases of an RBM.

    Example:
        >>> results = {net.input_layer: x}
        >>> LayerCalculator().calculate(net, net.output_layer, {net.input_layer}, results)
        >>> results[net.output_layer]

    """

    def __init__(
        self,
        registry: ConnectionCalculatorRegistry | None = None,
        config: CalculationConfig | None = None,
    ) -> None:
        self.registry = registry if registry is not None else default_registry()
        self.config = config or CalculationConfig()
        self._activations: dict[str, ActivationFunction] = {}

    def calculate(
        self,
        network: NeuralNetwork,
        target_layer: Layer,
        calculated_layers: MutableSet[Layer] | Iterable[Layer],
        results: MutableMapping[Layer, torch.Tensor],
    ) -> None:
        """Fill ``results`` with the value of ``target_layer``.

        Every layer between the calculated layers and the target gets its value
        written to ``results`` as well, and is added to ``calculated_layers``.

        Raises:
            InvalidCalculationRequestError: ``calculated_layers`` is empty
            MissingDependencyValueError: a calculated layer has no value in ``results``
            UnresolvableTargetError: the target cannot be reached from the calculated layers
            ShapeMismatchError: a contribution does not fit its destination layer

        """
        if not calculated_layers:
            msg = f"Cannot calculate {target_layer.name!r}: no calculated layers to start from"
            raise InvalidCalculationRequestError(msg)
        if not isinstance(calculated_layers, MutableSet):
            calculated_layers = set(calculated_layers)
        for layer in calculated_layers:
            if layer not in results:
                raise MissingDependencyValueError(layer, f"Calculated layer {layer.name!r} has no value in results")
            if self.config.validate_shapes:
                validate_value_matrix(results[layer], layer)
        if target_layer in calculated_layers:
            return

        candidates = plan(network, target_layer, calculated_layers)
        if target_layer not in calculated_layers:
            raise UnresolvableTargetError(target_layer)
        self.execute(candidates, results)

    def execute(
        self,
        candidates: Sequence[CalculationCandidate],
        results: MutableMapping[Layer, torch.Tensor],
    ) -> None:
        """Replay a plan, finalising each destination after its last candidate.

        A destination's first contribution starts its buffer; every later one is
        folded in with the merge rule of the registry entry that produced it, so
        with mixed rules the order of the plan decides the result.
        """
        last_index = {candidate.target: i for i, candidate in enumerate(candidates)}
        buffers: dict[Layer, torch.Tensor] = {}

        for i, candidate in enumerate(candidates):
            target = candidate.target
            source = candidate.source
            value = results.get(source)
            if value is None:
                msg = f"{candidate!r} needs the value of {source.name!r}, which was never calculated"
                raise MissingDependencyValueError(source, msg)

            entry = self.registry.resolve(candidate.connection, target)
            contribution = entry(candidate.connection, value, target)
            if self.config.validate_shapes:
                validate_contribution(contribution, target, batch=value.shape[-1])

            buffer = buffers.get(target)
            if buffer is None:
                buffers[target] = contribution
            elif buffer.shape != contribution.shape:
                raise ShapeMismatchError(target, tuple(buffer.shape), tuple(contribution.shape))
            else:
                buffers[target] = entry.merge(buffer, contribution)

            if last_index[target] == i:
                results[target] = self._finalise(target, buffers.pop(target))

    def _finalise(self, layer: Layer, summed: torch.Tensor) -> torch.Tensor:
        value = self._activation(layer)(summed) if self.config.apply_activations else summed
        if self.config.validate_shapes:
            validate_value_matrix(value, layer)
        logger.debug("Finalised %r with shape %s", layer, tuple(value.shape))
        return value

    def _activation(self, layer: Layer) -> ActivationFunction:
        key = layer.activation
        if key not in self._activations:
            self._activations[key] = get_activation(key)
        return self._activations[key]


def calculate(
    network: NeuralNetwork,
    target_layer: Layer,
    calculated_layers: MutableSet[Layer] | Iterable[Layer],
    results: MutableMapping[Layer, torch.Tensor],
) -> None:
    """Calculate ``target_layer`` with the built-in connection calculators."""
    LayerCalculator().calculate(network, target_layer, calculated_layers, results)


__all__ = ["LayerCalculator", "calculate"]
