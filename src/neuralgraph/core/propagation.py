"""Drivers that seed a traversal and read back layer values.

All of them are thin wrappers around :meth:`LayerCalculator.calculate`; they
differ only in which layers are known up front and which layer is requested.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING

import torch

from .architecture import NeuralNetwork
from .calculation import LayerCalculator
from .configs import CalculationConfig
from .errors import UnresolvableTargetError

if TYPE_CHECKING:
    from .architecture import Connection, Layer

logger = logging.getLogger(__name__)


def bias_values(
    network: NeuralNetwork,
    batch_size: int,
    config: CalculationConfig | None = None,
) -> dict[Layer, torch.Tensor]:
    """Rows of ones for every bias layer of ``network``."""
    config = config or CalculationConfig()
    return {
        layer: torch.ones(1, batch_size, dtype=config.torch_dtype, device=config.torch_device)
        for layer in network.bias_layers()
    }


def as_value_matrix(data, layer: Layer, config: CalculationConfig | None = None) -> torch.Tensor:
    """Coerce ``data`` to a ``[units, batch]`` tensor for ``layer``.

    A 1-D input is treated as a single sample.
    """
    config = config or CalculationConfig()
    value = torch.as_tensor(data, dtype=config.torch_dtype, device=config.torch_device)
    if value.dim() == 1:
        value = value.unsqueeze(1)
    if value.dim() != 2 or value.shape[0] != layer.units:
        msg = f"Expected data of shape [{layer.units}, batch] for layer {layer.name!r}; received {tuple(value.shape)}"
        raise ValueError(msg)
    return value


def _require(layer: Layer | None, role: str) -> Layer:
    if layer is None:
        msg = f"Network has no {role} layer; pass it explicitly"
        raise ValueError(msg)
    return layer


def upstream_network(network: NeuralNetwork, target: Layer) -> NeuralNetwork:
    """Sub-network of ``target`` and every layer with a forward path into it.

    Only connections whose ``output_layer`` is kept survive, so nothing
    downstream of ``target`` can reach it through an adjoint.
    """
    feeding: dict[Layer, list[Connection]] = {}
    for connection in network.connections:
        feeding.setdefault(connection.output_layer, []).append(connection)

    keep = {target}
    pending = [target]
    while pending:
        layer = pending.pop()
        for connection in feeding.get(layer, ()):
            if connection.input_layer not in keep:
                keep.add(connection.input_layer)
                pending.append(connection.input_layer)

    return NeuralNetwork(
        [layer for layer in network.layers if layer in keep],
        [connection for connection in network.connections if connection.output_layer in keep],
        input_layer=network.input_layer if network.input_layer in keep else None,
        output_layer=target,
    )


def propagate(
    network: NeuralNetwork,
    inputs,
    *,
    target: Layer | None = None,
    calculator: LayerCalculator | None = None,
) -> dict[Layer, torch.Tensor]:
    """Forward inference from the input layer to ``target`` (default: the output layer).

    The traversal runs over :func:`upstream_network`, so layers past ``target``
    are neither calculated nor allowed to feed back into it. Returns the
    results map, which holds the value of every layer on the way.
    """
    calculator = calculator or LayerCalculator()
    input_layer = _require(network.input_layer, "input")
    target = target or _require(network.output_layer, "output")

    upstream = upstream_network(network, target)
    if input_layer not in upstream:
        raise UnresolvableTargetError(target, f"Layer {target.name!r} is not fed by input layer {input_layer.name!r}")

    value = as_value_matrix(inputs, input_layer, calculator.config)
    results: dict[Layer, torch.Tensor] = {input_layer: value}
    results.update(bias_values(upstream, value.shape[1], calculator.config))
    calculator.calculate(upstream, target, set(results), results)
    return results


def propagate_backward(
    network: NeuralNetwork,
    signal,
    *,
    target: Layer | None = None,
    calculator: LayerCalculator | None = None,
) -> dict[Layer, torch.Tensor]:
    """Push a signal held by the output layer back towards ``target`` (default: the input layer).

    Every connection is applied through its adjoint. Activations are not
    applied unless ``calculator`` is configured to do so. Bias layers are left
    unseeded and drop out of the traversal.
    """
    calculator = calculator or LayerCalculator(config=CalculationConfig(apply_activations=False))
    output_layer = _require(network.output_layer, "output")
    target = target or _require(network.input_layer, "input")

    results: dict[Layer, torch.Tensor] = {output_layer: as_value_matrix(signal, output_layer, calculator.config)}
    calculator.calculate(network, target, {output_layer}, results)
    return results


@dataclass
class GibbsSample:
    visible_probabilities: torch.Tensor
    visible: torch.Tensor
    hidden_probabilities: torch.Tensor
    hidden: torch.Tensor


class RBMCalculator:
    """Alternates visible and hidden phases of a restricted Boltzmann machine.

    The machine is a network whose input layer is the visible layer and whose
    output layer is the hidden layer, joined by a single connection that is
    traversed in both directions.

    Each phase seeds every bias layer of ``rbm``. On anything deeper than one
    visible and one hidden layer, a biased layer beyond the wanted one would be
    resolved and feed back into it, so stacked machines need one calculator
    per adjacent pair.
    """

    def __init__(self, rbm: NeuralNetwork, calculator: LayerCalculator | None = None) -> None:
        self.rbm = rbm
        self.visible_layer = _require(rbm.input_layer, "visible")
        self.hidden_layer = _require(rbm.output_layer, "hidden")
        self.calculator = calculator or LayerCalculator()

    def _phase(self, known: Layer, value, wanted: Layer) -> torch.Tensor:
        seeded = as_value_matrix(value, known, self.calculator.config)
        results: dict[Layer, torch.Tensor] = {known: seeded}
        results.update(bias_values(self.rbm, seeded.shape[1], self.calculator.config))
        self.calculator.calculate(self.rbm, wanted, set(results), results)
        return results[wanted]

    def hidden_probabilities(self, visible) -> torch.Tensor:
        return self._phase(self.visible_layer, visible, self.hidden_layer)

    def visible_probabilities(self, hidden) -> torch.Tensor:
        return self._phase(self.hidden_layer, hidden, self.visible_layer)

    def gibbs_sample(
        self,
        visible,
        steps: int = 1,
        generator: torch.Generator | None = None,
    ) -> GibbsSample:
        """Run ``steps`` rounds of block Gibbs sampling starting from ``visible``."""
        if steps < 1:
            msg = f"steps must be >= 1; received {steps}"
            raise ValueError(msg)
        v = as_value_matrix(visible, self.visible_layer, self.calculator.config)
        for step in range(steps):
            h_prob = self.hidden_probabilities(v)
            h = torch.bernoulli(h_prob, generator=generator)
            v_prob = self.visible_probabilities(h)
            v = torch.bernoulli(v_prob, generator=generator)
            logger.debug("Gibbs step %d/%d", step + 1, steps)
        return GibbsSample(visible_probabilities=v_prob, visible=v, hidden_probabilities=h_prob, hidden=h)


__all__ = [
    "GibbsSample",
    "RBMCalculator",
    "as_value_matrix",
    "bias_values",
    "propagate",
    "propagate_backward",
    "upstream_network",
]
