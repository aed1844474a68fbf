"""Builders for common network topologies.

Example:
    >>> import torch
    >>> from neuralgraph.core import propagate
    >>> from neuralgraph.nn import init, networks
    >>> net = networks.multilayer_perceptron([4, 8, 2], activation="Tanh", init=init.xavier_uniform())
    >>> results = propagate(net, torch.randn(4, 16))

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from neuralgraph.core.architecture import (
    BiasConnection,
    Conv2DConnection,
    FullyConnected,
    Layer,
    NeuralNetwork,
    Subsampling2DConnection,
)

from .init import initialize
from .specs import InitSpec, LayerSpec

if TYPE_CHECKING:
    from collections.abc import Sequence


def add_bias(network: NeuralNetwork, layer: Layer, init: InitSpec | None = None) -> BiasConnection:
    """Attach a dedicated bias layer to ``layer``."""
    bias_layer = network.add_layer(Layer(f"{layer.name}_bias", 1, is_bias=True))
    return network.add_connection(BiasConnection(bias_layer, layer, initialize((layer.units,), init)))


def multilayer_perceptron(
    units: Sequence[int | LayerSpec],
    *,
    activation: str = "Sigmoid",
    output_activation: str | None = None,
    bias: bool = True,
    init: InitSpec | None = None,
    bias_init: InitSpec | None = None,
) -> NeuralNetwork:
    """Fully connected feed-forward stack ``input -> hidden_1 .. hidden_n -> output``.

    Args:
        units: Layer sizes (or LayerSpec) from input to output; at least two entries
        activation: Activation of the hidden layers
        output_activation: Activation of the output layer (defaults to ``activation``)
        bias: Attach a bias layer to every non-input layer whose spec allows it
        init: Initializer for the weight matrices
        bias_init: Initializer for the bias vectors (zeros when omitted)

    Returns:
        NeuralNetwork with ``input_layer`` and ``output_layer`` set

    """
    if len(units) < 2:
        msg = f"A multilayer perceptron needs at least an input and an output layer; received {len(units)} layer(s)"
        raise ValueError(msg)

    last = len(units) - 1
    specs: list[LayerSpec] = []
    for i, entry in enumerate(units):
        if isinstance(entry, LayerSpec):
            specs.append(entry)
        elif i == 0:
            specs.append(LayerSpec(int(entry), "Linear"))
        elif i == last:
            specs.append(LayerSpec(int(entry), output_activation or activation))
        else:
            specs.append(LayerSpec(int(entry), activation))

    network = NeuralNetwork()
    layers: list[Layer] = []
    for i, spec in enumerate(specs):
        if spec.name is not None:
            name = spec.name
        elif i == 0:
            name = "input"
        elif i == last:
            name = "output"
        else:
            name = f"hidden_{i}"
        layers.append(network.add_layer(Layer(name, spec.units, activation=spec.activation)))

    for i, (source, target) in enumerate(zip(layers, layers[1:], strict=False), start=1):
        network.add_connection(FullyConnected(source, target, initialize((target.units, source.units), init)))
        if bias and specs[i].bias:
            add_bias(network, target, bias_init)

    network.input_layer = layers[0]
    network.output_layer = layers[-1]
    return network


def autoencoder(
    input_units: int,
    hidden_units: int,
    *,
    activation: str = "Sigmoid",
    output_activation: str | None = None,
    bias: bool = True,
    init: InitSpec | None = None,
) -> NeuralNetwork:
    """Three-layer autoencoder ``input -> hidden -> output`` with ``output`` the size of ``input``."""
    return multilayer_perceptron(
        [
            LayerSpec(input_units, "Linear", name="input"),
            LayerSpec(hidden_units, activation, name="hidden"),
            LayerSpec(input_units, output_activation or activation, name="output"),
        ],
        bias=bias,
        init=init,
    )


def rbm(
    visible_units: int,
    hidden_units: int,
    *,
    bias: bool = True,
    init: InitSpec | None = None,
    bias_init: InitSpec | None = None,
) -> NeuralNetwork:
    """Restricted Boltzmann machine: one connection shared by both sampling directions."""
    network = NeuralNetwork()
    visible = network.add_layer(Layer("visible", visible_units, activation="Sigmoid"))
    hidden = network.add_layer(Layer("hidden", hidden_units, activation="Sigmoid"))
    network.add_connection(FullyConnected(visible, hidden, initialize((hidden_units, visible_units), init)))
    if bias:
        add_bias(network, visible, bias_init)
        add_bias(network, hidden, bias_init)
    network.input_layer = visible
    network.output_layer = hidden
    return network


def convolutional(
    input_shape: tuple[int, int, int],
    *,
    filters: int,
    kernel: tuple[int, int],
    pool: tuple[int, int],
    outputs: int,
    pooling: str = "max",
    stride: tuple[int, int] = (1, 1),
    activation: str = "Tanh",
    output_activation: str = "Softmax",
    init: InitSpec | None = None,
) -> NeuralNetwork:
    """``input -> conv -> pool -> output`` stack for ``[maps, rows, columns]`` inputs."""
    maps, rows, columns = input_shape
    network = NeuralNetwork()
    source = network.add_layer(Layer("input", maps * rows * columns))

    conv_rows = (rows - kernel[0]) // stride[0] + 1
    conv_columns = (columns - kernel[1]) // stride[1] + 1
    conv_layer = network.add_layer(Layer("conv", filters * conv_rows * conv_columns, activation=activation))
    network.add_connection(
        Conv2DConnection(
            source,
            conv_layer,
            input_feature_maps=maps,
            input_rows=rows,
            input_columns=columns,
            kernel_rows=kernel[0],
            kernel_columns=kernel[1],
            output_feature_maps=filters,
            stride_rows=stride[0],
            stride_columns=stride[1],
            weights=initialize((filters, maps, *kernel), init),
        ),
    )

    pool_rows = conv_rows // pool[0]
    pool_columns = conv_columns // pool[1]
    pool_layer = network.add_layer(Layer("pool", filters * pool_rows * pool_columns))
    network.add_connection(
        Subsampling2DConnection(
            conv_layer,
            pool_layer,
            feature_maps=filters,
            input_rows=conv_rows,
            input_columns=conv_columns,
            region_rows=pool[0],
            region_columns=pool[1],
            pooling=pooling,
        ),
    )

    output = network.add_layer(Layer("output", outputs, activation=output_activation))
    network.add_connection(FullyConnected(pool_layer, output, initialize((outputs, pool_layer.units), init)))
    add_bias(network, output)

    network.input_layer = source
    network.output_layer = output
    return network


__all__ = ["add_bias", "autoencoder", "convolutional", "multilayer_perceptron", "rbm"]
