"""Builders for ready-made network topologies.

Example:
    >>> from neuralgraph.nn import init, networks
    >>>
    >>> net = networks.multilayer_perceptron([10, 20, 5], activation="Tanh", init=init.xavier_uniform())
    >>> rbm = networks.rbm(visible_units=6, hidden_units=3, init=init.normal(std=0.01))

"""

from . import init, networks
from .networks import add_bias, autoencoder, convolutional, multilayer_perceptron, rbm
from .specs import InitSpec, LayerSpec

__all__ = [
    "InitSpec",
    "LayerSpec",
    "add_bias",
    "autoencoder",
    "convolutional",
    "init",
    "multilayer_perceptron",
    "networks",
    "rbm",
]
