"""Core graph model and layer calculation engine."""

from .architecture import (
    BiasConnection,
    Connection,
    Conv2DConnection,
    FullyConnected,
    Layer,
    NeuralNetwork,
    Subsampling2DConnection,
    connections_of,
    opposite_layer,
)
from .calculation import (
    CalculationCandidate,
    ConnectionCalculatorRegistry,
    LayerCalculator,
    LayerState,
    TraversalState,
    calculate,
    default_registry,
    order,
    plan,
)
from .configs import CalculationConfig
from .errors import (
    CalculationError,
    CalculatorNotFoundError,
    InvalidCalculationRequestError,
    MissingDependencyValueError,
    ShapeMismatchError,
    UnresolvableTargetError,
    UnsupportedDirectionError,
)
from .propagation import (
    GibbsSample,
    RBMCalculator,
    bias_values,
    propagate,
    propagate_backward,
    upstream_network,
)

__all__ = [
    "BiasConnection",
    "CalculationCandidate",
    "CalculationConfig",
    "CalculationError",
    "CalculatorNotFoundError",
    "Connection",
    "ConnectionCalculatorRegistry",
    "Conv2DConnection",
    "FullyConnected",
    "GibbsSample",
    "InvalidCalculationRequestError",
    "Layer",
    "LayerCalculator",
    "LayerState",
    "MissingDependencyValueError",
    "NeuralNetwork",
    "RBMCalculator",
    "ShapeMismatchError",
    "Subsampling2DConnection",
    "TraversalState",
    "UnresolvableTargetError",
    "UnsupportedDirectionError",
    "bias_values",
    "calculate",
    "connections_of",
    "default_registry",
    "opposite_layer",
    "order",
    "plan",
    "propagate",
    "propagate_backward",
    "upstream_network",
]
