"""Graph traversal planning and layer value calculation."""

from .candidates import CalculationCandidate, LayerState, TraversalState
from .layer_calculator import LayerCalculator, calculate
from .planner import order, plan
from .registry import (
    BUILTIN_CALCULATORS,
    CalculatorEntry,
    ConnectionCalculator,
    ConnectionCalculatorRegistry,
    default_registry,
)

__all__ = [
    "BUILTIN_CALCULATORS",
    "CalculationCandidate",
    "CalculatorEntry",
    "ConnectionCalculator",
    "ConnectionCalculatorRegistry",
    "LayerCalculator",
    "LayerState",
    "TraversalState",
    "calculate",
    "default_registry",
    "order",
    "plan",
]
