"""Activation functions applied when a layer's value is finalised."""

from .base import ActivationFunction, ActivationInfo
from .registry import (
    ACTIVATION_CATALOG,
    ACTIVATIONS,
    ALL_ACTIVATIONS,
    get_activation,
    group_activations_by_category,
)

__all__ = [
    "ACTIVATIONS",
    "ACTIVATION_CATALOG",
    "ALL_ACTIVATIONS",
    "ActivationFunction",
    "ActivationInfo",
    "get_activation",
    "group_activations_by_category",
]
