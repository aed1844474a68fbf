# FILEPATH: src/neuralgraph/core/activations/registry.py

from __future__ import annotations

from typing import TYPE_CHECKING

from .analytic import (
    LinearActivation,
    ReLUActivation,
    SigmoidActivation,
    SimpleGELUActivation,
    SoftmaxActivation,
    SoftReLUActivation,
    TanhActivation,
    TeLUActivation,
)

if TYPE_CHECKING:
    from .base import ActivationFunction, ActivationInfo

ALL_ACTIVATIONS: tuple[type[ActivationFunction], ...] = (
    LinearActivation,
    TanhActivation,
    SigmoidActivation,
    ReLUActivation,
    SoftReLUActivation,
    SoftmaxActivation,
    TeLUActivation,
    SimpleGELUActivation,
)

ACTIVATIONS: dict[str, type[ActivationFunction]] = {}
for cls in ALL_ACTIVATIONS:
    ACTIVATIONS[cls.info.key] = cls

# Compatibility aliases
ACTIVATIONS["Identity"] = LinearActivation
ACTIVATIONS["Logistic"] = SigmoidActivation
ACTIVATIONS["Softplus"] = SoftReLUActivation


ACTIVATION_CATALOG: dict[str, ActivationInfo] = {cls.info.key: cls.info for cls in ALL_ACTIVATIONS}


def get_activation(key: str | None) -> ActivationFunction:
    """Instantiate the activation registered under ``key`` (``None`` means linear)."""
    if key is None:
        return LinearActivation()
    try:
        return ACTIVATIONS[key]()
    except KeyError:
        msg = f"Unknown activation {key!r}. Available: {sorted(ACTIVATIONS)}"
        raise KeyError(msg) from None


def group_activations_by_category() -> dict[str, tuple[ActivationInfo, ...]]:
    groups: dict[str, list[ActivationInfo]] = {}
    for info in ACTIVATION_CATALOG.values():
        groups.setdefault(info.category, []).append(info)
    return {k: tuple(sorted(v, key=lambda i: i.title)) for k, v in groups.items()}
