"""Top-level package for neuralgraph.

This module exposes a few conveniences and lazily forwards attribute access
to common subpackages so code like ``neuralgraph.core`` works after importing
``neuralgraph``.
"""

from __future__ import annotations

from importlib import import_module
from importlib.metadata import PackageNotFoundError, version as _pkg_version

try:  # Best-effort version string
    __version__ = _pkg_version("neuralgraph-toolkit")
except PackageNotFoundError:  # During editable installs/tests
    __version__ = "0.0.0"

version = __version__

_LAZY_SUBMODULES = {"core", "nn"}
_LAZY_CORE_ATTRIBUTES = {"LayerCalculator", "NeuralNetwork", "Layer", "calculate", "propagate"}


def __getattr__(name: str):
    """Lazy import selected subpackages on attribute access.

    Enables ``import neuralgraph
    neuralgraph.core`` style usage.
    """
    if name in _LAZY_SUBMODULES:
        return import_module(f"{__name__}.{name}")
    if name in _LAZY_CORE_ATTRIBUTES:
        return getattr(import_module(f"{__name__}.core"), name)
    msg = f"module '{__name__}' has no attribute '{name}'"
    raise AttributeError(msg)


__all__ = (
    "Layer",
    "LayerCalculator",
    "NeuralNetwork",
    "__version__",
    "calculate",
    "propagate",
    "version",
)
