"""Weight initialization helpers for connections.

These functions return InitSpec objects that the network builders accept.
:func:`initialize` materialises a spec into a weight tensor with ``torch.nn.init``.
"""

from __future__ import annotations

import math

import torch

from .specs import InitSpec


def normal(mean: float = 0.0, std: float = 0.1) -> InitSpec:
    """Normal (Gaussian) initialization.

    Args:
        mean: Mean of the distribution
        std: Standard deviation

    Returns:
        InitSpec for normal initialization

    """
    return InitSpec(name="normal", params={"mean": mean, "std": std})


def uniform(min: float = -0.24, max: float = 0.24) -> InitSpec:
    """Uniform initialization.

    Args:
        min: Minimum value
        max: Maximum value

    Returns:
        InitSpec for uniform initialization

    """
    return InitSpec(name="uniform", params={"min": min, "max": max})


def xavier_normal(gain: float = 1.0) -> InitSpec:
    """Xavier normal initialization (Glorot normal)."""
    return InitSpec(name="xavier_normal", params={"gain": gain})


def xavier_uniform(gain: float = 1.0) -> InitSpec:
    """Xavier uniform initialization (Glorot uniform)."""
    return InitSpec(name="xavier_uniform", params={"gain": gain})


def kaiming_normal(nonlinearity: str = "relu", a: float = 0.0) -> InitSpec:
    """Kaiming normal initialization (He normal).

    Args:
        nonlinearity: Type of nonlinearity ('relu', 'leaky_relu', etc.)
        a: Negative slope for leaky_relu

    Returns:
        InitSpec for Kaiming normal initialization

    """
    return InitSpec(name="kaiming_normal", params={"nonlinearity": nonlinearity, "a": a})


def kaiming_uniform(nonlinearity: str = "relu", a: float = 0.0) -> InitSpec:
    """Kaiming uniform initialization (He uniform)."""
    return InitSpec(name="kaiming_uniform", params={"nonlinearity": nonlinearity, "a": a})


def orthogonal(gain: float = 1.0) -> InitSpec:
    """Orthogonal initialization."""
    return InitSpec(name="orthogonal", params={"gain": gain})


def constant(value: float = 1.0) -> InitSpec:
    """Constant initialization.

    Args:
        value: Constant value for all weights

    Returns:
        InitSpec for constant initialization

    """
    return InitSpec(name="constant", params={"value": value})


def zeros() -> InitSpec:
    return constant(0.0)


def _fan_in_uniform(tensor: torch.Tensor, gain: float) -> torch.Tensor:
    # 1-D tensors (bias vectors) have no fan-in/fan-out split
    bound = gain * math.sqrt(3.0 / max(tensor.numel(), 1))
    return torch.nn.init.uniform_(tensor, -bound, bound)


def initialize(shape: tuple[int, ...] | torch.Size, spec: InitSpec | None, *, dtype: torch.dtype = torch.float32) -> torch.Tensor:
    """Create a tensor of ``shape`` filled according to ``spec`` (zeros when ``None``)."""
    tensor = torch.empty(tuple(shape), dtype=dtype)
    if spec is None:
        return torch.nn.init.zeros_(tensor)
    p = spec.params
    name = spec.name
    with torch.no_grad():
        if name == "normal":
            return torch.nn.init.normal_(tensor, mean=p.get("mean", 0.0), std=p.get("std", 0.1))
        if name == "uniform":
            return torch.nn.init.uniform_(tensor, a=p.get("min", p.get("a", -0.24)), b=p.get("max", p.get("b", 0.24)))
        if name == "constant":
            return torch.nn.init.constant_(tensor, p.get("value", 1.0))
        if name in {"xavier_normal", "xavier_uniform", "orthogonal"} and tensor.dim() < 2:
            return _fan_in_uniform(tensor, p.get("gain", 1.0))
        if name == "xavier_normal":
            return torch.nn.init.xavier_normal_(tensor, gain=p.get("gain", 1.0))
        if name == "xavier_uniform":
            return torch.nn.init.xavier_uniform_(tensor, gain=p.get("gain", 1.0))
        if name == "orthogonal":
            return torch.nn.init.orthogonal_(tensor, gain=p.get("gain", 1.0))
        if name in {"kaiming_normal", "kaiming_uniform"} and tensor.dim() < 2:
            return _fan_in_uniform(tensor, math.sqrt(2.0))
        if name == "kaiming_normal":
            return torch.nn.init.kaiming_normal_(tensor, a=p.get("a", 0.0), nonlinearity=p.get("nonlinearity", "relu"))
        if name == "kaiming_uniform":
            return torch.nn.init.kaiming_uniform_(tensor, a=p.get("a", 0.0), nonlinearity=p.get("nonlinearity", "relu"))
    msg = f"Unknown initializer {name!r}"
    raise ValueError(msg)


__all__ = [
    "constant",
    "initialize",
    "kaiming_normal",
    "kaiming_uniform",
    "normal",
    "orthogonal",
    "uniform",
    "xavier_normal",
    "xavier_uniform",
    "zeros",
]
