"""Validation helpers shared by the calculators."""

from __future__ import annotations

from typing import TYPE_CHECKING

import torch

from .errors import ShapeMismatchError

if TYPE_CHECKING:
    from .architecture import Layer


def validate_value_matrix(value: torch.Tensor, layer: Layer) -> tuple[int, int]:
    """Ensure ``value`` follows the ``[units, batch]`` convention of ``layer``."""
    if not isinstance(value, torch.Tensor):
        msg = f"Value for layer {layer.name!r} must be a torch.Tensor; received {type(value).__name__}"
        raise TypeError(msg)
    if value.dim() != 2 or value.shape[0] != layer.units:
        batch = value.shape[-1] if value.dim() > 0 else 0
        raise ShapeMismatchError(layer, (layer.units, batch), tuple(value.shape))
    return tuple(value.shape)  # type: ignore[return-value]


def validate_contribution(contribution: torch.Tensor, layer: Layer, *, batch: int) -> None:
    """Ensure a connection's output can be accumulated into ``layer``."""
    expected = (layer.units, batch)
    if not isinstance(contribution, torch.Tensor) or tuple(contribution.shape) != expected:
        actual = tuple(contribution.shape) if isinstance(contribution, torch.Tensor) else ()
        raise ShapeMismatchError(layer, expected, actual)


def volume_to_batch(value: torch.Tensor, *, maps: int, rows: int, columns: int) -> torch.Tensor:
    """Reshape a ``[maps*rows*columns, batch]`` matrix into ``[batch, maps, rows, columns]``."""
    return value.t().reshape(value.shape[1], maps, rows, columns)


def batch_to_volume(value: torch.Tensor) -> torch.Tensor:
    """Inverse of :func:`volume_to_batch`."""
    return value.reshape(value.shape[0], -1).t().contiguous()


__all__ = ["batch_to_volume", "validate_contribution", "validate_value_matrix", "volume_to_batch"]
