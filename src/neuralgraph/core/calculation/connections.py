# FILEPATH: src/neuralgraph/core/calculation/connections.py
"""Built-in connection calculators.

Each calculator maps the value matrix of a connection's source layer to a
``[target units, batch]`` contribution. When the target is the connection's
``output_layer`` the forward kernel is applied, otherwise its adjoint, so the
same connection serves both directions of a traversal.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import torch
import torch.nn.functional as F

from ..errors import UnsupportedDirectionError
from ..validators import batch_to_volume, volume_to_batch

if TYPE_CHECKING:
    from ..architecture import (
        BiasConnection,
        Conv2DConnection,
        FullyConnected,
        Layer,
        Subsampling2DConnection,
    )


def _weights_like(weights: torch.Tensor, value: torch.Tensor) -> torch.Tensor:
    return weights.to(device=value.device, dtype=value.dtype)


def fully_connected(connection: FullyConnected, value: torch.Tensor, target_layer: Layer) -> torch.Tensor:
    weights = _weights_like(connection.weights, value)
    if connection.is_forward(target_layer):
        return weights @ value
    return weights.t() @ value


def bias(connection: BiasConnection, value: torch.Tensor, target_layer: Layer) -> torch.Tensor:
    weights = _weights_like(connection.weights, value)
    if connection.is_forward(target_layer):
        # value is the [1, batch] row of ones held by the bias layer
        return weights.unsqueeze(1) * value
    return weights.unsqueeze(0) @ value


def conv2d(connection: Conv2DConnection, value: torch.Tensor, target_layer: Layer) -> torch.Tensor:
    weights = _weights_like(connection.weights, value)
    stride = (connection.stride_rows, connection.stride_columns)
    if connection.is_forward(target_layer):
        x = volume_to_batch(
            value,
            maps=connection.input_feature_maps,
            rows=connection.input_rows,
            columns=connection.input_columns,
        )
        return batch_to_volume(F.conv2d(x, weights, stride=stride))

    y = volume_to_batch(
        value,
        maps=connection.output_feature_maps,
        rows=connection.output_rows,
        columns=connection.output_columns,
    )
    # Rows/columns dropped by the forward stride are restored as zeros
    padding = (
        connection.input_rows - ((connection.output_rows - 1) * connection.stride_rows + connection.kernel_rows),
        connection.input_columns
        - ((connection.output_columns - 1) * connection.stride_columns + connection.kernel_columns),
    )
    return batch_to_volume(F.conv_transpose2d(y, weights, stride=stride, output_padding=padding))


def subsampling2d(connection: Subsampling2DConnection, value: torch.Tensor, target_layer: Layer) -> torch.Tensor:
    region = (connection.region_rows, connection.region_columns)
    if connection.is_forward(target_layer):
        x = volume_to_batch(
            value,
            maps=connection.feature_maps,
            rows=connection.input_rows,
            columns=connection.input_columns,
        )
        if connection.pooling == "max":
            return batch_to_volume(F.max_pool2d(x, kernel_size=region, stride=region))
        return batch_to_volume(F.avg_pool2d(x, kernel_size=region, stride=region))

    if connection.pooling == "max":
        msg = f"{connection!r}: max pooling has no stateless adjoint; the winning positions are not kept"
        raise UnsupportedDirectionError(connection, target_layer, msg)
    y = volume_to_batch(
        value,
        maps=connection.feature_maps,
        rows=connection.output_rows,
        columns=connection.output_columns,
    )
    share = torch.full(
        (connection.feature_maps, 1, *region),
        1.0 / (region[0] * region[1]),
        device=value.device,
        dtype=value.dtype,
    )
    padding = (
        connection.input_rows - connection.output_rows * connection.region_rows,
        connection.input_columns - connection.output_columns * connection.region_columns,
    )
    spread = F.conv_transpose2d(y, share, stride=region, output_padding=padding, groups=connection.feature_maps)
    return batch_to_volume(spread)


__all__ = ["bias", "conv2d", "fully_connected", "subsampling2d"]
