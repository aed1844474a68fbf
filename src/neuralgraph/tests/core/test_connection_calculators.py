import pytest
import torch

from neuralgraph.core import (
    BiasConnection,
    Conv2DConnection,
    FullyConnected,
    Layer,
    Subsampling2DConnection,
    UnsupportedDirectionError,
)
from neuralgraph.core.calculation.connections import bias, conv2d, fully_connected, subsampling2d


def _inner(a: torch.Tensor, b: torch.Tensor) -> torch.Tensor:
    return (a * b).sum()


def test_fully_connected_forward_and_adjoint() -> None:
    src, dst = Layer("src", 3), Layer("dst", 2)
    w = torch.arange(6.0).reshape(2, 3)
    conn = FullyConnected(src, dst, w)
    x = torch.ones(3, 4)
    y = torch.ones(2, 4)

    assert torch.allclose(fully_connected(conn, x, dst), w @ x)
    assert torch.allclose(fully_connected(conn, y, src), w.t() @ y)


def test_bias_broadcasts_over_batch() -> None:
    bias_layer = Layer("b", 1, is_bias=True)
    target = Layer("t", 3)
    conn = BiasConnection(bias_layer, target, torch.tensor([1.0, 2.0, 3.0]))

    out = bias(conn, torch.ones(1, 4), target)

    assert out.shape == (3, 4)
    assert torch.allclose(out[:, 2], torch.tensor([1.0, 2.0, 3.0]))
    back = bias(conn, torch.ones(3, 4), bias_layer)
    assert torch.allclose(back, torch.full((1, 4), 6.0))


def test_conv2d_matches_hand_computed_sums() -> None:
    src, dst = Layer("src", 9), Layer("dst", 4)
    conn = Conv2DConnection(
        src,
        dst,
        input_feature_maps=1,
        input_rows=3,
        input_columns=3,
        kernel_rows=2,
        kernel_columns=2,
        output_feature_maps=1,
        weights=torch.ones(1, 1, 2, 2),
    )
    x = torch.arange(9.0).unsqueeze(1)

    out = conv2d(conn, x, dst)

    assert torch.allclose(out, torch.tensor([[8.0], [12.0], [20.0], [24.0]]))


def test_conv2d_adjoint_with_stride() -> None:
    src, dst = Layer("src", 2 * 5 * 5), Layer("dst", 3 * 2 * 2)
    conn = Conv2DConnection(
        src,
        dst,
        input_feature_maps=2,
        input_rows=5,
        input_columns=5,
        kernel_rows=2,
        kernel_columns=2,
        output_feature_maps=3,
        stride_rows=2,
        stride_columns=2,
        weights=torch.randn(3, 2, 2, 2, dtype=torch.float64),
    )
    x = torch.randn(50, 4, dtype=torch.float64)
    y = torch.randn(12, 4, dtype=torch.float64)

    forward = conv2d(conn, x, dst)
    backward = conv2d(conn, y, src)

    assert forward.shape == (12, 4)
    assert backward.shape == (50, 4)
    assert torch.allclose(_inner(forward, y), _inner(x, backward))


def test_conv2d_keeps_samples_in_their_columns() -> None:
    src, dst = Layer("src", 4), Layer("dst", 1)
    conn = Conv2DConnection(
        src,
        dst,
        input_feature_maps=1,
        input_rows=2,
        input_columns=2,
        kernel_rows=2,
        kernel_columns=2,
        output_feature_maps=1,
        weights=torch.ones(1, 1, 2, 2),
    )
    x = torch.tensor([[1.0, 10.0], [1.0, 10.0], [1.0, 10.0], [1.0, 10.0]])

    assert torch.allclose(conv2d(conn, x, dst), torch.tensor([[4.0, 40.0]]))


def _pool(pooling: str, rows: int = 4, columns: int = 4) -> Subsampling2DConnection:
    out_rows, out_columns = rows // 2, columns // 2
    return Subsampling2DConnection(
        Layer("src", rows * columns),
        Layer("dst", out_rows * out_columns),
        feature_maps=1,
        input_rows=rows,
        input_columns=columns,
        region_rows=2,
        region_columns=2,
        pooling=pooling,
    )


def test_max_and_average_pooling() -> None:
    x = torch.arange(16.0).unsqueeze(1)

    max_conn = _pool("max")
    avg_conn = _pool("avg")

    assert torch.allclose(subsampling2d(max_conn, x, max_conn.output_layer), torch.tensor([[5.0], [7.0], [13.0], [15.0]]))
    assert torch.allclose(
        subsampling2d(avg_conn, x, avg_conn.output_layer),
        torch.tensor([[2.5], [4.5], [10.5], [12.5]]),
    )


def test_average_pooling_adjoint_on_uneven_input() -> None:
    conn = _pool("average", rows=5, columns=5)
    x = torch.randn(25, 3, dtype=torch.float64)
    y = torch.randn(4, 3, dtype=torch.float64)

    forward = subsampling2d(conn, x, conn.output_layer)
    backward = subsampling2d(conn, y, conn.input_layer)

    assert backward.shape == (25, 3)
    assert torch.allclose(_inner(forward, y), _inner(x, backward))


def test_max_pooling_has_no_adjoint() -> None:
    conn = _pool("max")

    with pytest.raises(UnsupportedDirectionError):
        subsampling2d(conn, torch.ones(4, 1), conn.input_layer)
