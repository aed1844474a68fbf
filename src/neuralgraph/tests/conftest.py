import os
import sys

import pytest
import torch

# Ensure 'src' is on sys.path for local runs
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.dirname(__file__))))
src_path = os.path.join(project_root, "src")
if os.path.isdir(src_path) and src_path not in sys.path:
    sys.path.insert(0, src_path)

from neuralgraph.core import FullyConnected, Layer, NeuralNetwork  # noqa: E402


def pytest_runtest_setup(item) -> None:
    # Set a default seed for determinism unless a test overrides it
    torch.manual_seed(0)


@pytest.fixture
def three_layer_net() -> NeuralNetwork:
    """Input(3) - Hidden(4) - Output(2), linear activations, float64 weights."""
    inp = Layer("input", 3)
    hidden = Layer("hidden", 4)
    out = Layer("output", 2)
    w_ih = torch.randn(4, 3, dtype=torch.float64)
    w_ho = torch.randn(2, 4, dtype=torch.float64)
    return NeuralNetwork(
        [inp, hidden, out],
        [FullyConnected(inp, hidden, w_ih), FullyConnected(hidden, out, w_ho)],
        input_layer=inp,
        output_layer=out,
    )
