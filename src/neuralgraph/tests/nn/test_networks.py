import pytest
import torch

from neuralgraph.core import BiasConnection, FullyConnected
from neuralgraph.nn import InitSpec, LayerSpec, init, networks
from neuralgraph.nn.init import initialize


def test_init_spec_to_dict() -> None:
    spec = init.normal(mean=0.5, std=0.2)

    assert spec.to_dict() == {"name": "normal", "params": {"mean": 0.5, "std": 0.2}}


def test_initialize_constant_and_default_zeros() -> None:
    assert torch.equal(initialize((2, 3), init.constant(0.25)), torch.full((2, 3), 0.25))
    assert torch.equal(initialize((4,), None), torch.zeros(4))


def test_matrix_initializers_accept_vectors() -> None:
    for spec in (init.xavier_uniform(), init.orthogonal(), init.kaiming_normal()):
        out = initialize((5,), spec)
        assert out.shape == (5,)
        assert torch.all(out.abs() <= 2.0)


def test_unknown_initializer_raises() -> None:
    with pytest.raises(ValueError, match="Unknown initializer"):
        initialize((2, 2), InitSpec("lecun"))


def test_mlp_structure() -> None:
    net = networks.multilayer_perceptron([4, 5, 6, 2], activation="ReLU", output_activation="Softmax")

    names = [layer.name for layer in net.layers if not layer.is_bias]
    assert names == ["input", "hidden_1", "hidden_2", "output"]
    assert len(net.bias_layers()) == 3
    assert net.input_layer.activation == "Linear"
    assert net.get_layer("hidden_2").activation == "ReLU"
    assert net.output_layer.activation == "Softmax"
    fc = [c for c in net.connections if isinstance(c, FullyConnected)]
    assert [tuple(c.weights.shape) for c in fc] == [(5, 4), (6, 5), (2, 6)]


def test_mlp_honours_layer_specs() -> None:
    net = networks.multilayer_perceptron(
        [LayerSpec(3, name="pixels"), LayerSpec(2, "Tanh", name="code", bias=False), 3],
    )

    assert net.input_layer.name == "pixels"
    assert net.get_layer("code").activation == "Tanh"
    biased = {c.output_layer.name for c in net.connections if isinstance(c, BiasConnection)}
    assert biased == {"output"}


def test_mlp_needs_two_layers() -> None:
    with pytest.raises(ValueError, match="at least"):
        networks.multilayer_perceptron([3])


def test_rbm_layout() -> None:
    machine = networks.rbm(6, 3, bias=False)

    assert [layer.name for layer in machine.layers] == ["visible", "hidden"]
    assert machine.input_layer.activation == machine.output_layer.activation == "Sigmoid"
    assert len(machine.connections) == 1
