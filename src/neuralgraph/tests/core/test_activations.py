import pytest
import torch

from neuralgraph.core.activations import (
    ACTIVATION_CATALOG,
    ACTIVATIONS,
    get_activation,
    group_activations_by_category,
)


def test_catalog_keys_match_registry() -> None:
    for key, info in ACTIVATION_CATALOG.items():
        assert ACTIVATIONS[key].info is info


def test_softmax_normalises_each_sample() -> None:
    value = torch.randn(5, 3)

    out = get_activation("Softmax")(value)

    assert torch.allclose(out.sum(dim=0), torch.ones(3))


def test_saturating_and_rectifying_functions() -> None:
    value = torch.tensor([[-2.0, 0.0, 2.0]])

    assert torch.allclose(get_activation("Tanh")(value), torch.tanh(value))
    assert torch.allclose(get_activation("Sigmoid")(value), torch.sigmoid(value))
    assert torch.allclose(get_activation("ReLU")(value), torch.tensor([[0.0, 0.0, 2.0]]))
    assert torch.all(get_activation("SoftReLU")(value) > 0)
    assert get_activation(None)(value) is value


def test_aliases_resolve_to_same_function() -> None:
    assert type(get_activation("Logistic")) is type(get_activation("Sigmoid"))
    assert type(get_activation("Identity")) is type(get_activation("Linear"))


def test_unknown_activation_lists_choices() -> None:
    with pytest.raises(KeyError, match="Available"):
        get_activation("Cosh")


def test_grouping_by_category() -> None:
    groups = group_activations_by_category()

    assert {info.key for info in groups["Saturating"]} == {"Tanh", "Sigmoid"}
    assert sum(len(v) for v in groups.values()) == len(ACTIVATION_CATALOG)
