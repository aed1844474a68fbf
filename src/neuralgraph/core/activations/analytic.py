# FILEPATH: src/neuralgraph/core/activations/analytic.py

from __future__ import annotations

import torch

from .base import ActivationFunction, ActivationInfo


class LinearActivation(ActivationFunction):
    info = ActivationInfo(
        key="Linear",
        title="Linear",
        description="Identity; the summed input is the output.",
        category="Linear",
    )

    def apply(self, value: torch.Tensor) -> torch.Tensor:
        return value


class TanhActivation(ActivationFunction):
    info = ActivationInfo(
        key="Tanh",
        title="Tanh",
        description="Hyperbolic tangent nonlinearity.",
        category="Saturating",
    )

    def apply(self, value: torch.Tensor) -> torch.Tensor:
        return torch.tanh(value)


class SigmoidActivation(ActivationFunction):
    info = ActivationInfo(
        key="Sigmoid",
        title="Sigmoid",
        description="Logistic function 1 / (1 + exp(-x)).",
        category="Saturating",
    )

    def apply(self, value: torch.Tensor) -> torch.Tensor:
        return torch.sigmoid(value)


class ReLUActivation(ActivationFunction):
    info = ActivationInfo(
        key="ReLU",
        title="ReLU",
        description="Rectified Linear Unit nonlinearity.",
        category="Rectifying",
    )

    def apply(self, value: torch.Tensor) -> torch.Tensor:
        return torch.relu(value)


class SoftReLUActivation(ActivationFunction):
    info = ActivationInfo(
        key="SoftReLU",
        title="Soft ReLU",
        description="Smooth rectifier log(1 + exp(x)).",
        category="Rectifying",
    )

    def apply(self, value: torch.Tensor) -> torch.Tensor:
        return torch.nn.functional.softplus(value)


class SoftmaxActivation(ActivationFunction):
    info = ActivationInfo(
        key="Softmax",
        title="Softmax",
        description="Normalised exponential over the units of each sample.",
        category="Normalising",
    )

    def apply(self, value: torch.Tensor) -> torch.Tensor:
        return torch.softmax(value, dim=0)


class TeLUActivation(ActivationFunction):
    info = ActivationInfo(
        key="TeLU",
        title="TeLU",
        description="Tanh-exp linear unit approximation.",
        category="Rectifying",
    )

    def apply(self, value: torch.Tensor) -> torch.Tensor:
        return value * torch.tanh(torch.exp(value))


class SimpleGELUActivation(ActivationFunction):
    info = ActivationInfo(
        key="SimpleGELU",
        title="Simple GELU",
        description="Simplified GELU approximation.",
        category="Rectifying",
    )

    def apply(self, value: torch.Tensor) -> torch.Tensor:
        return 0.5 * value * torch.tanh(0.8 * value) + 0.5 * value
