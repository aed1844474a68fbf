# FILEPATH: src/neuralgraph/core/activations/base.py

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import torch


@dataclass(frozen=True)
class ActivationInfo:
    key: str
    title: str
    description: str
    category: str = "General"


class ActivationFunction:
    """Output function applied to a layer's summed contributions.

    Value matrices are ``[units, batch]``; functions that normalise across
    units (softmax) therefore work along dim 0.
    """

    info: ClassVar[ActivationInfo]

    def __call__(self, value: torch.Tensor) -> torch.Tensor:
        return self.apply(value)

    def apply(self, value: torch.Tensor) -> torch.Tensor:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


__all__ = ["ActivationFunction", "ActivationInfo"]
