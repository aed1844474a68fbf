"""Spec definitions for the network builders."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class InitSpec:
    """Weight initialization specification."""

    name: str
    params: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "params": self.params}


@dataclass
class LayerSpec:
    """Size and output function of one layer in a builder call."""

    units: int
    activation: str = "Linear"
    name: str | None = None
    bias: bool = True
