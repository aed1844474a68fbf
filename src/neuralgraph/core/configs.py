# FILEPATH: src/neuralgraph/core/configs.py

from __future__ import annotations

from dataclasses import dataclass

import torch

_DTYPE_ALIASES: dict[str, str] = {
    "float": "float32",
    "fp32": "float32",
    "single": "float32",
    "double": "float64",
    "fp64": "float64",
    "half": "float16",
    "fp16": "float16",
    "bf16": "bfloat16",
}

_SUPPORTED_DTYPES: dict[str, torch.dtype] = {
    "float16": torch.float16,
    "bfloat16": torch.bfloat16,
    "float32": torch.float32,
    "float64": torch.float64,
}


@dataclass(frozen=True)
class CalculationConfig:
    """Settings shared by the layer calculator and the propagation drivers.

    Attributes:
        validate_shapes: Check every contribution against the destination layer
        apply_activations: Apply each destination layer's activation when it is finalised.
            Disabled for linear signal propagation (e.g. pushing an error signal backwards).
        dtype: Floating point type used for seeded values ("float32", "float64", ...)
        device: Device used for seeded values

    """

    validate_shapes: bool = True
    apply_activations: bool = True
    dtype: str = "float32"
    device: str = "cpu"

    def __post_init__(self) -> None:
        # Frozen dataclass: normalise through object.__setattr__
        name = str(self.dtype).strip().lower().removeprefix("torch.")
        name = _DTYPE_ALIASES.get(name, name)
        if name not in _SUPPORTED_DTYPES:
            msg = f"Unsupported dtype {self.dtype!r}; expected one of {sorted(_SUPPORTED_DTYPES)}"
            raise ValueError(msg)
        object.__setattr__(self, "dtype", name)
        object.__setattr__(self, "device", str(self.device).strip().lower() or "cpu")

    @property
    def torch_dtype(self) -> torch.dtype:
        return _SUPPORTED_DTYPES[self.dtype]

    @property
    def torch_device(self) -> torch.device:
        return torch.device(self.device)


__all__ = ["CalculationConfig"]
