from __future__ import annotations

"""Symmetric random-walk proposal distributions.

The Metropolis core adds a proposal increment to the current state and accepts
with the plain density ratio, with no Hastings correction. That is only valid
for increments whose density is symmetric around zero, so every proposal here
sets ``symmetric = True`` and the core refuses anything that does not.
"""

import math

import torch

__all__ = ["NormalProposal", "UniformProposal", "is_symmetric"]


def _check_positive(name: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value) or value <= 0.0:
        raise ValueError(f"{name} must be a finite positive number, got {value}")
    return value


def is_symmetric(proposal) -> bool:
    """Return True if *proposal* declares a zero-centred symmetric increment."""
    return bool(getattr(proposal, "symmetric", False))


class NormalProposal:
    """Zero-mean normal increment ``N(0, scale^2)``."""

    symmetric = True

    def __init__(self, scale: float = 1.0) -> None:
        self.scale = _check_positive("scale", scale)

    def sample(self, generator: torch.Generator, dtype: torch.dtype = torch.float64) -> torch.Tensor:
        return torch.randn((), generator=generator, dtype=dtype) * self.scale

    def __repr__(self) -> str:
        return f"NormalProposal(scale={self.scale})"


class UniformProposal:
    """Increment drawn uniformly from ``[-half_width, half_width)``."""

    symmetric = True

    def __init__(self, half_width: float) -> None:
        self.half_width = _check_positive("half_width", half_width)

    def sample(self, generator: torch.Generator, dtype: torch.dtype = torch.float64) -> torch.Tensor:
        u = torch.rand((), generator=generator, dtype=dtype)
        return (2.0 * u - 1.0) * self.half_width

    def __repr__(self) -> str:
        return f"UniformProposal(half_width={self.half_width})"
