from __future__ import annotations

"""Chain container returned by the Metropolis sampler.

A :class:`Chain` is both the raw trace of a run and, once a burn-in cut has
been set, an empirical posterior that can be resampled with :meth:`Chain.sample`.
"""

from typing import List, Union

import torch

__all__ = ["Chain"]

Tensor = torch.Tensor


class Chain:
    """Ordered sequence of visited states plus a burn-in marker.

    Notes
    -----
    ``value[0]`` is always the initial state. Entries before ``burnin`` are kept
    but excluded from :meth:`posterior` and :meth:`sample`.
    """

    def __init__(self, initial_state: Union[float, Tensor], *, dtype: torch.dtype = torch.float64) -> None:
        if not dtype.is_floating_point:
            raise TypeError(f"Chain dtype must be a floating point dtype, got {dtype}")
        self.dtype = dtype
        self.value: List[Tensor] = [torch.as_tensor(initial_state, dtype=dtype).reshape(())]
        self._burnin = 0

    # ------------------------------------------------------------------
    @property
    def burnin(self) -> int:
        return self._burnin

    @burnin.setter
    def burnin(self, index: int) -> None:
        index = int(index)
        if not 0 <= index <= len(self.value):
            raise ValueError(f"burnin must lie in [0, {len(self.value)}], got {index}")
        self._burnin = index

    def __len__(self) -> int:
        return len(self.value)

    def __repr__(self) -> str:
        return f"Chain(len={len(self.value)}, burnin={self._burnin}, dtype={self.dtype})"

    def append(self, state: Tensor) -> None:
        self.value.append(state)

    @property
    def current(self) -> Tensor:
        return self.value[-1]

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------
    def as_tensor(self) -> Tensor:
        """Full trace as a 1-D tensor (burn-in included)."""
        return torch.stack(self.value)

    def posterior(self) -> Tensor:
        """Post burn-in states as a 1-D tensor."""
        return self.as_tensor()[self._burnin:]

    def acceptance_rate(self) -> float:
        """Fraction of steps whose state differs from the previous one."""
        if len(self.value) < 2:
            return float("nan")
        trace = self.as_tensor()
        moved = trace[1:] != trace[:-1]
        return moved.double().mean().item()

    # ------------------------------------------------------------------
    # Resampling
    # ------------------------------------------------------------------
    def sample_index(self, generator: torch.Generator) -> int:
        """Uniform index over ``[burnin, len(value))``."""
        if self._burnin >= len(self.value):
            raise IndexError(
                f"Cannot resample: burnin ({self._burnin}) leaves no states in a chain of length {len(self.value)}"
            )
        return int(torch.randint(self._burnin, len(self.value), (), generator=generator).item())

    def sample(self, generator: torch.Generator) -> Tensor:
        """Draw one post burn-in state uniformly at random."""
        return self.value[self.sample_index(generator)]
