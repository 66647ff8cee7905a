from __future__ import annotations

"""Single-chain random-walk Metropolis sampler over a scalar state.

The loop follows the textbook recipe: propose ``x' = x + d`` with ``d`` drawn
from a symmetric proposal, accept if ``p(x') > p(x)`` and otherwise accept with
probability ``p(x') / p(x)``. ``p`` is an unnormalised density.

Precondition: ``target_density`` must be strictly positive on every state the
chain can reach. This is not checked. If the current density is zero the ratio
is infinite (every candidate is accepted) or NaN (every candidate is rejected).
Negative densities make the sign of the ratio meaningless: from a positive
current density a negative candidate is always rejected, but a chain sitting at
a negative density sees negative over negative ratios and accepts freely.
"""

import numbers
from typing import Callable, Optional, Union

import torch
from tqdm import tqdm

from .chain import Chain
from .proposals import is_symmetric

__all__ = [
    "FIXED_RUN_STEPS",
    "FIXED_RUN_BURNIN",
    "run_chain",
    "stop_after",
    "fixed_run",
]

Tensor = torch.Tensor
StopPredicate = Callable[[Chain], bool]
TargetDensity = Callable[[Tensor], Union[float, Tensor]]

FIXED_RUN_STEPS = 5000
FIXED_RUN_BURNIN = 1000


def _density(target_density: TargetDensity, state: Tensor) -> Tensor:
    # Ratios are always taken in double precision whatever the state dtype.
    return torch.as_tensor(target_density(state), dtype=torch.float64).reshape(())


def run_chain(
    initial_state: Union[float, Tensor],
    proposal,
    target_density: TargetDensity,
    stop_predicate: StopPredicate,
    generator: torch.Generator,
    *,
    dtype: torch.dtype = torch.float64,
    progress: bool = False,
) -> Chain:
    """Run a Metropolis chain until ``stop_predicate(chain)`` returns True.

    Args:
        initial_state: starting scalar, stored as ``chain.value[0]``.
        proposal: object with ``sample(generator, dtype)`` returning a scalar
            increment and ``symmetric = True``.
        target_density: unnormalised density, state -> non-negative number.
        stop_predicate: evaluated once before every step.
        generator: random source shared by the proposal and the acceptance test.
        dtype: floating point dtype of the state.
        progress: show a tqdm counter of the steps taken.

    Returns:
        The chain with ``burnin == 0``.
    """
    if not is_symmetric(proposal):
        raise TypeError(
            f"{type(proposal).__name__} is not a symmetric proposal; the Metropolis rule "
            "used here has no Hastings correction"
        )

    chain = Chain(initial_state, dtype=dtype)
    current = chain.current
    current_density = _density(target_density, current)

    with tqdm(desc="MCMC", unit="step", disable=not progress) as bar:
        while not stop_predicate(chain):
            candidate = current + proposal.sample(generator, dtype)
            candidate_density = _density(target_density, candidate)

            if candidate_density > current_density:
                accept = True
            else:
                u = torch.rand((), generator=generator, dtype=torch.float64)
                accept = bool(u < candidate_density / current_density)

            if accept:
                current = candidate
                current_density = candidate_density
            chain.append(current)
            bar.update(1)

    return chain


def stop_after(n: int) -> StopPredicate:
    """Predicate that is True once the chain holds more than *n* states."""
    if isinstance(n, bool) or not isinstance(n, numbers.Integral) or n < 0:
        raise ValueError(f"stop_after expects a non-negative integer, got {n!r}")

    def _stop(chain: Chain) -> bool:
        return len(chain.value) > n

    return _stop


def fixed_run(
    initial_state: float,
    proposal,
    target_density: TargetDensity,
    generator: Optional[torch.Generator] = None,
) -> Chain:
    """Run 5000 steps in double precision and mark the first 1000 as burn-in."""
    if generator is None:
        generator = torch.Generator()
        generator.seed()
    chain = run_chain(initial_state, proposal, target_density, stop_after(FIXED_RUN_STEPS), generator)
    chain.burnin = FIXED_RUN_BURNIN
    return chain
