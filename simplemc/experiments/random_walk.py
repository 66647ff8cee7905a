#!/usr/bin/env python3
"""
Drift-diffusion random walk with first-passage decisions

A walk starts at 0 and accumulates ``N(drift, sd)`` increments until it leaves
the band ``[-criterion, criterion]``. Leaving through the top is a "top"
decision, through the bottom a "bottom" decision; the trace length is the
decision latency.
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np
import torch
from tqdm import tqdm

__all__ = [
    "NoDecisionError",
    "WalkResult",
    "WalkSummary",
    "simulate_walk",
    "simulate_walks",
    "summarise_walks",
]

DEFAULT_MAX_STEPS = 10000


class NoDecisionError(RuntimeError):
    """Raised when a walk never crosses the criterion within its step cap."""


@dataclass
class WalkResult:
    choice: bool  # True for a top crossing
    trace: torch.Tensor

    @property
    def latency(self) -> int:
        return int(self.trace.shape[0])


@dataclass
class WalkSummary:
    n_trials: int
    proportion: Dict[str, float]
    mean_latency: Dict[str, float]


def simulate_walk(
    drift: float,
    sd: float,
    criterion: float,
    generator: torch.Generator,
    max_steps: int = DEFAULT_MAX_STEPS,
) -> WalkResult:
    """Run one walk; raise :class:`NoDecisionError` if it never decides."""
    if not math.isfinite(sd) or sd <= 0:
        raise ValueError(f"sd must be a finite positive number, got {sd}")
    if criterion <= 0:
        raise ValueError(f"criterion must be positive, got {criterion}")

    trace = [0.0]
    position = 0.0
    for _ in range(1, max_steps):
        position += drift + sd * torch.randn((), generator=generator, dtype=torch.float64).item()
        trace.append(position)
        if abs(position) > criterion:
            return WalkResult(choice=position > 0.0, trace=torch.tensor(trace, dtype=torch.float64))

    raise NoDecisionError(f"walk did not cross +/-{criterion} within {max_steps} states")


def simulate_walks(
    n_trials: int,
    drift: float,
    sd: float,
    criterion: float,
    generator: torch.Generator,
    *,
    max_steps: int = DEFAULT_MAX_STEPS,
    progress: bool = False,
) -> List[WalkResult]:
    """Run *n_trials* walks, dropping the ones that never decide."""
    results: List[WalkResult] = []
    for _ in tqdm(range(n_trials), desc="WALK", disable=not progress):
        try:
            results.append(simulate_walk(drift, sd, criterion, generator, max_steps=max_steps))
        except NoDecisionError:
            continue
    return results


def _side_latency(latencies: List[int]) -> float:
    return float(np.mean(latencies)) if latencies else float("nan")


def summarise_walks(results: List[WalkResult], n_trials: Optional[int] = None) -> WalkSummary:
    """Per-side decision proportion and mean latency.

    Proportions are taken over the decided walks, matching the histograms.
    """
    top = [r.latency for r in results if r.choice]
    bottom = [r.latency for r in results if not r.choice]
    total = len(results)
    if total == 0:
        proportion = {"top": float("nan"), "bottom": float("nan")}
    else:
        proportion = {"top": len(top) / total, "bottom": len(bottom) / total}
    return WalkSummary(
        n_trials=total if n_trials is None else int(n_trials),
        proportion=proportion,
        mean_latency={"top": _side_latency(top), "bottom": _side_latency(bottom)},
    )
