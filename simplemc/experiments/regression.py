#!/usr/bin/env python3
"""
Slope/intercept estimation compared across three optimisers

Simulated annealing and Nelder-Mead minimise the mean squared residual of a
:class:`RegressionProblem`; ordinary least squares solves it in closed form.
"""

import math
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

import numpy as np
import torch
from scipy.optimize import minimize

__all__ = [
    "LinearModel",
    "RegressionProblem",
    "simulate_regression_problem",
    "fit_annealing",
    "fit_nelder_mead",
    "fit_least_squares",
    "compare_fits",
    "DEFAULT_INIT",
    "DEFAULT_SIMPLEX",
]


@dataclass(frozen=True)
class LinearModel:
    gradient: float
    intercept: float

    def __add__(self, other: "LinearModel") -> "LinearModel":
        return LinearModel(self.gradient + other.gradient, self.intercept + other.intercept)

    def __sub__(self, other: "LinearModel") -> "LinearModel":
        return LinearModel(self.gradient - other.gradient, self.intercept - other.intercept)

    def __mul__(self, factor: float) -> "LinearModel":
        return LinearModel(self.gradient * factor, self.intercept * factor)

    def as_array(self) -> np.ndarray:
        return np.array([self.gradient, self.intercept], dtype=np.float64)

    @classmethod
    def from_array(cls, arr) -> "LinearModel":
        return cls(float(arr[0]), float(arr[1]))


DEFAULT_INIT = LinearModel(-1.0, 0.2)
DEFAULT_SIMPLEX = (
    LinearModel(-1.0, 0.2),
    LinearModel(-0.95, 0.2),
    LinearModel(-1.0, 0.25),
)


class RegressionProblem:
    """
    Paired observations ``(x, y)`` with a mean-squared-residual cost
    """

    def __init__(self, x, y):
        self.x = np.asarray(x, dtype=np.float64)
        self.y = np.asarray(y, dtype=np.float64)
        if self.x.shape != self.y.shape or self.x.ndim != 1:
            raise ValueError(f"x and y must be 1-D and equal length, got {self.x.shape} and {self.y.shape}")
        if self.x.size == 0:
            raise ValueError("RegressionProblem needs at least one data point")

    def __len__(self):
        return int(self.x.size)

    def cost(self, model: LinearModel) -> float:
        residual = model.gradient * self.x - self.y + model.intercept
        return float(np.mean(residual ** 2))

    def anneal(self, model: LinearModel, extent: float, generator: torch.Generator) -> LinearModel:
        """Shift both parameters by ``extent * (u - 0.5)`` with ``u ~ U[0, 1)``."""
        u = torch.rand(2, generator=generator, dtype=torch.float64)
        return LinearModel(
            model.gradient + extent * (u[0].item() - 0.5),
            model.intercept + extent * (u[1].item() - 0.5),
        )


def simulate_regression_problem(
    rho: float, intercept: float, n_points: int, generator: torch.Generator
) -> RegressionProblem:
    """Draw ``y = rho * x + intercept + sqrt(1 - rho^2) * e`` with standard normal ``x`` and ``e``."""
    if abs(rho) > 1.0:
        raise ValueError(f"rho must lie in [-1, 1], got {rho}")
    if n_points < 1:
        raise ValueError(f"n_points must be positive, got {n_points}")
    draws = torch.randn(n_points, 2, generator=generator, dtype=torch.float64).numpy()
    x, e = draws[:, 0], draws[:, 1]
    y = rho * x + intercept + e * math.sqrt(1.0 - rho ** 2)
    return RegressionProblem(x, y)


# -----------------------------------------------------------------------------
# Optimisers
# -----------------------------------------------------------------------------


def fit_annealing(
    problem: RegressionProblem,
    init: LinearModel = DEFAULT_INIT,
    *,
    temperature: float = 15.0,
    stall_best: int = 10000,
    max_iters: Optional[int] = None,
    generator: Optional[torch.Generator] = None,
) -> LinearModel:
    """Simulated annealing with fast cooling ``T_k = T_0 / k``.

    Worse moves are accepted with probability ``1 / (1 + exp(dcost / T_k))``.
    The search stops once ``stall_best`` iterations pass without a new best.
    """
    if temperature <= 0:
        raise ValueError(f"temperature must be positive, got {temperature}")
    if generator is None:
        generator = torch.Generator()
        generator.seed()

    current, current_cost = init, problem.cost(init)
    best, best_cost = current, current_cost
    stall = 0
    k = 0
    while stall < stall_best and (max_iters is None or k < max_iters):
        k += 1
        temp = temperature / k
        candidate = problem.anneal(current, temp, generator)
        candidate_cost = problem.cost(candidate)
        u = torch.rand((), generator=generator, dtype=torch.float64).item()
        delta = (candidate_cost - current_cost) / temp
        # exp overflow means the move is hopeless
        accept_prob = 0.0 if delta > 700.0 else 1.0 / (1.0 + math.exp(delta))
        if candidate_cost <= current_cost or accept_prob > u:
            current, current_cost = candidate, candidate_cost

        if current_cost < best_cost:
            best, best_cost = current, current_cost
            stall = 0
        else:
            stall += 1
    return best


def fit_nelder_mead(
    problem: RegressionProblem,
    simplex: Sequence[LinearModel] = DEFAULT_SIMPLEX,
    *,
    max_iters: int = 100,
) -> LinearModel:
    """Nelder-Mead from an explicit starting simplex (three vertices)."""
    if len(simplex) != 3:
        raise ValueError(f"Nelder-Mead in two parameters needs 3 simplex vertices, got {len(simplex)}")
    initial_simplex = np.stack([m.as_array() for m in simplex])
    res = minimize(
        lambda p: problem.cost(LinearModel.from_array(p)),
        x0=initial_simplex[0],
        method="Nelder-Mead",
        options={"initial_simplex": initial_simplex, "maxiter": int(max_iters)},
    )
    return LinearModel.from_array(res.x)


def fit_least_squares(problem: RegressionProblem) -> LinearModel:
    """Closed-form ordinary least squares."""
    n = float(len(problem))
    x_sum = problem.x.sum()
    y_sum = problem.y.sum()
    xy_sum = (problem.x * problem.y).sum()
    xx_sum = (problem.x ** 2).sum()
    denom = n * xx_sum - x_sum ** 2
    # relative to the scale of x
    if denom <= 1e-12 * n * xx_sum:
        raise ValueError("x has no spread; slope is undefined")
    gradient = (n * xy_sum - x_sum * y_sum) / denom
    intercept = (y_sum - gradient * x_sum) / n
    return LinearModel(float(gradient), float(intercept))


def compare_fits(
    problem: RegressionProblem,
    *,
    init: LinearModel = DEFAULT_INIT,
    simplex: Sequence[LinearModel] = DEFAULT_SIMPLEX,
    temperature: float = 15.0,
    stall_best: int = 10000,
    max_iters: int = 100,
    generator: Optional[torch.Generator] = None,
) -> Dict[str, LinearModel]:
    return {
        "annealing": fit_annealing(
            problem, init, temperature=temperature, stall_best=stall_best, generator=generator
        ),
        "nelder_mead": fit_nelder_mead(problem, simplex, max_iters=max_iters),
        "least_squares": fit_least_squares(problem),
    }
