"""Standalone numerical experiments (random walk, regression fitting)"""

from .random_walk import NoDecisionError, WalkResult, WalkSummary, simulate_walk, simulate_walks, summarise_walks
from .regression import (
    LinearModel,
    RegressionProblem,
    simulate_regression_problem,
    fit_annealing,
    fit_nelder_mead,
    fit_least_squares,
    compare_fits,
)

__all__ = [
    'NoDecisionError', 'WalkResult', 'WalkSummary', 'simulate_walk', 'simulate_walks', 'summarise_walks',
    'LinearModel', 'RegressionProblem', 'simulate_regression_problem',
    'fit_annealing', 'fit_nelder_mead', 'fit_least_squares', 'compare_fits',
]
