"""Metropolis sampler core.

Re-export :class:`Chain`, the run helpers and the symmetric proposals.
"""

from .chain import Chain  # noqa: F401
from .metropolis import FIXED_RUN_BURNIN, FIXED_RUN_STEPS, fixed_run, run_chain, stop_after  # noqa: F401
from .proposals import NormalProposal, UniformProposal, is_symmetric  # noqa: F401

__all__ = [
    "Chain",
    "run_chain",
    "stop_after",
    "fixed_run",
    "FIXED_RUN_STEPS",
    "FIXED_RUN_BURNIN",
    "NormalProposal",
    "UniformProposal",
    "is_symmetric",
]
