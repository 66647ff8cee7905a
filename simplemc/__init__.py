"""Random-walk Metropolis sampling and small numerical experiments.

Sub-packages
------------
samplers
    Metropolis core, :class:`Chain` and symmetric proposals.
targets
    Registry of unnormalised 1-D target densities.
experiments
    Random-walk first passage and regression fitting comparison.
utils
    YAML configuration and plotting helpers.
"""

from .samplers import Chain, NormalProposal, UniformProposal, fixed_run, run_chain, stop_after  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    "Chain",
    "NormalProposal",
    "UniformProposal",
    "run_chain",
    "stop_after",
    "fixed_run",
]
