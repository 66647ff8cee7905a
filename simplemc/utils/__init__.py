"""Utility helpers for configuration management and plotting.
"""

from .config import load_config, save_config, print_config_summary
from .plotting import plot_chain, plot_random_walks, plot_latency_histograms

__all__ = [
    "load_config",
    "save_config",
    "print_config_summary",
    "plot_chain",
    "plot_random_walks",
    "plot_latency_histograms",
]
