#!/usr/bin/env python3
"""
Plotting utilities for sampler chains and random-walk experiments
"""

import os
from typing import List, Optional, Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402

TRACE_COLORS = ['blue', 'red', 'green', 'gold', 'magenta', 'cyan']


def _prepare(path: str):
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def plot_chain(chain, path: str, target_density=None, bins: int = 60) -> str:
    """Trace plot with the burn-in shaded, plus a histogram of the posterior"""
    _prepare(path)
    trace = chain.as_tensor().double().numpy()
    posterior = trace[chain.burnin:]

    fig, axes = plt.subplots(1, 2, figsize=(14, 5))
    axes[0].plot(np.arange(trace.size), trace, lw=0.6, c='blue')
    if chain.burnin > 0:
        axes[0].axvspan(0, chain.burnin, color='grey', alpha=0.3, label='burn-in')
        axes[0].legend()
    axes[0].set_xlabel('Step')
    axes[0].set_ylabel('State')
    axes[0].set_title(f'Trace (acceptance {chain.acceptance_rate():.2f})')
    axes[0].grid(True, alpha=0.3)

    if posterior.size > 0:
        axes[1].hist(posterior, bins=bins, density=True, alpha=0.6, color='red', label='chain')
        if target_density is not None:
            # Normalise the target numerically over the plotted range
            grid = np.linspace(posterior.min() - 1.0, posterior.max() + 1.0, 400)
            dens = np.array([float(target_density(g)) for g in grid])
            area = dens.sum() * (grid[1] - grid[0])
            if area > 0:
                axes[1].plot(grid, dens / area, c='black', lw=1.5, label='target')
        axes[1].legend()
    axes[1].set_xlabel('State')
    axes[1].set_title(f'Posterior ({posterior.size} samples)')
    axes[1].grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    print(f"Plot saved to {path}")
    return path


def plot_random_walks(results: Sequence, criterion: float, path: str, num_traces: int = 5) -> str:
    """Overlay the first few walk traces between the decision bounds"""
    _prepare(path)
    shown = list(results)[:num_traces]

    fig, ax = plt.subplots(figsize=(10.24, 7.68))
    for i, result in enumerate(shown):
        ax.plot(result.trace.numpy(), c=TRACE_COLORS[i % len(TRACE_COLORS)], lw=1.0)
    max_latency = max((r.latency for r in shown), default=0)
    ax.set_xlim(0, max_latency + 10)
    ax.set_ylim(-criterion, criterion)
    ax.set_xlabel('Step')
    ax.set_ylabel('Evidence')

    plt.savefig(path, dpi=100, bbox_inches='tight')
    plt.close(fig)
    print(f"Plot saved to {path}")
    return path


def plot_latency_histograms(results: Sequence, summary, path: str, bins: Optional[List[int]] = None) -> str:
    """One latency histogram per decision side ("top" above, "bottom" below)"""
    _prepare(path)
    bins = bins if bins is not None else list(range(0, 801, 20))

    fig, axes = plt.subplots(2, 1, figsize=(10.24, 7.68))
    for ax, side, flag in zip(axes, ('top', 'bottom'), (True, False)):
        latencies = [r.latency for r in results if r.choice == flag]
        ax.hist(latencies, bins=bins, color='red', alpha=0.5)
        ax.set_title(
            f"{side} reaction proportion {summary.proportion[side]:.2f}, "
            f"average latency {summary.mean_latency[side]:.2f}",
            fontsize=12,
        )
        ax.set_xlabel('Latency')
        ax.set_ylabel('Count')

    plt.tight_layout()
    plt.savefig(path, dpi=100, bbox_inches='tight')
    plt.close(fig)
    print(f"Plot saved to {path}")
    return path
