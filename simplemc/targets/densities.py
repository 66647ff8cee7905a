#!/usr/bin/env python3
"""
Unnormalised 1-D target densities for the Metropolis sampler
"""

import math

import torch

from . import register_target


def _check_sigma(sigma: float) -> float:
    sigma = float(sigma)
    if not math.isfinite(sigma) or sigma <= 0.0:
        raise ValueError(f"sigma must be a finite positive number, got {sigma}")
    return sigma


class GaussianDensity:
    """
    Gaussian bump ``exp(-(x - mu)^2 / (2 sigma^2))`` without the normalising constant
    """

    def __init__(self, mu: float = 0.0, sigma: float = 1.0):
        self.mu = float(mu)
        self.sigma = _check_sigma(sigma)

    def log_prob(self, x: torch.Tensor) -> torch.Tensor:
        x = torch.as_tensor(x, dtype=torch.float64)
        return -0.5 * ((x - self.mu) / self.sigma) ** 2

    def __call__(self, x: torch.Tensor) -> torch.Tensor:
        return torch.exp(self.log_prob(x))

    def __repr__(self):
        return f"GaussianDensity(mu={self.mu}, sigma={self.sigma})"


class BimodalDensity:
    """
    Two equal Gaussian bumps centred at ``-separation/2`` and ``+separation/2``
    """

    def __init__(self, separation: float = 4.0, sigma: float = 1.0):
        self.separation = float(separation)
        self.sigma = _check_sigma(sigma)
        half = 0.5 * self.separation
        self._modes = (GaussianDensity(-half, self.sigma), GaussianDensity(half, self.sigma))

    def __call__(self, x: torch.Tensor) -> torch.Tensor:
        left, right = self._modes
        return left(x) + right(x)

    def __repr__(self):
        return f"BimodalDensity(separation={self.separation}, sigma={self.sigma})"


@register_target("gaussian")
def build_gaussian(mu: float = 0.0, sigma: float = 1.0):
    return GaussianDensity(mu=mu, sigma=sigma)


@register_target("bimodal")
def build_bimodal(separation: float = 4.0, sigma: float = 1.0):
    return BimodalDensity(separation=separation, sigma=sigma)
