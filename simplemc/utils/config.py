import numbers
import os
from copy import deepcopy
from typing import Any, Dict, Optional

import yaml

__all__ = [
    "DEFAULT_CONFIG",
    "load_config",
    "save_config",
    "print_config_summary",
    "get_sampler_config",
    "get_random_walk_config",
    "get_regression_config",
]


DEFAULT_CONFIG: Dict[str, Any] = {
    "seed": None,
    "output_dir": "outputs",
    "sampler": {
        "initial_state": 0.0,
        "num_steps": 5000,
        "burnin": 1000,
        "dtype": "float64",
        "proposal": {"name": "normal", "scale": 1.0},
        "target": {"name": "gaussian", "mu": 0.0, "sigma": 1.0},
    },
    "random_walk": {
        "drift": 0.0,
        "sd": 0.3,
        "criterion": 3.0,
        "num_trials": 2000,
        "max_steps": 10000,
        "num_traces": 5,
    },
    "regression": {
        "rho": 0.8,
        "intercept": 0.2,
        "num_points": 20,
        "temperature": 15.0,
        "stall_best": 10000,
        "max_iters": 100,
    },
}

_DTYPES = ("float32", "float64")
_PROPOSALS = ("normal", "uniform")


def _deep_update(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge two dictionaries (override wins)."""
    for k, v in override.items():
        if k in base and isinstance(base[k], dict) and isinstance(v, dict):
            base[k] = _deep_update(base[k], v)
        else:
            base[k] = v
    return base


# -----------------------------------------------------------------------------
# YAML I/O
# -----------------------------------------------------------------------------

def load_config(path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Load a YAML configuration on top of :data:`DEFAULT_CONFIG`.

    Args:
        path: Path to YAML file. ``None`` uses the defaults alone.
        overrides: Extra values merged last (e.g. from the command line).

    Returns:
        The merged configuration. When a file was read, ``_config_path`` holds
        its absolute path.
    """
    cfg = deepcopy(DEFAULT_CONFIG)

    if path is not None:
        if not os.path.isfile(path):
            raise FileNotFoundError(f"Configuration file not found: {path}")
        with open(path, "r") as fh:
            loaded = yaml.safe_load(fh) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Top level of {path} must be a mapping, got {type(loaded).__name__}")
        _deep_update(cfg, loaded)
        cfg["_config_path"] = os.path.abspath(path)

    if overrides:
        _deep_update(cfg, overrides)

    _validate_config(cfg)
    return cfg


def _check_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    return int(value)


def _validate_config(cfg: Dict[str, Any]) -> None:
    for section in ("sampler", "random_walk", "regression"):
        if not isinstance(cfg.get(section), dict):
            raise ValueError(f"'{section}' must be a mapping")

    sampler = cfg["sampler"]
    if sampler["dtype"] not in _DTYPES:
        raise ValueError(f"sampler.dtype must be one of {_DTYPES}, got '{sampler['dtype']}'")
    num_steps = _check_int("sampler.num_steps", sampler["num_steps"])
    burnin = _check_int("sampler.burnin", sampler["burnin"])
    if num_steps < 0:
        raise ValueError("sampler.num_steps must be non-negative")
    if not 0 <= burnin <= num_steps + 1:
        raise ValueError("sampler.burnin must lie in [0, num_steps + 1]")

    proposal = sampler.get("proposal")
    if not isinstance(proposal, dict) or proposal.get("name") not in _PROPOSALS:
        raise ValueError(f"sampler.proposal.name must be one of {_PROPOSALS}")
    target = sampler.get("target")
    if not isinstance(target, dict) or "name" not in target:
        raise ValueError("sampler.target must be a mapping with a 'name' key")

    walk = cfg["random_walk"]
    if _check_int("random_walk.num_trials", walk["num_trials"]) < 0:
        raise ValueError("random_walk.num_trials must be non-negative")

    reg = cfg["regression"]
    if abs(float(reg["rho"])) > 1.0:
        raise ValueError("regression.rho must lie in [-1, 1]")


def save_config(cfg: Dict[str, Any], path: str) -> None:
    """Persist configuration dictionary as YAML (drops private keys)."""
    cfg_clean = {k: v for k, v in cfg.items() if not k.startswith("_")}
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w") as fh:
        yaml.safe_dump(cfg_clean, fh, sort_keys=False)


def print_config_summary(cfg: Dict[str, Any]) -> None:
    sampler = cfg["sampler"]
    print("Configuration:")
    print(f"   Source: {cfg.get('_config_path', '<defaults>')}")
    print(f"   Seed: {cfg.get('seed')}")
    print(
        f"   Sampler: {sampler['num_steps']} steps, burnin={sampler['burnin']}, "
        f"dtype={sampler['dtype']}, proposal={sampler['proposal']['name']}, "
        f"target={sampler['target']['name']}"
    )


# -----------------------------------------------------------------------------
# Convenience getters
# -----------------------------------------------------------------------------

def get_sampler_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    return cfg["sampler"]


def get_random_walk_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    return cfg["random_walk"]


def get_regression_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    return cfg["regression"]
