from typing import Callable, Dict

__all__ = ["TARGET_REGISTRY", "register_target", "build_target", "available_targets"]

TARGET_REGISTRY: Dict[str, Callable] = {}


def register_target(name: str):
    """Decorator to register a target density factory by name."""

    def decorator(fn: Callable):
        TARGET_REGISTRY[name] = fn
        return fn

    return decorator


def build_target(name: str, *args, **kwargs):
    if name not in TARGET_REGISTRY:
        raise KeyError(f"Unknown target: {name}. Available: {available_targets()}")
    return TARGET_REGISTRY[name](*args, **kwargs)


def available_targets():
    return sorted(TARGET_REGISTRY)


# Ensure built-in targets are registered on import
from . import densities  # noqa: E402,F401
