"""Strategy registry for discovering and instantiating condition evaluators.

Usage:
    @register_strategy("scalping")
    class ScalpingStrategy(ConditionStrategy):
        ...

    strategy = create_strategy("scalping")
    kinds = list_strategies()
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)

# Global registry: strategy kind -> evaluator class
_REGISTRY: dict[str, type] = {}


def _key(name: Any) -> str:
    # Accept StrategyKind members as well as plain strings
    return getattr(name, "value", name)


def register_strategy(name: str):
    """Decorator to register an evaluator class under a strategy kind.

    Args:
        name: Unique strategy kind (e.g., 'scalping').

    Returns:
        Decorator that registers the class and returns it unchanged.

    Raises:
        ValueError: If a strategy with the same name is already registered.
    """
    key = _key(name)

    def decorator(cls):
        if key in _REGISTRY:
            raise ValueError(
                f"Strategy '{key}' is already registered by {_REGISTRY[key].__name__}"
            )
        _REGISTRY[key] = cls
        logger.debug("Registered strategy: %s -> %s", key, cls.__name__)
        return cls

    return decorator


def get_strategy_class(name: str) -> type:
    """Get the evaluator class by strategy kind (without instantiating).

    Raises:
        KeyError: If no strategy is registered under the given name.
    """
    cls = _REGISTRY.get(_key(name))
    if cls is None:
        available = ", ".join(sorted(_REGISTRY.keys())) or "(none)"
        raise KeyError(
            f"Unknown strategy '{_key(name)}'. Available: {available}"
        )
    return cls


def create_strategy(name: str, **kwargs: Any):
    """Create an evaluator instance by strategy kind.

    Raises:
        KeyError: If no strategy is registered under the given name.
    """
    return get_strategy_class(name)(**kwargs)


def list_strategies() -> list[str]:
    """Return a sorted list of registered strategy kinds."""
    return sorted(_REGISTRY.keys())
