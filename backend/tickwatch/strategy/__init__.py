"""Strategy condition evaluation.

Public API:
- ConditionStrategy: Protocol that all evaluators must implement
- EvaluationResult: Standard return type from evaluation
- register_strategy: Decorator to register an evaluator class
- create_strategy: Factory function to instantiate evaluators by kind
- list_strategies: Discover all registered strategy kinds
- get_strategy_class: Get evaluator class by kind without instantiating
- EdgeDetector: One-shot trigger on all-conditions-met transitions
- ConditionsStore: Per-symbol, per-strategy configuration provider

Importing this package auto-registers all built-in strategies.
"""

from tickwatch.strategy.protocol import (
    CONDITION_NAMES,
    ConditionStrategy,
    EvaluationResult,
    SignalCallback,
)
from tickwatch.strategy.registry import (
    register_strategy,
    create_strategy,
    list_strategies,
    get_strategy_class,
)
from tickwatch.strategy.base import BaseConditionStrategy
from tickwatch.strategy.edge import EdgeDetector, EdgeState
from tickwatch.strategy.conditions_store import ConditionsStore

# Import built-in strategies to trigger auto-registration
from tickwatch.strategy.scalping import ScalpingStrategy
from tickwatch.strategy.intraday import IntradayStrategy
from tickwatch.strategy.pump import PumpStrategy

__all__ = [
    "CONDITION_NAMES",
    "ConditionStrategy",
    "EvaluationResult",
    "SignalCallback",
    "register_strategy",
    "create_strategy",
    "list_strategies",
    "get_strategy_class",
    "BaseConditionStrategy",
    "EdgeDetector",
    "EdgeState",
    "ConditionsStore",
    "ScalpingStrategy",
    "IntradayStrategy",
    "PumpStrategy",
]
