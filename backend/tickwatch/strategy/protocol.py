"""Strategy protocol defining the interface all condition evaluators implement.

This module provides:
- EvaluationResult: Standard return type from condition evaluation
- ConditionStrategy: Runtime-checkable Protocol that evaluators must satisfy
- SignalCallback: Type alias for signal sink callbacks
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Awaitable, Callable, Protocol, runtime_checkable

from tickwatch.models import IndicatorSnapshot, Signal, StrategyConditionConfig


SignalCallback = Callable[[Signal], Awaitable[None]]

# Condition names, in evaluation order
CONDITION_NAMES = (
    "rsi",
    "moving_averages",
    "bollinger_bands",
    "macd",
    "volume",
    "cvd",
)


@dataclass
class EvaluationResult:
    """Result of evaluating one strategy against one snapshot.

    Attributes:
        conditions: Condition name -> passed.  Disabled conditions are True.
        entry_price: Current price.
        take_profit: Entry raised by the configured take-profit percent.
        stop_loss: Entry lowered by the configured stop-loss percent.
        details: Human-readable reasons for each failing condition.
    """

    conditions: dict[str, bool]
    entry_price: float
    take_profit: float
    stop_loss: float
    details: list[str] = field(default_factory=list)

    @property
    def all_met(self) -> bool:
        return all(self.conditions.values())


@runtime_checkable
class ConditionStrategy(Protocol):
    """Protocol that all condition evaluators must implement."""

    @property
    def name(self) -> str:
        """Strategy kind (e.g., 'scalping')."""
        ...

    def evaluate(
        self,
        snapshot: IndicatorSnapshot,
        price: float,
        config: StrategyConditionConfig,
        cvd_slope: float | None = None,
    ) -> EvaluationResult:
        """Evaluate every condition for the given snapshot.

        Args:
            snapshot: Indicator values for the current tick.
            price: Current price.
            config: Thresholds and toggles for this (symbol, strategy).
            cvd_slope: CVD slope over the configured lookback; the
                snapshot's slope is used when omitted.
        """
        ...
