"""Data models shared by the indicator engine and strategy evaluator."""

from tickwatch.models.tick import Tick, TickBuffer
from tickwatch.models.snapshot import (
    BollingerValues,
    CvdTrend,
    IndicatorSnapshot,
    MacdValues,
)
from tickwatch.models.config import (
    DEFAULT_CONDITIONS,
    StrategyConditionConfig,
    StrategyKind,
    default_conditions,
)
from tickwatch.models.signal import Direction, Signal

__all__ = [
    "Tick",
    "TickBuffer",
    "BollingerValues",
    "CvdTrend",
    "IndicatorSnapshot",
    "MacdValues",
    "DEFAULT_CONDITIONS",
    "StrategyConditionConfig",
    "StrategyKind",
    "default_conditions",
    "Direction",
    "Signal",
]
