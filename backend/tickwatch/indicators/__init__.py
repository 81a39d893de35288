"""Technical indicators (pure math, no I/O)."""

from tickwatch.indicators.indicators import (
    rsi,
    ema,
    macd,
    moving_average,
    bollinger_bands,
    volume_spike,
    IndicatorCalculator,
    SNAPSHOT_EMA_PERIODS,
)

__all__ = [
    "rsi",
    "ema",
    "macd",
    "moving_average",
    "bollinger_bands",
    "volume_spike",
    "IndicatorCalculator",
    "SNAPSHOT_EMA_PERIODS",
]
