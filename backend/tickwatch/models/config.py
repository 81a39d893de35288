"""Strategy condition configuration models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class StrategyKind(str, Enum):
    """Built-in strategy kinds evaluated for every symbol."""

    SCALPING = "scalping"
    INTRADAY = "intraday"
    PUMP = "pump"


class StrategyConditionConfig(BaseModel):
    """Thresholds and toggles for one (symbol, strategy) pair.

    Field types are validated; numeric ranges (e.g. rsi_min <= rsi_max)
    are the configuration owner's responsibility.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    # Volume
    volume_multiplier: float = 1.5

    # RSI band
    rsi_min: float = 0
    rsi_max: float = 100

    # EMA toggles
    use_ma5: bool = False
    use_ma8: bool = False
    use_ma13: bool = False
    use_ma20: bool = False
    use_ma21: bool = False
    use_ma34: bool = False
    use_ma50: bool = False

    # MACD
    macd_line_above_signal: bool = False
    macd_line_above_zero: bool = False

    # Bollinger Bands
    bollinger_multiplier: float = 1.0
    use_bollinger_upper: bool = False
    use_bollinger_lower: bool = False
    use_bollinger_middle: bool = False

    # CVD
    cvd_above_zero: bool = False
    cvd_slope_positive: bool = False
    cvd_lookback_candles: int = 5

    # Profit/loss, in percent of entry price
    take_profit_percent: float = 1.0
    stop_loss_percent: float = 0.5


DEFAULT_SCALPING_CONDITIONS = StrategyConditionConfig(
    volume_multiplier=1.5,
    rsi_min=0,
    rsi_max=40,
    use_ma8=True,
    use_ma21=True,
    macd_line_above_signal=True,
    bollinger_multiplier=1.01,
    use_bollinger_lower=True,
    cvd_slope_positive=True,
    cvd_lookback_candles=5,
    take_profit_percent=0.5,
    stop_loss_percent=0.25,
)

DEFAULT_INTRADAY_CONDITIONS = StrategyConditionConfig(
    volume_multiplier=1.2,
    rsi_min=35,
    rsi_max=65,
    use_ma20=True,
    use_ma34=True,
    macd_line_above_signal=True,
    bollinger_multiplier=1.01,
    use_bollinger_lower=True,
    cvd_above_zero=True,
    cvd_slope_positive=True,
    cvd_lookback_candles=10,
    take_profit_percent=2.0,
    stop_loss_percent=1.0,
)

DEFAULT_PUMP_CONDITIONS = StrategyConditionConfig(
    volume_multiplier=2.0,
    rsi_min=50,
    rsi_max=85,
    use_ma5=True,
    use_ma13=True,
    macd_line_above_signal=True,
    macd_line_above_zero=True,
    bollinger_multiplier=1.0,
    use_bollinger_middle=True,
    cvd_above_zero=True,
    cvd_slope_positive=True,
    cvd_lookback_candles=5,
    take_profit_percent=3.0,
    stop_loss_percent=1.0,
)

DEFAULT_CONDITIONS: dict[StrategyKind, StrategyConditionConfig] = {
    StrategyKind.SCALPING: DEFAULT_SCALPING_CONDITIONS,
    StrategyKind.INTRADAY: DEFAULT_INTRADAY_CONDITIONS,
    StrategyKind.PUMP: DEFAULT_PUMP_CONDITIONS,
}


def default_conditions(kind: StrategyKind | str) -> StrategyConditionConfig:
    """Return a fresh copy of the built-in defaults for a strategy kind."""
    return DEFAULT_CONDITIONS[StrategyKind(kind)].model_copy(deep=True)
