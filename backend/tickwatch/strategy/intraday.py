"""Intraday strategy: trend-following entries on dips.

Moving-average rule (when use_ma20 and use_ma34 are both enabled):
price above EMA(34) and EMA(20) above EMA(34).
"""

from tickwatch.models import IndicatorSnapshot, StrategyConditionConfig, StrategyKind
from tickwatch.strategy.base import BaseConditionStrategy, CheckResult
from tickwatch.strategy.registry import register_strategy


@register_strategy(StrategyKind.INTRADAY)
class IntradayStrategy(BaseConditionStrategy):
    """Uptrend confirmation on EMA(20)/EMA(34) with neutral RSI."""

    kind = StrategyKind.INTRADAY.value

    def check_moving_averages(
        self,
        snapshot: IndicatorSnapshot,
        price: float,
        config: StrategyConditionConfig,
    ) -> CheckResult:
        if not (config.use_ma20 and config.use_ma34):
            return True, None
        if price > snapshot.ema34 and snapshot.ema20 > snapshot.ema34:
            return True, None
        return False, (
            f"MA: Price={price:.4f} vs EMA34={snapshot.ema34:.4f}, "
            f"EMA20={snapshot.ema20:.4f} vs EMA34={snapshot.ema34:.4f}"
        )
