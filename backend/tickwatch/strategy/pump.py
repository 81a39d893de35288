"""Pump strategy: momentum breakouts on heavy volume.

Moving-average rule (when use_ma5 and use_ma13 are both enabled):
price above EMA(5) and EMA(5) above EMA(13).
"""

from tickwatch.models import IndicatorSnapshot, StrategyConditionConfig, StrategyKind
from tickwatch.strategy.base import BaseConditionStrategy, CheckResult
from tickwatch.strategy.registry import register_strategy


@register_strategy(StrategyKind.PUMP)
class PumpStrategy(BaseConditionStrategy):
    """Price riding above a rising EMA(5)/EMA(13) stack."""

    kind = StrategyKind.PUMP.value

    def check_moving_averages(
        self,
        snapshot: IndicatorSnapshot,
        price: float,
        config: StrategyConditionConfig,
    ) -> CheckResult:
        if not (config.use_ma5 and config.use_ma13):
            return True, None
        if price > snapshot.ema5 and snapshot.ema5 > snapshot.ema13:
            return True, None
        return False, (
            f"MA: Price={price:.4f} vs EMA5={snapshot.ema5:.4f}, "
            f"EMA5={snapshot.ema5:.4f} vs EMA13={snapshot.ema13:.4f}"
        )
