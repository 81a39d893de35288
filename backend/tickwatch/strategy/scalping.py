"""Scalping strategy: short-term pullback entries.

Moving-average rule (when use_ma8 and use_ma21 are both enabled):
EMA(8) above EMA(21).
"""

from tickwatch.models import IndicatorSnapshot, StrategyConditionConfig, StrategyKind
from tickwatch.strategy.base import BaseConditionStrategy, CheckResult
from tickwatch.strategy.registry import register_strategy


@register_strategy(StrategyKind.SCALPING)
class ScalpingStrategy(BaseConditionStrategy):
    """Fast EMA pair crossover with oversold RSI and lower-band touch."""

    kind = StrategyKind.SCALPING.value

    def check_moving_averages(
        self,
        snapshot: IndicatorSnapshot,
        price: float,
        config: StrategyConditionConfig,
    ) -> CheckResult:
        if not (config.use_ma8 and config.use_ma21):
            return True, None
        if snapshot.ema8 > snapshot.ema21:
            return True, None
        return False, (
            f"MA: EMA8={snapshot.ema8:.4f} vs EMA21={snapshot.ema21:.4f} "
            "(need EMA8 > EMA21)"
        )
