"""Shared condition checks for long-only strategies.

Every strategy evaluates the same six conditions.  Only the
moving-average rule differs per strategy, so subclasses implement
``check_moving_averages`` and inherit the rest.  A condition whose
toggle is off passes vacuously and never blocks the aggregate decision.
"""

from __future__ import annotations

import logging

from tickwatch.models import IndicatorSnapshot, StrategyConditionConfig
from tickwatch.strategy.protocol import EvaluationResult

logger = logging.getLogger(__name__)

# A check returns (passed, reason-if-failed)
CheckResult = tuple[bool, str | None]


class BaseConditionStrategy:
    """Evaluate RSI, EMA, Bollinger, MACD, volume and CVD conditions."""

    kind: str = ""

    @property
    def name(self) -> str:
        return self.kind

    # ------------------------------------------------------------------
    # Individual checks
    # ------------------------------------------------------------------

    def check_rsi(
        self, snapshot: IndicatorSnapshot, config: StrategyConditionConfig
    ) -> CheckResult:
        passed = config.rsi_min <= snapshot.rsi <= config.rsi_max
        if passed:
            return True, None
        return False, f"RSI: {snapshot.rsi:.2f} (need {config.rsi_min}-{config.rsi_max})"

    def check_moving_averages(
        self,
        snapshot: IndicatorSnapshot,
        price: float,
        config: StrategyConditionConfig,
    ) -> CheckResult:
        """Strategy-specific EMA ordering rule."""
        raise NotImplementedError

    def check_bollinger(
        self,
        snapshot: IndicatorSnapshot,
        price: float,
        config: StrategyConditionConfig,
    ) -> CheckResult:
        bands = snapshot.bollinger
        mult = config.bollinger_multiplier
        failures = []

        if config.use_bollinger_lower and not price <= bands.lower * mult:
            failures.append(
                f"BB: Price={price:.4f} vs BBLower*{mult}={bands.lower * mult:.4f}"
            )
        if config.use_bollinger_middle and not price >= bands.middle * mult:
            failures.append(
                f"BB: Price={price:.4f} vs BBMiddle*{mult}={bands.middle * mult:.4f}"
            )
        if config.use_bollinger_upper and not price >= bands.upper * mult:
            failures.append(
                f"BB: Price={price:.4f} vs BBUpper*{mult}={bands.upper * mult:.4f}"
            )

        if failures:
            return False, ", ".join(failures)
        return True, None

    def check_macd(
        self, snapshot: IndicatorSnapshot, config: StrategyConditionConfig
    ) -> CheckResult:
        if not config.macd_line_above_signal:
            return True, None

        line = snapshot.macd.line
        signal = snapshot.macd.signal
        passed = line > signal
        if config.macd_line_above_zero:
            passed = passed and line > 0

        if passed:
            return True, None
        return False, f"MACD: Line={line:.6f} vs Signal={signal:.6f}"

    def check_volume(
        self, snapshot: IndicatorSnapshot, config: StrategyConditionConfig
    ) -> CheckResult:
        required = snapshot.avg_volume * config.volume_multiplier
        if snapshot.volume > required:
            return True, None
        return False, (
            f"Volume: {snapshot.volume:,.2f} vs "
            f"Avg*{config.volume_multiplier}={required:,.2f}"
        )

    def check_cvd(
        self,
        snapshot: IndicatorSnapshot,
        config: StrategyConditionConfig,
        cvd_slope: float,
    ) -> CheckResult:
        """Slope is over the strategy's ``cvd_lookback_candles`` points.

        The pipeline passes that slope in, so intraday (lookback 10) does
        not use the snapshot's fixed 5-point ``cvd_slope``.
        """
        if not config.cvd_slope_positive:
            return True, None

        passed = cvd_slope > 0
        if config.cvd_above_zero:
            passed = passed and snapshot.cvd > 0

        if passed:
            return True, None
        return False, (
            f"CVD: {snapshot.cvd:,.2f}, Slope: {cvd_slope:.2f} (need > 0)"
        )

    # ------------------------------------------------------------------
    # Aggregate
    # ------------------------------------------------------------------

    def evaluate(
        self,
        snapshot: IndicatorSnapshot,
        price: float,
        config: StrategyConditionConfig,
        cvd_slope: float | None = None,
    ) -> EvaluationResult:
        """Evaluate every condition and derive entry/TP/SL prices."""
        if cvd_slope is None:
            cvd_slope = snapshot.cvd_slope

        checks = {
            "rsi": self.check_rsi(snapshot, config),
            "moving_averages": self.check_moving_averages(snapshot, price, config),
            "bollinger_bands": self.check_bollinger(snapshot, price, config),
            "macd": self.check_macd(snapshot, config),
            "volume": self.check_volume(snapshot, config),
            "cvd": self.check_cvd(snapshot, config, cvd_slope),
        }

        result = EvaluationResult(
            conditions={name: passed for name, (passed, _) in checks.items()},
            entry_price=price,
            take_profit=price * (1 + config.take_profit_percent / 100),
            stop_loss=price * (1 - config.stop_loss_percent / 100),
            details=[reason for _, reason in checks.values() if reason],
        )

        if result.all_met:
            logger.debug("%s %s: all conditions met", snapshot.symbol, self.kind)
        else:
            logger.debug(
                "%s %s conditions not met: %s",
                snapshot.symbol,
                self.kind,
                ", ".join(result.details),
            )
        return result
