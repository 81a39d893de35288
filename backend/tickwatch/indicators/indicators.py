"""Technical indicators computed from a bounded price/volume history.

Every function returns the value for the most recent sample only and
degrades to a documented fallback when the history is shorter than the
indicator window:

- rsi: 50 (neutral) with fewer than period + 1 prices
- ema: 0 for an empty sequence
- macd: all zero with fewer than 26 prices
- moving_average: the latest price with fewer than period prices
- bollinger_bands: all bands collapse to the latest price
- volume_spike: average equals the latest volume, never a spike

All functions are pure and deterministic.
"""

from typing import Sequence

import numpy as np

from tickwatch.models import (
    BollingerValues,
    CvdTrend,
    IndicatorSnapshot,
    MacdValues,
)

MACD_FAST_PERIOD = 12
MACD_SLOW_PERIOD = 26
# Signal line is a fixed fraction of the MACD line, not an EMA of it.
MACD_SIGNAL_RATIO = 0.8

SNAPSHOT_EMA_PERIODS = (5, 8, 13, 20, 21, 34, 50)


def _as_array(values: Sequence[float]) -> np.ndarray:
    return np.asarray(values, dtype=np.float64)


def rsi(prices: Sequence[float], period: int = 14) -> float:
    """
    Calculate the Relative Strength Index of the latest price.

    Uses the simple average of gains and losses over the last ``period``
    price changes.

    Args:
        prices: Prices, oldest first
        period: Number of price changes to average

    Returns:
        RSI in [0, 100]; 50 with insufficient history, 100 when there
        were no losses in the window
    """
    if len(prices) < period + 1:
        return 50.0

    deltas = np.diff(_as_array(prices)[-(period + 1):])
    avg_gain = float(deltas[deltas > 0].sum()) / period
    avg_loss = float(-deltas[deltas < 0].sum()) / period

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


def ema(prices: Sequence[float], period: int) -> float:
    """
    Calculate the Exponential Moving Average of the latest price.

    Seeded with the first price, then smoothed with multiplier
    2 / (period + 1) across every later price.

    Args:
        prices: Prices, oldest first
        period: EMA period

    Returns:
        Latest EMA value, or 0 for an empty sequence
    """
    if len(prices) == 0:
        return 0.0

    arr = _as_array(prices)
    multiplier = 2.0 / (period + 1)

    value = arr[0]
    for price in arr[1:]:
        value = (price - value) * multiplier + value

    return float(value)


def macd(prices: Sequence[float]) -> MacdValues:
    """
    Calculate MACD from EMA(12) and EMA(26).

    Returns:
        MacdValues(line, signal, macd); all zero with fewer than 26 prices
    """
    if len(prices) < MACD_SLOW_PERIOD:
        return MacdValues(line=0.0, signal=0.0, macd=0.0)

    line = ema(prices, MACD_FAST_PERIOD) - ema(prices, MACD_SLOW_PERIOD)
    signal = line * MACD_SIGNAL_RATIO
    return MacdValues(line=line, signal=signal, macd=line - signal)


def moving_average(prices: Sequence[float], period: int) -> float:
    """Simple mean of the last ``period`` prices, or the latest price if fewer."""
    if len(prices) == 0:
        return 0.0
    if len(prices) < period:
        return float(prices[-1])
    return float(np.mean(_as_array(prices)[-period:]))


def bollinger_bands(
    prices: Sequence[float],
    period: int = 20,
    num_std: float = 2.0,
) -> BollingerValues:
    """
    Calculate Bollinger Bands over the last ``period`` prices.

    Middle is the simple mean; the bands sit ``num_std`` population
    standard deviations above and below it.

    Returns:
        BollingerValues; all three equal the latest price (0 when empty)
        with insufficient history
    """
    if len(prices) < period:
        current = float(prices[-1]) if len(prices) else 0.0
        return BollingerValues(upper=current, middle=current, lower=current)

    window = _as_array(prices)[-period:]
    middle = float(np.mean(window))
    std_dev = float(np.std(window))

    return BollingerValues(
        upper=middle + std_dev * num_std,
        middle=middle,
        lower=middle - std_dev * num_std,
    )


def volume_spike(
    volumes: Sequence[float],
    period: int = 20,
    threshold: float = 2.0,
) -> tuple[float, bool]:
    """
    Detect a volume spike on the latest sample.

    Returns:
        Tuple of (average volume, spike flag). The flag is true when the
        latest volume exceeds ``threshold`` times the average.
    """
    if len(volumes) < period:
        latest = float(volumes[-1]) if len(volumes) else 0.0
        return latest, False

    avg_volume = float(np.mean(_as_array(volumes)[-period:]))
    current = float(volumes[-1])
    return avg_volume, current > avg_volume * threshold


class IndicatorCalculator:
    """Assemble an IndicatorSnapshot from a price/volume history."""

    def __init__(
        self,
        rsi_period: int = 14,
        bollinger_period: int = 20,
        bollinger_std: float = 2.0,
        volume_period: int = 20,
        volume_spike_threshold: float = 2.0,
    ):
        self.rsi_period = rsi_period
        self.bollinger_period = bollinger_period
        self.bollinger_std = bollinger_std
        self.volume_period = volume_period
        self.volume_spike_threshold = volume_spike_threshold

    def calculate(
        self,
        symbol: str,
        prices: Sequence[float],
        volumes: Sequence[float],
        current_price: float,
        cvd: float = 0.0,
        cvd_trend: CvdTrend = CvdTrend.NEUTRAL,
        cvd_slope: float = 0.0,
    ) -> IndicatorSnapshot:
        """
        Calculate every indicator for the latest sample.

        Args:
            symbol: Trading symbol
            prices: Recent prices, oldest first
            volumes: Recent volumes, same length as prices
            current_price: Latest traded price
            cvd: Current cumulative volume delta
            cvd_trend: CVD trend classification
            cvd_slope: CVD regression slope

        Returns:
            A fresh IndicatorSnapshot

        Raises:
            ValueError: If prices and volumes differ in length
        """
        if len(prices) != len(volumes):
            raise ValueError(
                f"prices and volumes must have the same length "
                f"({len(prices)} != {len(volumes)})"
            )

        emas = {f"ema{p}": ema(prices, p) for p in SNAPSHOT_EMA_PERIODS}
        avg_volume, spike = volume_spike(
            volumes, self.volume_period, self.volume_spike_threshold
        )

        return IndicatorSnapshot(
            symbol=symbol,
            price=current_price,
            rsi=rsi(prices, self.rsi_period),
            macd=macd(prices),
            bollinger=bollinger_bands(
                prices, self.bollinger_period, self.bollinger_std
            ),
            volume=float(volumes[-1]) if len(volumes) else 0.0,
            avg_volume=avg_volume,
            volume_spike=spike,
            cvd=cvd,
            cvd_trend=cvd_trend,
            cvd_slope=cvd_slope,
            **emas,
        )
