"""Cumulative volume delta (CVD) tracking.

CVD is a running sum of signed volume: a tick whose price rose adds its
volume, a tick whose price fell subtracts it, an unchanged price leaves
the sum as is.

The first update for a symbol back-fills the series from every available
price pair (so a history of n ticks yields n - 1 points, with no leading
anchor). Every later update appends exactly one point from the last two
prices and the last volume, so the series is never recomputed from
scratch once initialized.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Sequence

import numpy as np

from tickwatch.models import CvdTrend

logger = logging.getLogger(__name__)

# Default cap on CVD points kept per symbol.
DEFAULT_MAX_LENGTH = 100

# Relative change over the trend window that counts as a trend.
TREND_THRESHOLD = 0.1


def signed_volume(prev_price: float, price: float, volume: float) -> float:
    """Return the CVD contribution of one tick."""
    if price > prev_price:
        return volume
    if price < prev_price:
        return -volume
    return 0.0


class CvdSeries:
    """Bounded CVD series for one symbol.

    Parameters
    ----------
    symbol : str
        Symbol the series belongs to (used in log messages).
    max_length : int
        Maximum points kept.  Older points are discarded (FIFO).
    """

    def __init__(self, symbol: str, max_length: int = DEFAULT_MAX_LENGTH):
        self.symbol = symbol
        self.max_length = max_length
        self._values: deque[float] = deque(maxlen=max_length)

    @staticmethod
    def backfill(prices: Sequence[float], volumes: Sequence[float]) -> list[float]:
        """Compute the full, uncapped CVD series for paired samples."""
        result: list[float] = []
        running = 0.0
        for i in range(1, min(len(prices), len(volumes))):
            running += signed_volume(prices[i - 1], prices[i], volumes[i])
            result.append(running)
        return result

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def update(self, prices: Sequence[float], volumes: Sequence[float]) -> float:
        """Extend the series with the latest tick and return the current CVD.

        With fewer than two paired samples nothing is recorded and 0 is
        returned.
        """
        if len(prices) < 2 or len(volumes) < 2:
            return 0.0

        if not self._values:
            self._values.extend(self.backfill(prices, volumes))
            logger.debug(
                "CVD backfill: %s %d points from %d samples",
                self.symbol,
                len(self._values),
                min(len(prices), len(volumes)),
            )
        else:
            delta = signed_volume(prices[-2], prices[-1], volumes[-1])
            self._values.append(self._values[-1] + delta)

        return self._values[-1]

    def slope(self, lookback: int = 5) -> float:
        """Least-squares slope over the last ``lookback + 1`` points.

        x is the point index within the window, y the CVD value.  Returns 0
        when fewer than ``lookback + 1`` points exist.
        """
        if len(self._values) < lookback + 1:
            return 0.0

        window = np.asarray(list(self._values)[-(lookback + 1):], dtype=np.float64)
        n = len(window)
        if n < 2:
            return 0.0

        x = np.arange(n, dtype=np.float64)
        sum_x = x.sum()
        sum_y = window.sum()
        sum_xy = (x * window).sum()
        sum_x2 = (x * x).sum()

        return float((n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x))

    def trend(self, lookback: int = 10) -> CvdTrend:
        """Classify the relative CVD change across the last ``lookback`` points."""
        if lookback < 1 or len(self._values) < lookback:
            return CvdTrend.NEUTRAL

        window = list(self._values)[-lookback:]
        first, last = window[0], window[-1]
        strength = (last - first) / abs(first or 1)

        if strength > TREND_THRESHOLD:
            return CvdTrend.BULLISH
        if strength < -TREND_THRESHOLD:
            return CvdTrend.BEARISH
        return CvdTrend.NEUTRAL

    @property
    def current(self) -> float:
        return self._values[-1] if self._values else 0.0

    @property
    def values(self) -> list[float]:
        return list(self._values)

    def clear(self) -> None:
        self._values.clear()

    def __len__(self) -> int:
        return len(self._values)


class CvdStore:
    """Registry of CVD series keyed by symbol.

    Each series has a single writer: the pipeline serializes updates for
    a symbol, so the store itself takes no locks.
    """

    def __init__(self, max_length: int = DEFAULT_MAX_LENGTH):
        self.max_length = max_length
        self._series: dict[str, CvdSeries] = {}

    def get(self, symbol: str) -> CvdSeries:
        """Get or create the series for a symbol."""
        series = self._series.get(symbol)
        if series is None:
            series = CvdSeries(symbol, self.max_length)
            self._series[symbol] = series
        return series

    def reset(self, symbol: str) -> None:
        """Drop the series for a symbol; the next update back-fills again."""
        self._series.pop(symbol, None)

    def symbols(self) -> list[str]:
        return sorted(self._series)
