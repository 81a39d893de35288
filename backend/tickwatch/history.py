"""Short-horizon history of indicator snapshots for diagnostics.

Keeps timestamped snapshots per symbol for ``max_age_seconds`` (default
60 s) and answers trend, stability and summary-statistics queries over
any indicator field within that window.  Expired snapshots are dropped
on every insert and by ``purge()``, which the application calls on a
fixed cadence.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

import numpy as np

from tickwatch.models import IndicatorSnapshot

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE_SECONDS = 60.0

# Percent change that counts as a trend
TREND_THRESHOLD_PERCENT = 0.1


@dataclass(frozen=True)
class TimedSnapshot:
    timestamp: float
    snapshot: IndicatorSnapshot


@dataclass(frozen=True)
class IndicatorTrend:
    trend: str  # "up", "down" or "neutral"
    change: float
    change_percent: float


@dataclass(frozen=True)
class IndicatorStats:
    min: float
    max: float
    avg: float
    current: float
    volatility: float  # population standard deviation


class IndicatorHistory:
    """Timestamped IndicatorSnapshots per symbol within a fixed horizon."""

    def __init__(
        self,
        max_age_seconds: float = DEFAULT_MAX_AGE_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.max_age_seconds = max_age_seconds
        self._clock = clock
        self._history: dict[str, list[TimedSnapshot]] = {}

    def add_snapshot(
        self,
        symbol: str,
        snapshot: IndicatorSnapshot,
        timestamp: float | None = None,
    ) -> None:
        """Record a snapshot (at the current clock time unless given)."""
        ts = self._clock() if timestamp is None else timestamp
        self._history.setdefault(symbol, []).append(TimedSnapshot(ts, snapshot))
        self._clean(symbol)

    def get_history(self, symbol: str) -> list[TimedSnapshot]:
        return list(self._history.get(symbol, []))

    def get_range(self, symbol: str, seconds_ago: float) -> list[TimedSnapshot]:
        """Snapshots recorded within the last ``seconds_ago`` seconds."""
        cutoff = self._clock() - seconds_ago
        return [s for s in self._history.get(symbol, []) if s.timestamp >= cutoff]

    def get_latest(self, symbol: str) -> TimedSnapshot | None:
        snapshots = self._history.get(symbol)
        return snapshots[-1] if snapshots else None

    def get_from_seconds_ago(
        self, symbol: str, seconds_ago: float
    ) -> TimedSnapshot | None:
        """The snapshot closest in time to ``seconds_ago`` seconds back."""
        snapshots = self._history.get(symbol)
        if not snapshots:
            return None
        target = self._clock() - seconds_ago
        return min(snapshots, key=lambda s: abs(s.timestamp - target))

    def _values(self, symbol: str, field: str, seconds_back: float) -> list[float]:
        if field not in IndicatorSnapshot.numeric_fields():
            raise KeyError(f"Unknown indicator field '{field}'")
        return [s.snapshot.value(field) for s in self.get_range(symbol, seconds_back)]

    def get_trend(
        self, symbol: str, field: str, seconds_back: float = 30
    ) -> IndicatorTrend:
        """Direction and size of change of a field across the window."""
        values = self._values(symbol, field, seconds_back)
        if len(values) < 2:
            return IndicatorTrend("neutral", 0.0, 0.0)

        oldest, newest = values[0], values[-1]
        change = newest - oldest
        change_percent = change / abs(oldest) * 100 if oldest != 0 else 0.0

        trend = "neutral"
        if abs(change_percent) > TREND_THRESHOLD_PERCENT:
            trend = "up" if change > 0 else "down"
        return IndicatorTrend(trend, change, change_percent)

    def is_stable(
        self,
        symbol: str,
        field: str,
        seconds_back: float = 15,
        threshold_percent: float = 1.0,
    ) -> bool:
        """True when at least 3 values all lie within threshold of their mean."""
        values = self._values(symbol, field, seconds_back)
        if len(values) < 3:
            return False

        avg = float(np.mean(values))
        if avg == 0:
            return False
        return all(abs((v - avg) / avg) * 100 <= threshold_percent for v in values)

    def get_stats(
        self, symbol: str, field: str, seconds_back: float = 60
    ) -> IndicatorStats:
        """Min, max, mean, latest and volatility of a field over the window."""
        values = self._values(symbol, field, seconds_back)
        if not values:
            return IndicatorStats(0.0, 0.0, 0.0, 0.0, 0.0)

        arr = np.asarray(values, dtype=np.float64)
        return IndicatorStats(
            min=float(arr.min()),
            max=float(arr.max()),
            avg=float(arr.mean()),
            current=float(arr[-1]),
            volatility=float(arr.std()),
        )

    def _clean(self, symbol: str) -> int:
        cutoff = self._clock() - self.max_age_seconds
        snapshots = self._history.get(symbol, [])
        kept = [s for s in snapshots if s.timestamp >= cutoff]
        self._history[symbol] = kept
        return len(snapshots) - len(kept)

    def purge(self) -> int:
        """Drop expired snapshots for every symbol; returns the number dropped."""
        dropped = sum(self._clean(symbol) for symbol in list(self._history))
        if dropped:
            logger.debug("Purged %d expired indicator snapshots", dropped)
        return dropped

    def clear(self) -> None:
        self._history.clear()

    def symbols(self) -> list[str]:
        return sorted(self._history)
