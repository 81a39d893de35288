"""Signal sinks.

SignalLog is registered as a pipeline signal callback.  It logs every
signal, keeps the most recent ones in memory for inspection and, when
given a path, appends each signal as one JSON line.
"""

from __future__ import annotations

import logging
from collections import deque
from pathlib import Path

import orjson

from tickwatch.models import Signal

logger = logging.getLogger(__name__)


def _serialize_signal(signal: Signal) -> bytes:
    """Serialize a Signal to one JSON line."""
    return orjson.dumps(signal.model_dump(mode="json")) + b"\n"


class SignalLog:
    """Bounded in-memory signal store with optional JSON-lines export.

    The file append is a blocking write on the event loop, made while the
    pipeline holds the symbol lock.  Signals are rare edge events and each
    line is small, so this is acceptable; a high-volume sink should hand
    writes to a worker instead.
    """

    def __init__(self, max_signals: int = 1000, path: Path | str | None = None):
        self._signals: deque[Signal] = deque(maxlen=max_signals)
        self.path = Path(path) if path else None

    async def __call__(self, signal: Signal) -> None:
        self._signals.append(signal)
        logger.info(
            "Signal %s: %s %s entry=%.6f tp=%.6f sl=%.6f",
            signal.id,
            signal.strategy,
            signal.symbol,
            signal.entry_price,
            signal.take_profit,
            signal.stop_loss,
        )
        if self.path is not None:
            with open(self.path, "ab") as f:
                f.write(_serialize_signal(signal))

    def recent(self, symbol: str | None = None, strategy: str | None = None) -> list[Signal]:
        """Signals in arrival order, optionally filtered."""
        return [
            s
            for s in self._signals
            if (symbol is None or s.symbol == symbol)
            and (strategy is None or s.strategy == strategy)
        ]

    def clear(self) -> None:
        self._signals.clear()

    def __len__(self) -> int:
        return len(self._signals)
