"""Edge detection for "all conditions met" transitions.

Each (symbol, strategy) pair is a two-state machine:

    ARMED --all met--> TRIGGERED   fires one trigger
    TRIGGERED --all met--> TRIGGERED   nothing
    TRIGGERED --not all met--> ARMED   silent reset

Sustained satisfaction therefore produces exactly one trigger until the
conditions lapse and are satisfied again.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)


class EdgeState(str, Enum):
    """State of one (symbol, strategy) edge detector."""

    ARMED = "armed"
    TRIGGERED = "triggered"


@dataclass
class _Entry:
    state: EdgeState = EdgeState.ARMED
    conditions: dict[str, bool] = field(default_factory=dict)


class EdgeDetector:
    """Track the aggregate decision per (symbol, strategy) and detect rising edges."""

    def __init__(self):
        self._entries: dict[tuple[str, str], _Entry] = {}

    @staticmethod
    def _key(symbol: str, strategy: str) -> tuple[str, str]:
        return symbol, getattr(strategy, "value", strategy)

    def update(
        self,
        symbol: str,
        strategy: str,
        all_met: bool,
        conditions: dict[str, bool] | None = None,
    ) -> bool:
        """Record the latest aggregate decision.

        Args:
            symbol: Trading symbol.
            strategy: Strategy kind.
            all_met: Whether every condition passed on this tick.
            conditions: Condition vector, kept for diagnostics.

        Returns:
            True only on an ARMED -> TRIGGERED transition.
        """
        key = self._key(symbol, strategy)
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries[key] = _Entry()

        if conditions is not None:
            entry.conditions = dict(conditions)

        fired = all_met and entry.state == EdgeState.ARMED
        entry.state = EdgeState.TRIGGERED if all_met else EdgeState.ARMED

        if fired:
            logger.info("%s: All green - Symbol: %s", key[1].upper(), symbol)
        return fired

    def state(self, symbol: str, strategy: str) -> EdgeState:
        entry = self._entries.get(self._key(symbol, strategy))
        return entry.state if entry else EdgeState.ARMED

    def is_triggered(self, symbol: str, strategy: str) -> bool:
        return self.state(symbol, strategy) == EdgeState.TRIGGERED

    def last_conditions(self, symbol: str, strategy: str) -> dict[str, bool]:
        """Return the last recorded condition vector (empty if none)."""
        entry = self._entries.get(self._key(symbol, strategy))
        return dict(entry.conditions) if entry else {}

    def reset(self, symbol: str, strategy: str | None = None) -> None:
        """Re-arm one pair, or every strategy of a symbol."""
        if strategy is not None:
            self._entries.pop(self._key(symbol, strategy), None)
            return
        for key in [k for k in self._entries if k[0] == symbol]:
            del self._entries[key]
