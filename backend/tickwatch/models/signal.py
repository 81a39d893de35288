"""Signal data models."""

import hashlib
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict

from tickwatch.models.snapshot import IndicatorSnapshot


class Direction(int, Enum):
    """Trade direction. Signals are long-only."""

    LONG = 1


def _generate_signal_id(strategy: str, symbol: str, timestamp: float) -> str:
    """Generate deterministic signal ID based on signal attributes.

    Replaying the same tick stream produces the same IDs, so sinks can
    deduplicate.
    """
    ts_str = datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime(
        "%Y%m%d%H%M%S%f"
    )
    key = f"{strategy}:{symbol}:{ts_str}"
    return hashlib.sha256(key.encode()).hexdigest()[:32]


class Signal(BaseModel):
    """Trading signal emitted once per all-conditions-met edge."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    symbol: str
    strategy: str
    direction: Direction = Direction.LONG
    timestamp: float  # Unix timestamp in seconds
    entry_price: float
    take_profit: float
    stop_loss: float
    snapshot: IndicatorSnapshot
    conditions: dict[str, bool]

    def model_post_init(self, __context) -> None:
        """Generate deterministic ID after model initialization."""
        if not self.id:
            object.__setattr__(
                self,
                "id",
                _generate_signal_id(self.strategy, self.symbol, self.timestamp),
            )

    @property
    def signal_time(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)

    @property
    def risk_amount(self) -> float:
        """Get the risk amount (distance to stop loss)."""
        return self.entry_price - self.stop_loss

    @property
    def reward_amount(self) -> float:
        """Get the reward amount (distance to take profit)."""
        return self.take_profit - self.entry_price
