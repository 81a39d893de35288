"""Tick (price/volume sample) data models."""

import math

from pydantic import BaseModel, ConfigDict, Field, field_validator

# 9999-12-31T23:59:59Z, the last second datetime can represent
MAX_TIMESTAMP = 253_402_300_799.0


class Tick(BaseModel):
    """A single price/volume observation for a symbol."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    timestamp: float  # Unix timestamp in seconds
    price: float
    volume: float

    @field_validator("timestamp")
    @classmethod
    def _check_timestamp(cls, value: float) -> float:
        if not math.isfinite(value) or not 0 <= value <= MAX_TIMESTAMP:
            raise ValueError(f"timestamp must be a finite Unix time, got {value}")
        return value

    @field_validator("price")
    @classmethod
    def _check_price(cls, value: float) -> float:
        if not math.isfinite(value) or value <= 0:
            raise ValueError(f"price must be a finite positive number, got {value}")
        return value

    @field_validator("volume")
    @classmethod
    def _check_volume(cls, value: float) -> float:
        if not math.isfinite(value) or value < 0:
            raise ValueError(f"volume must be a finite non-negative number, got {value}")
        return value


class TickBuffer(BaseModel):
    """Bounded, time-ordered history of ticks for indicator calculation."""

    symbol: str
    ticks: list[Tick] = Field(default_factory=list)
    max_size: int = 200

    def add(self, tick: Tick) -> None:
        """Append a tick, evicting the oldest ones beyond max size."""
        if tick.symbol != self.symbol:
            raise ValueError(
                f"Tick for {tick.symbol} added to buffer of {self.symbol}"
            )
        self.ticks.append(tick)
        if len(self.ticks) > self.max_size:
            self.ticks = self.ticks[-self.max_size :]

    def prices(self) -> list[float]:
        """Get list of prices, oldest first."""
        return [t.price for t in self.ticks]

    def volumes(self) -> list[float]:
        """Get list of volumes, oldest first."""
        return [t.volume for t in self.ticks]

    @property
    def latest(self) -> Tick | None:
        return self.ticks[-1] if self.ticks else None

    def __len__(self) -> int:
        return len(self.ticks)
