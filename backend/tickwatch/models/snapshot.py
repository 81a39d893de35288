"""Indicator snapshot models.

An IndicatorSnapshot is produced fresh on every tick and never mutated
afterwards. History queries address its numeric fields by name through
``IndicatorSnapshot.value``.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class CvdTrend(str, Enum):
    """Direction of cumulative volume delta over a lookback window."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class MacdValues(BaseModel):
    """MACD line, signal line and histogram."""

    model_config = ConfigDict(frozen=True)

    line: float = 0.0
    signal: float = 0.0
    macd: float = 0.0  # line - signal


class BollingerValues(BaseModel):
    """Bollinger band envelope."""

    model_config = ConfigDict(frozen=True)

    upper: float
    middle: float
    lower: float


# Flattened names for nested values, used by history queries
_NESTED_FIELDS = {
    "macd_line": ("macd", "line"),
    "macd_signal": ("macd", "signal"),
    "macd_histogram": ("macd", "macd"),
    "bollinger_upper": ("bollinger", "upper"),
    "bollinger_middle": ("bollinger", "middle"),
    "bollinger_lower": ("bollinger", "lower"),
}


class IndicatorSnapshot(BaseModel):
    """All indicator values for one symbol at one tick."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    price: float
    rsi: float
    macd: MacdValues
    ema5: float
    ema8: float
    ema13: float
    ema20: float
    ema21: float
    ema34: float
    ema50: float
    bollinger: BollingerValues
    volume: float
    avg_volume: float
    volume_spike: bool
    cvd: float = 0.0
    cvd_trend: CvdTrend = CvdTrend.NEUTRAL
    cvd_slope: float = 0.0

    def value(self, name: str) -> float:
        """Return a numeric indicator value by field name.

        Nested values are available under flattened names such as
        ``macd_line`` or ``bollinger_lower``.

        Raises:
            KeyError: If the name does not refer to a numeric value.
        """
        if name in _NESTED_FIELDS:
            outer, inner = _NESTED_FIELDS[name]
            return getattr(getattr(self, outer), inner)

        if name not in type(self).model_fields:
            raise KeyError(f"Unknown indicator field '{name}'")
        value = getattr(self, name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise KeyError(f"Indicator field '{name}' is not numeric")
        return float(value)

    @classmethod
    def numeric_fields(cls) -> list[str]:
        """Names accepted by ``value``."""
        names = [
            name
            for name, info in cls.model_fields.items()
            if info.annotation is float
        ]
        return names + list(_NESTED_FIELDS)
