"""Tests for the signal log sink."""

import orjson
import pytest

from tickwatch.models import BollingerValues, IndicatorSnapshot, MacdValues, Signal
from tickwatch_app.sinks import SignalLog


def make_signal(symbol="BTCUSDT", strategy="scalping", timestamp=1_700_000_000.0) -> Signal:
    snapshot = IndicatorSnapshot(
        symbol=symbol,
        price=100.0,
        rsi=35.0,
        macd=MacdValues(line=0.5, signal=0.4, macd=0.1),
        ema5=100.0,
        ema8=100.2,
        ema13=99.9,
        ema20=99.8,
        ema21=99.7,
        ema34=99.5,
        ema50=99.0,
        bollinger=BollingerValues(upper=102.0, middle=100.5, lower=99.5),
        volume=300.0,
        avg_volume=120.0,
        volume_spike=True,
        cvd=450.0,
        cvd_slope=12.0,
    )
    return Signal(
        symbol=symbol,
        strategy=strategy,
        timestamp=timestamp,
        entry_price=100.0,
        take_profit=100.5,
        stop_loss=99.75,
        snapshot=snapshot,
        conditions={"rsi": True, "volume": True},
    )


class TestSignalLog:
    @pytest.mark.asyncio
    async def test_keeps_recent_signals(self):
        log = SignalLog(max_signals=2)
        for i in range(3):
            await log(make_signal(timestamp=1_700_000_000.0 + i))

        assert len(log) == 2
        assert [s.timestamp for s in log.recent()] == [1_700_000_001.0, 1_700_000_002.0]

    @pytest.mark.asyncio
    async def test_recent_filters(self):
        log = SignalLog()
        await log(make_signal("BTCUSDT", "scalping"))
        await log(make_signal("BTCUSDT", "pump"))
        await log(make_signal("ETHUSDT", "pump"))

        assert len(log.recent(symbol="BTCUSDT")) == 2
        assert len(log.recent(strategy="pump")) == 2
        assert len(log.recent(symbol="ETHUSDT", strategy="scalping")) == 0

        log.clear()
        assert len(log) == 0

    @pytest.mark.asyncio
    async def test_writes_json_lines(self, tmp_path):
        path = tmp_path / "signals.jsonl"
        log = SignalLog(path=path)
        first = make_signal()
        second = make_signal("ETHUSDT", "intraday")

        await log(first)
        await log(second)

        lines = path.read_bytes().splitlines()
        assert len(lines) == 2
        record = orjson.loads(lines[0])
        assert record["id"] == first.id
        assert record["symbol"] == "BTCUSDT"
        assert record["direction"] == 1
        assert record["snapshot"]["bollinger"]["lower"] == 99.5
        assert record["snapshot"]["cvd_trend"] == "neutral"
        assert record["conditions"] == {"rsi": True, "volume": True}

        assert Signal.model_validate(orjson.loads(lines[1])) == second

    @pytest.mark.asyncio
    async def test_no_path_writes_nothing(self, tmp_path):
        log = SignalLog()
        await log(make_signal())
        assert log.path is None
        assert list(tmp_path.iterdir()) == []
