"""Tests for technical indicators."""

import math

import pytest

from tickwatch.indicators import (
    rsi,
    ema,
    macd,
    moving_average,
    bollinger_bands,
    volume_spike,
    IndicatorCalculator,
)
from tickwatch.models import CvdTrend


class TestRSI:
    """Tests for RSI calculation."""

    @pytest.mark.parametrize("length", [0, 1, 5, 14])
    def test_rsi_insufficient_data_is_neutral(self, length):
        """Fewer than period + 1 prices returns exactly 50."""
        prices = [100.0 + i for i in range(length)]
        assert rsi(prices, 14) == 50

    def test_rsi_no_losses(self):
        """Only gains in the window returns 100."""
        prices = [float(i) for i in range(1, 20)]
        assert rsi(prices, 14) == 100

    def test_rsi_flat_prices(self):
        """No movement at all also has zero average loss."""
        assert rsi([50.0] * 20, 14) == 100

    def test_rsi_basic(self):
        """Gains 2, losses 1 over 2 changes -> RS = 2 -> RSI = 66.67."""
        result = rsi([10.0, 12.0, 11.0], period=2)
        assert result == pytest.approx(100 - 100 / 3)

    def test_rsi_balanced(self):
        """Equal gains and losses gives 50."""
        assert rsi([10.0, 11.0, 10.0], period=2) == pytest.approx(50.0)

    def test_rsi_uses_only_last_period_changes(self):
        """The large drop before the window is ignored."""
        assert rsi([100.0, 50.0, 51.0, 52.0], period=2) == 100


class TestEMA:
    """Tests for EMA calculation."""

    def test_ema_empty(self):
        assert ema([], 5) == 0

    def test_ema_single_value(self):
        assert ema([42.0], 5) == 42.0

    def test_ema_seeded_with_first_value(self):
        """period 3 -> multiplier 0.5: 1 -> 1.5 -> 2.25."""
        assert ema([1.0, 2.0, 3.0], 3) == pytest.approx(2.25)

    def test_ema_constant(self):
        assert ema([7.0] * 30, 13) == pytest.approx(7.0)

    def test_ema_shorter_period_tracks_faster(self):
        prices = [float(i) for i in range(1, 60)]
        assert ema(prices, 5) > ema(prices, 50)


class TestMACD:
    """Tests for MACD calculation."""

    def test_macd_insufficient_data(self):
        result = macd([100.0] * 25)
        assert result.line == 0
        assert result.signal == 0
        assert result.macd == 0

    def test_macd_flat_prices(self):
        result = macd([100.0] * 40)
        assert result.line == pytest.approx(0.0)

    def test_macd_signal_is_fixed_ratio(self):
        """Signal line is 0.8 x MACD line; histogram is the remainder."""
        prices = [100.0 + i * 0.5 for i in range(40)]
        result = macd(prices)

        assert result.line == pytest.approx(ema(prices, 12) - ema(prices, 26))
        assert result.line > 0
        assert result.signal == pytest.approx(result.line * 0.8)
        assert result.macd == pytest.approx(result.line - result.signal)


class TestMovingAverage:
    """Tests for simple moving average."""

    def test_ma_basic(self):
        assert moving_average([1.0, 2.0, 3.0, 4.0], 2) == pytest.approx(3.5)

    def test_ma_insufficient_returns_latest(self):
        assert moving_average([1.0, 2.0, 3.0], 5) == 3.0

    def test_ma_empty(self):
        assert moving_average([], 5) == 0


class TestBollingerBands:
    """Tests for Bollinger Bands."""

    def test_bollinger_insufficient_collapses(self):
        result = bollinger_bands([10.0, 11.0, 12.0], period=20)
        assert result.upper == result.middle == result.lower == 12.0

    def test_bollinger_empty(self):
        result = bollinger_bands([], period=20)
        assert result.upper == result.middle == result.lower == 0

    def test_bollinger_matches_manual_calculation(self):
        """Exactly `period` samples: mean +/- 2 population std devs."""
        prices = [101.0, 99.5, 102.25, 100.0, 98.75, 103.5, 100.25, 99.0,
                  101.75, 102.0, 97.5, 100.5, 101.25, 99.75, 100.0, 102.5,
                  98.25, 101.0, 100.75, 99.25]
        mean = sum(prices) / len(prices)
        std = math.sqrt(sum((p - mean) ** 2 for p in prices) / len(prices))

        result = bollinger_bands(prices, period=20)

        assert result.middle == pytest.approx(mean)
        assert result.upper == pytest.approx(mean + 2 * std)
        assert result.lower == pytest.approx(mean - 2 * std)

    def test_bollinger_uses_last_period(self):
        prices = [1000.0] * 10 + [100.0] * 20
        result = bollinger_bands(prices, period=20)
        assert result.middle == pytest.approx(100.0)
        assert result.upper == pytest.approx(100.0)


class TestVolumeSpike:
    """Tests for volume spike detection."""

    def test_volume_spike_insufficient_data(self):
        avg, spike = volume_spike([100.0, 5000.0], period=20)
        assert avg == 5000.0
        assert spike is False

    def test_volume_spike_empty(self):
        assert volume_spike([], period=20) == (0, False)

    def test_volume_spike_detected(self):
        """avg = (19 * 100 + 300) / 20 = 110; 300 > 220."""
        avg, spike = volume_spike([100.0] * 19 + [300.0], period=20)
        assert avg == pytest.approx(110.0)
        assert spike is True

    def test_volume_spike_below_threshold(self):
        """avg = 105; 200 < 210."""
        avg, spike = volume_spike([100.0] * 19 + [200.0], period=20)
        assert avg == pytest.approx(105.0)
        assert spike is False


class TestIndicatorCalculator:
    """Tests for IndicatorCalculator class."""

    def test_calculate_snapshot(self):
        n = 60
        prices = [100.0 + i * 0.1 for i in range(n)]
        volumes = [1000.0] * n

        calc = IndicatorCalculator()
        snapshot = calc.calculate(
            "BTCUSDT",
            prices,
            volumes,
            prices[-1],
            cvd=500.0,
            cvd_trend=CvdTrend.BULLISH,
            cvd_slope=12.5,
        )

        assert snapshot.symbol == "BTCUSDT"
        assert snapshot.price == prices[-1]
        assert snapshot.rsi == 100
        assert snapshot.ema5 > snapshot.ema50
        assert snapshot.ema8 == pytest.approx(ema(prices, 8))
        assert snapshot.macd.line > 0
        assert snapshot.volume == 1000.0
        assert snapshot.avg_volume == pytest.approx(1000.0)
        assert snapshot.volume_spike is False
        assert snapshot.cvd == 500.0
        assert snapshot.cvd_trend == CvdTrend.BULLISH
        assert snapshot.cvd_slope == 12.5

    def test_calculate_single_tick(self):
        """One sample degrades gracefully everywhere."""
        snapshot = IndicatorCalculator().calculate("ETHUSDT", [2000.0], [5.0], 2000.0)

        assert snapshot.rsi == 50
        assert snapshot.macd.line == 0
        assert snapshot.ema50 == 2000.0
        assert snapshot.bollinger.lower == 2000.0
        assert snapshot.avg_volume == 5.0
        assert snapshot.cvd_trend == CvdTrend.NEUTRAL

    def test_calculate_mismatched_lengths(self):
        with pytest.raises(ValueError, match="same length"):
            IndicatorCalculator().calculate("BTCUSDT", [1.0, 2.0], [1.0], 2.0)

    def test_deterministic(self):
        prices = [100.0 + (i % 7) - (i % 3) for i in range(50)]
        volumes = [10.0 + i for i in range(50)]
        calc = IndicatorCalculator()

        first = calc.calculate("BTCUSDT", prices, volumes, prices[-1])
        second = calc.calculate("BTCUSDT", prices, volumes, prices[-1])

        assert first == second
