"""Tests for the technical snapshot and presets."""

import pytest

from apex_core.errors import InsufficientDataError
from apex_core.models import Bias, IndicatorKind, MACDPoint
from apex_core.presets import DEFAULT_LAYOUT, PRESETS, get_preset
from apex_core.snapshot import macd_bias, rsi_state, technical_snapshot


class TestMacdBias:
    """Tests for macd_bias."""

    def test_bullish(self):
        assert macd_bias(MACDPoint(0, macd=1.0, signal=0.5, histogram=0.5)) == Bias.BULLISH

    def test_bearish(self):
        assert macd_bias(MACDPoint(0, macd=-1.0, signal=-0.5, histogram=-0.5)) == Bias.BEARISH

    def test_flat_is_neutral(self):
        assert macd_bias(MACDPoint(0, macd=1.0, signal=1.0, histogram=0.0)) == Bias.NEUTRAL

    def test_inconsistent_is_neutral(self):
        assert macd_bias(MACDPoint(0, macd=0.5, signal=1.0, histogram=0.5)) == Bias.NEUTRAL

    def test_missing_is_neutral(self):
        assert macd_bias(None) == Bias.NEUTRAL


class TestRsiState:
    """Tests for rsi_state."""

    @pytest.mark.parametrize(
        "value,state",
        [(75.0, "Overbought"), (25.0, "Oversold"), (70.0, "Neutral"), (30.0, "Neutral"), (50.0, "Neutral")],
    )
    def test_states(self, value, state):
        assert rsi_state(value) == state


class TestTechnicalSnapshot:
    """Tests for technical_snapshot."""

    def test_rising(self):
        prices = [100.0 + i for i in range(100)]
        snapshot = technical_snapshot(prices)

        assert snapshot.price == 199.0
        assert snapshot.rsi == 100.0
        assert snapshot.rsi_state == "Overbought"
        assert snapshot.macd == Bias.BULLISH
        assert snapshot.sma50 == pytest.approx(174.5)
        assert snapshot.ema20 < snapshot.price

    def test_short_series_falls_back_to_price(self):
        snapshot = technical_snapshot([10.0, 11.0, 12.0])

        assert snapshot.sma50 == 12.0
        assert snapshot.rsi == 50.0
        assert snapshot.rsi_state == "Neutral"

    def test_empty_raises(self):
        with pytest.raises(InsufficientDataError):
            technical_snapshot([])


class TestPresets:
    """Tests for the named indicator layouts."""

    def test_default_layout(self):
        assert [config.id for config in DEFAULT_LAYOUT] == ["SMA 50", "EMA 20"]

    def test_macd_rsi(self):
        configs = get_preset("MACD + RSI")
        assert [config.id for config in configs] == ["MACD 12-26-9", "RSI 14"]

    def test_bollinger_sma(self):
        configs = get_preset("BB + SMA50")
        assert configs[0].kind == IndicatorKind.BB
        assert configs[0].period == 20
        assert configs[0].std_dev == 2.0
        assert configs[1].id == "SMA 50"

    def test_golden_cross(self):
        assert [config.id for config in get_preset("Golden Cross")] == ["SMA 50", "SMA 200"]

    def test_all_presets_have_unique_ids(self):
        for configs in PRESETS.values():
            ids = [config.id for config in configs]
            assert len(ids) == len(set(ids))

    def test_unknown_raises(self):
        with pytest.raises(KeyError, match="Available"):
            get_preset("Ichimoku")
