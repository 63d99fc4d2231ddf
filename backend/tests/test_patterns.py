"""Tests for candlestick pattern detection."""

from apex_core.models import Bar, Bias
from apex_core.patterns import detect_candlestick_patterns


def _make_bar(i: int, open_: float, high: float, low: float, close: float) -> Bar:
    return Bar(
        timestamp=1_700_000_000_000 + i * 86_400_000,
        open=open_,
        high=high,
        low=low,
        close=close,
        volume=1000,
    )


# A plain bullish bar that forms no pattern with the bars used below
_LEAD = _make_bar(0, 99.0, 100.5, 98.5, 100.0)


def _detect(prev: Bar, latest: Bar) -> list:
    return detect_candlestick_patterns([_LEAD, prev, latest])


class TestPatterns:
    """Tests for detect_candlestick_patterns."""

    def test_needs_three_bars(self):
        bars = [_make_bar(0, 100.0, 101.0, 99.0, 100.0)] * 2
        assert detect_candlestick_patterns(bars) == []

    def test_doji(self):
        prev = _make_bar(1, 100.0, 101.0, 99.5, 100.5)
        latest = _make_bar(2, 100.0, 101.0, 99.0, 100.05)

        patterns = _detect(prev, latest)

        assert [p.pattern for p in patterns] == ["Doji"]
        doji = patterns[0]
        assert doji.bias == Bias.NEUTRAL
        assert doji.confidence == 80
        assert doji.timestamp == latest.timestamp
        assert doji.price_level == latest.close

    def test_hammer(self):
        prev = _make_bar(1, 100.0, 100.8, 99.8, 100.5)
        latest = _make_bar(2, 100.0, 101.2, 97.0, 101.0)

        patterns = _detect(prev, latest)

        assert [p.pattern for p in patterns] == ["Hammer"]
        assert patterns[0].bias == Bias.BULLISH
        assert patterns[0].confidence == 75

    def test_bullish_engulfing(self):
        prev = _make_bar(1, 101.0, 101.2, 99.8, 100.0)
        latest = _make_bar(2, 99.5, 102.2, 99.3, 102.0)

        patterns = _detect(prev, latest)

        assert [p.pattern for p in patterns] == ["BullishEngulfing"]
        assert patterns[0].bias == Bias.BULLISH
        assert patterns[0].confidence == 85

    def test_bearish_engulfing(self):
        prev = _make_bar(1, 100.0, 101.2, 99.8, 101.0)
        latest = _make_bar(2, 101.5, 101.6, 98.9, 99.0)

        patterns = _detect(prev, latest)

        assert [p.pattern for p in patterns] == ["BearishEngulfing"]
        assert patterns[0].bias == Bias.BEARISH
        assert patterns[0].confidence == 85

    def test_flat_bar_has_no_pattern(self):
        prev = _make_bar(1, 100.0, 101.0, 99.0, 100.5)
        latest = _make_bar(2, 100.0, 100.0, 100.0, 100.0)
        assert _detect(prev, latest) == []

    def test_only_latest_bar_checked(self):
        doji = _make_bar(1, 100.0, 101.0, 99.0, 100.05)
        plain = _make_bar(2, 100.0, 100.6, 99.9, 100.5)
        assert _detect(doji, plain) == []
