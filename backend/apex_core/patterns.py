"""Candlestick pattern detection on the latest bar."""

from typing import Sequence

from pydantic import BaseModel, ConfigDict

from apex_core.models.bar import Bar
from apex_core.models.signal import Bias

MIN_BARS = 3

DOJI_BODY_RATIO = 0.1
HAMMER_LOWER_WICK_RATIO = 2.0
HAMMER_UPPER_WICK_RATIO = 0.5


class PatternDetection(BaseModel):
    """A candlestick pattern found on a bar."""

    model_config = ConfigDict(frozen=True)

    pattern: str
    bias: Bias
    confidence: int
    timestamp: int
    price_level: float
    description: str = ""


def _is_bullish_engulfing(prev: Bar, bar: Bar) -> bool:
    return (
        prev.is_bearish
        and bar.is_bullish
        and bar.open < prev.close
        and bar.close > prev.open
    )


def _is_bearish_engulfing(prev: Bar, bar: Bar) -> bool:
    return (
        prev.is_bullish
        and bar.is_bearish
        and bar.open > prev.close
        and bar.close < prev.open
    )


def detect_candlestick_patterns(bars: Sequence[Bar]) -> list[PatternDetection]:
    """
    Detect Doji, Hammer and Engulfing patterns on the latest bar.

    - Doji: body under 10% of the bar's range (Neutral, 80)
    - Hammer: lower wick over 2x the body and upper wick under half the
      body (Bullish, 75)
    - Bullish/Bearish Engulfing: the body engulfs the previous opposite
      candle's body (85)

    Returns an empty list with fewer than 3 bars.
    """
    if len(bars) < MIN_BARS:
        return []

    latest = bars[-1]
    prev = bars[-2]
    body = latest.body_size
    found: list[PatternDetection] = []

    def add(pattern: str, bias: Bias, confidence: int, description: str) -> None:
        found.append(
            PatternDetection(
                pattern=pattern,
                bias=bias,
                confidence=confidence,
                timestamp=latest.timestamp,
                price_level=latest.close,
                description=description,
            )
        )

    if body < latest.range_size * DOJI_BODY_RATIO:
        add("Doji", Bias.NEUTRAL, 80, "Market indecision")

    if (
        latest.lower_wick > body * HAMMER_LOWER_WICK_RATIO
        and latest.upper_wick < body * HAMMER_UPPER_WICK_RATIO
    ):
        add("Hammer", Bias.BULLISH, 75, "Bullish reversal at support")

    if _is_bullish_engulfing(prev, latest):
        add("BullishEngulfing", Bias.BULLISH, 85, "Strong bullish reversal")
    elif _is_bearish_engulfing(prev, latest):
        add("BearishEngulfing", Bias.BEARISH, 85, "Strong bearish reversal")

    return found
