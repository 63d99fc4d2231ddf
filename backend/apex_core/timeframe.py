"""Per-timeframe analysis: one TimeframeSignal from a bar history."""

import logging
from typing import Mapping, Sequence

from apex_core.errors import IndicatorError, InsufficientDataError
from apex_core.indicators import macd, rsi, sma
from apex_core.models.bar import Bar, source_values
from apex_core.models.config import AnalysisConfig
from apex_core.models.signal import Bias, KeySignal, TimeframeSignal
from apex_core.scoring import RSI_OVERBOUGHT, RSI_OVERSOLD, evaluate_prices

logger = logging.getLogger(__name__)

# Each point of score moves strength by this much (capped at 100)
STRENGTH_PER_POINT = 20


def _sign_bias(value: float) -> Bias:
    if value > 0:
        return Bias.BULLISH
    if value < 0:
        return Bias.BEARISH
    return Bias.NEUTRAL


def _rsi_bias(value: float) -> Bias:
    if value < RSI_OVERSOLD:
        return Bias.BULLISH
    if value > RSI_OVERBOUGHT:
        return Bias.BEARISH
    return Bias.NEUTRAL


def analyze_timeframe(
    timeframe: str,
    bars: Sequence[Bar],
    config: AnalysisConfig | None = None,
) -> TimeframeSignal:
    """
    Analyze one timeframe's bars.

    The bias follows the scoring engine's action. Strength scales the
    absolute score; confidence is the share of three indicator votes
    (RSI zone, MACD histogram sign, fast vs slow SMA) that agree with the
    bias. A vote that cannot be computed yet counts as Neutral.

    Raises:
        InsufficientDataError: If ``bars`` is empty
    """
    if config is None:
        config = AnalysisConfig()
    if not bars:
        raise InsufficientDataError(f"No bars to analyze for {timeframe}")

    prices = source_values(bars)
    signal = evaluate_prices(prices, config)
    bias = signal.bias

    key_signals: list[KeySignal] = []

    rsi_value = rsi(prices, config.rsi_period)
    rsi_vote = _rsi_bias(rsi_value)
    key_signals.append(KeySignal(name="RSI", value=rsi_value, bias=rsi_vote))

    macd_points = macd(prices, config.macd_fast, config.macd_slow, config.macd_signal)
    histogram = macd_points[-1].histogram
    macd_vote = _sign_bias(histogram)
    key_signals.append(KeySignal(name="MACD", value=histogram, bias=macd_vote))

    fast_sma = sma(prices, config.fast_sma_period)
    slow_sma = sma(prices, config.slow_sma_period)
    sma_vote = Bias.NEUTRAL
    if fast_sma and slow_sma:
        spread = fast_sma[-1].value - slow_sma[-1].value
        sma_vote = _sign_bias(spread)
        key_signals.append(
            KeySignal(
                name=f"SMA ({config.fast_sma_period}/{config.slow_sma_period})",
                value=spread,
                bias=sma_vote,
            )
        )

    votes = (rsi_vote, macd_vote, sma_vote)
    agreeing = sum(1 for vote in votes if vote == bias)

    return TimeframeSignal(
        timeframe=timeframe,
        bias=bias,
        strength=min(100, abs(signal.score) * STRENGTH_PER_POINT),
        confidence=round(100 * agreeing / len(votes)),
        key_signals=tuple(key_signals),
    )


def analyze_timeframes(
    bars_by_timeframe: Mapping[str, Sequence[Bar]],
    config: AnalysisConfig | None = None,
) -> list[TimeframeSignal]:
    """Analyze several timeframes, skipping (and logging) any that fail."""
    signals = []
    for timeframe, bars in bars_by_timeframe.items():
        try:
            signals.append(analyze_timeframe(timeframe, bars, config))
        except IndicatorError as e:
            logger.warning(f"Skipping timeframe {timeframe}: {e}")
    return signals
