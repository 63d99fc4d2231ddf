"""Technical indicators for the chart and signal engine.

Series indicators (SMA, EMA, MACD, Bollinger Bands) return one point per
output value, stamped with placeholder timestamps: one day apart, counted
back from ``anchor_ms`` (defaults to now). Those timestamps are never used
for display; the alignment layer maps outputs onto the bars' own axis.

Latest-value indicators (scalar RSI, ATR, VWAP, MFI) return a float and
degrade to a neutral value instead of raising when there is too little data.
"""

import logging
import math
import time
from typing import Sequence

import numpy as np

from apex_core.indicators.kernel import (
    exponential_recurrence,
    population_variance,
    simple_moving_average,
    wilder_recurrence,
)
from apex_core.models.bar import Bar
from apex_core.models.series import BollingerPoint, MACDPoint, SeriesPoint
from apex_core.validation import (
    require_fast_below_slow,
    require_period,
    require_positive,
)

logger = logging.getLogger(__name__)

DAY_MS = 86_400_000

# Neutral fallbacks for latest-value indicators
NEUTRAL_RSI = 50.0
NEUTRAL_MFI = 50.0
NEUTRAL_ATR = 0.0


def placeholder_timestamps(length: int, anchor_ms: int | None = None) -> list[int]:
    """Daily timestamps ending at ``anchor_ms`` for a series of ``length`` inputs."""
    if anchor_ms is None:
        anchor_ms = int(time.time() * 1000)
    return [anchor_ms - (length - i - 1) * DAY_MS for i in range(length)]


# =============================================================================
# Moving averages
# =============================================================================

def sma(
    values: Sequence[float],
    period: int,
    anchor_ms: int | None = None,
) -> list[SeriesPoint]:
    """
    Calculate Simple Moving Average.

    Args:
        values: Sequence of price values
        period: SMA period

    Returns:
        ``len(values) - period + 1`` points (empty when period exceeds the
        data); the first one corresponds to input index ``period - 1``
    """
    means = simple_moving_average(values, period)
    stamps = placeholder_timestamps(len(values), anchor_ms)[period - 1:]
    return [SeriesPoint(ts, float(v)) for ts, v in zip(stamps, means)]


def ema(
    values: Sequence[float],
    period: int,
    anchor_ms: int | None = None,
) -> list[SeriesPoint]:
    """
    Calculate Exponential Moving Average.

    Uses ``k = 2 / (period + 1)`` seeded with the first value, so unlike
    SMA the output has the same length as the input.

    Args:
        values: Sequence of price values
        period: EMA period

    Returns:
        List of EMA points, one per input value
    """
    require_period("period", period)
    smoothed = exponential_recurrence(values, 2 / (period + 1))
    stamps = placeholder_timestamps(len(values), anchor_ms)
    return [SeriesPoint(ts, float(v)) for ts, v in zip(stamps, smoothed)]


# =============================================================================
# RSI
# =============================================================================

def _rsi_from_averages(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100 - 100 / (1 + rs)


def _wilder_gain_loss(prices: Sequence[float], period: int) -> tuple[np.ndarray, np.ndarray]:
    """Average gain/loss after the seed window and after each later delta.

    Element 0 is the seed (mean of the first ``period`` deltas); element
    ``j`` is the smoothed average once delta ``period + j - 1`` is applied.
    Requires ``len(prices) >= period + 1``.
    """
    deltas = np.diff(np.asarray(prices, dtype=np.float64))
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    seed_gain = float(gains[:period].sum() / period)
    seed_loss = float(losses[:period].sum() / period)

    if deltas.size == period:
        return np.array([seed_gain]), np.array([seed_loss])

    avg_gains = wilder_recurrence(gains[period:], period, seed_gain)
    avg_losses = wilder_recurrence(losses[period:], period, seed_loss)
    return (
        np.concatenate(([seed_gain], avg_gains)),
        np.concatenate(([seed_loss], avg_losses)),
    )


def rsi(prices: Sequence[float], period: int = 14) -> float:
    """
    Calculate the latest Relative Strength Index (Wilder's smoothing).

    Returns 100 when the average loss is zero, and the neutral value 50
    when fewer than ``period + 1`` prices are available.
    """
    require_period("period", period)
    if len(prices) < period + 1:
        logger.debug(f"RSI({period}) needs {period + 1} prices, got {len(prices)}")
        return NEUTRAL_RSI

    avg_gains, avg_losses = _wilder_gain_loss(prices, period)
    return _rsi_from_averages(float(avg_gains[-1]), float(avg_losses[-1]))


def rsi_series(prices: Sequence[float], period: int = 14) -> list[float]:
    """
    Calculate RSI as one value per input price (for charting).

    The first ``period`` entries are the neutral 50 (warm-up), followed by
    one value per delta after the seed window, then the final value is
    repeated so the result is as long as the input. For
    ``period <= j <= len(prices) - 2`` the entry at ``j`` equals
    ``rsi(prices[:j + 2], period)``.
    """
    require_period("period", period)
    n = len(prices)
    if n < period + 1:
        return [NEUTRAL_RSI] * n

    avg_gains, avg_losses = _wilder_gain_loss(prices, period)

    result = [NEUTRAL_RSI] * period
    # Element 0 is the seed, which the chart form skips
    for gain, loss in zip(avg_gains[1:], avg_losses[1:]):
        result.append(_rsi_from_averages(float(gain), float(loss)))

    result.append(result[-1])
    return result


# =============================================================================
# MACD and Bollinger Bands
# =============================================================================

def macd(
    prices: Sequence[float],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
    anchor_ms: int | None = None,
) -> list[MACDPoint]:
    """
    Calculate MACD (line, signal, histogram).

    MACD line = EMA(fast) - EMA(slow), tail-aligned to the shorter of the
    two; signal = EMA(MACD line, signal_period); histogram = MACD - signal.

    Raises:
        InvalidParameterError: If a period is not positive or
            ``fast_period >= slow_period``
    """
    require_period("fast_period", fast_period)
    require_period("slow_period", slow_period)
    require_period("signal_period", signal_period)
    require_fast_below_slow(fast_period, slow_period)

    fast_line = exponential_recurrence(prices, 2 / (fast_period + 1))
    slow_line = exponential_recurrence(prices, 2 / (slow_period + 1))

    length = min(fast_line.size, slow_line.size)
    macd_line = fast_line[-length:] - slow_line[-length:]
    signal_line = exponential_recurrence(macd_line, 2 / (signal_period + 1))

    offset = macd_line.size - signal_line.size
    stamps = placeholder_timestamps(signal_line.size, anchor_ms)

    result = []
    for i in range(signal_line.size):
        macd_value = float(macd_line[offset + i])
        signal_value = float(signal_line[i])
        result.append(
            MACDPoint(
                timestamp=stamps[i],
                macd=macd_value,
                signal=signal_value,
                histogram=macd_value - signal_value,
            )
        )
    return result


def bollinger_bands(
    prices: Sequence[float],
    period: int = 20,
    std_dev: float = 2.0,
    anchor_ms: int | None = None,
) -> list[BollingerPoint]:
    """
    Calculate Bollinger Bands.

    middle = SMA(period); upper/lower = middle +/- std_dev * population
    standard deviation of the same trailing window. Output length matches
    the SMA's.
    """
    require_positive("std_dev", std_dev)
    middles = simple_moving_average(prices, period)
    arr = np.asarray(prices, dtype=np.float64)
    stamps = placeholder_timestamps(arr.size, anchor_ms)[period - 1:]

    result = []
    for i, mean in enumerate(middles):
        mean = float(mean)
        deviation = math.sqrt(population_variance(arr[i:i + period], mean))
        result.append(
            BollingerPoint(
                timestamp=stamps[i],
                upper=mean + std_dev * deviation,
                middle=mean,
                lower=mean - std_dev * deviation,
            )
        )
    return result


# =============================================================================
# Bar-based latest-value indicators
# =============================================================================

def true_range(bars: Sequence[Bar]) -> list[float]:
    """
    Calculate True Range for every bar after the first.

    TR = max(high - low, abs(high - prev_close), abs(low - prev_close))
    """
    result = []
    for i in range(1, len(bars)):
        high = bars[i].high
        low = bars[i].low
        prev_close = bars[i - 1].close
        result.append(max(high - low, abs(high - prev_close), abs(low - prev_close)))
    return result


def atr(bars: Sequence[Bar], period: int = 14) -> float:
    """
    Calculate the latest Average True Range.

    Seeded with the mean of the first ``period`` true ranges, then Wilder's
    smoothing. Returns 0 when fewer than ``period + 1`` bars are available.
    """
    require_period("period", period)
    if len(bars) < period + 1:
        logger.debug(f"ATR({period}) needs {period + 1} bars, got {len(bars)}")
        return NEUTRAL_ATR

    ranges = true_range(bars)
    value = sum(ranges[:period]) / period
    if len(ranges) > period:
        value = float(wilder_recurrence(ranges[period:], period, value)[-1])
    return value


def vwap(bars: Sequence[Bar]) -> float:
    """
    Calculate Volume Weighted Average Price over the whole range.

    This is a cumulative VWAP (no session reset). Returns 0 when the
    cumulative volume is 0.
    """
    cum_pv = 0.0
    cum_vol = 0
    for bar in bars:
        cum_pv += bar.typical_price * bar.volume
        cum_vol += bar.volume
    return cum_pv / cum_vol if cum_vol > 0 else 0.0


def mfi(bars: Sequence[Bar], period: int = 14) -> float:
    """
    Calculate the latest Money Flow Index.

    Raw money flow (typical price x volume) counts as positive when the
    typical price rose versus the previous bar and negative otherwise.
    Returns 100 when the negative flow over the window is 0, and the
    neutral value 50 when fewer than ``period + 1`` bars are available.
    """
    require_period("period", period)
    if len(bars) < period + 1:
        logger.debug(f"MFI({period}) needs {period + 1} bars, got {len(bars)}")
        return NEUTRAL_MFI

    positive = 0.0
    negative = 0.0
    for i in range(len(bars) - period, len(bars)):
        tp = bars[i].typical_price
        raw_flow = tp * bars[i].volume
        if tp > bars[i - 1].typical_price:
            positive += raw_flow
        else:
            negative += raw_flow

    if negative == 0:
        return 100.0
    return 100 - 100 / (1 + positive / negative)
