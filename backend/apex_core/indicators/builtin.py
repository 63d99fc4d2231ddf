"""Built-in indicator computations, registered by kind.

Each adapter reads the configured source field from the bars and wraps the
raw indicator result in its output variant. ATR, VWAP and MFI produce a
single point holding the latest value.
"""

from apex_core.errors import InsufficientDataError
from apex_core.indicators.indicators import (
    atr,
    bollinger_bands,
    ema,
    macd,
    mfi,
    placeholder_timestamps,
    rsi_series,
    sma,
    vwap,
)
from apex_core.indicators.registry import register_indicator
from apex_core.models.bar import source_values
from apex_core.models.config import IndicatorKind
from apex_core.models.series import (
    BollingerOutput,
    LineOutput,
    MACDOutput,
    SeriesPoint,
)


def _prices(bars, config) -> list[float]:
    return source_values(bars, config.source.value)


def _latest(bars, kind: IndicatorKind, value: float, anchor_ms: int | None) -> LineOutput:
    if not bars:
        raise InsufficientDataError(f"{kind.value} needs at least one bar")
    stamp = placeholder_timestamps(1, anchor_ms)[0]
    return LineOutput(kind=kind, points=(SeriesPoint(stamp, value),))


@register_indicator(IndicatorKind.SMA)
def _compute_sma(bars, config, anchor_ms=None) -> LineOutput:
    points = sma(_prices(bars, config), config.period, anchor_ms)
    return LineOutput(kind=IndicatorKind.SMA, points=tuple(points))


@register_indicator(IndicatorKind.EMA)
def _compute_ema(bars, config, anchor_ms=None) -> LineOutput:
    points = ema(_prices(bars, config), config.period, anchor_ms)
    return LineOutput(kind=IndicatorKind.EMA, points=tuple(points))


@register_indicator(IndicatorKind.RSI)
def _compute_rsi(bars, config, anchor_ms=None) -> LineOutput:
    prices = _prices(bars, config)
    values = rsi_series(prices, config.period)
    stamps = placeholder_timestamps(len(values), anchor_ms)
    return LineOutput(
        kind=IndicatorKind.RSI,
        points=tuple(SeriesPoint(ts, v) for ts, v in zip(stamps, values)),
    )


@register_indicator(IndicatorKind.MACD)
def _compute_macd(bars, config, anchor_ms=None) -> MACDOutput:
    points = macd(
        _prices(bars, config),
        config.fast_period,
        config.slow_period,
        config.signal_period,
        anchor_ms,
    )
    return MACDOutput(points=tuple(points))


@register_indicator(IndicatorKind.BB)
def _compute_bollinger(bars, config, anchor_ms=None) -> BollingerOutput:
    points = bollinger_bands(_prices(bars, config), config.period, config.std_dev, anchor_ms)
    return BollingerOutput(points=tuple(points))


@register_indicator(IndicatorKind.ATR)
def _compute_atr(bars, config, anchor_ms=None) -> LineOutput:
    return _latest(bars, IndicatorKind.ATR, atr(bars, config.period), anchor_ms)


@register_indicator(IndicatorKind.VWAP)
def _compute_vwap(bars, config, anchor_ms=None) -> LineOutput:
    return _latest(bars, IndicatorKind.VWAP, vwap(bars), anchor_ms)


@register_indicator(IndicatorKind.MFI)
def _compute_mfi(bars, config, anchor_ms=None) -> LineOutput:
    return _latest(bars, IndicatorKind.MFI, mfi(bars, config.period), anchor_ms)
