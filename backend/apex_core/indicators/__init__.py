"""Technical indicators (pure math, no I/O)."""

from apex_core.indicators.indicators import (
    sma,
    ema,
    rsi,
    rsi_series,
    macd,
    bollinger_bands,
    true_range,
    atr,
    vwap,
    mfi,
    placeholder_timestamps,
    NEUTRAL_ATR,
    NEUTRAL_MFI,
    NEUTRAL_RSI,
)
from apex_core.indicators.registry import (
    compute_indicator,
    get_indicator,
    list_indicators,
    register_indicator,
)

# Import built-in computations to trigger registration
import apex_core.indicators.builtin  # noqa: F401

__all__ = [
    "sma",
    "ema",
    "rsi",
    "rsi_series",
    "macd",
    "bollinger_bands",
    "true_range",
    "atr",
    "vwap",
    "mfi",
    "placeholder_timestamps",
    "NEUTRAL_ATR",
    "NEUTRAL_MFI",
    "NEUTRAL_RSI",
    "compute_indicator",
    "get_indicator",
    "list_indicators",
    "register_indicator",
]
