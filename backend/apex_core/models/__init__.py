"""Data models."""

from apex_core.models.bar import Bar, bar_timestamps, source_values
from apex_core.models.config import (
    AnalysisConfig,
    IndicatorConfig,
    IndicatorKind,
    PriceSource,
)
from apex_core.models.series import (
    BollingerOutput,
    BollingerPoint,
    IndicatorOutput,
    IndicatorPoint,
    LineOutput,
    MACDOutput,
    MACDPoint,
    SeriesPoint,
)
from apex_core.models.signal import (
    Action,
    Bias,
    ConsensusResult,
    KeySignal,
    TimeframeSignal,
    TradingSignal,
)

__all__ = [
    # Market data
    "Bar",
    "bar_timestamps",
    "source_values",
    # Configuration
    "AnalysisConfig",
    "IndicatorConfig",
    "IndicatorKind",
    "PriceSource",
    # Indicator outputs
    "BollingerOutput",
    "BollingerPoint",
    "IndicatorOutput",
    "IndicatorPoint",
    "LineOutput",
    "MACDOutput",
    "MACDPoint",
    "SeriesPoint",
    # Signals
    "Action",
    "Bias",
    "ConsensusResult",
    "KeySignal",
    "TimeframeSignal",
    "TradingSignal",
]
