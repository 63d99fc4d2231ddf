"""Indicator output models.

Points use @dataclass(slots=True, frozen=True): they are created in bulk on
every recompute and handed to consumers as read-only snapshots.

Each indicator kind maps to exactly one output variant:
- LineOutput: SMA, EMA, RSI, and the latest-value indicators ATR/VWAP/MFI
  (a single point)
- MACDOutput: MACD
- BollingerOutput: Bollinger Bands
"""

from dataclasses import dataclass
from typing import Union

from apex_core.models.config import IndicatorKind


@dataclass(slots=True, frozen=True)
class SeriesPoint:
    """One scalar indicator value."""

    timestamp: int  # Unix epoch in milliseconds
    value: float


@dataclass(slots=True, frozen=True)
class MACDPoint:
    """One MACD point: line, signal and histogram share a timestamp."""

    timestamp: int
    macd: float
    signal: float
    histogram: float


@dataclass(slots=True, frozen=True)
class BollingerPoint:
    """One Bollinger Bands point."""

    timestamp: int
    upper: float
    middle: float
    lower: float


@dataclass(slots=True, frozen=True)
class LineOutput:
    """Output of a single-valued indicator."""

    kind: IndicatorKind
    points: tuple[SeriesPoint, ...]

    @property
    def values(self) -> list[float]:
        return [p.value for p in self.points]


@dataclass(slots=True, frozen=True)
class MACDOutput:
    """Output of MACD."""

    points: tuple[MACDPoint, ...]
    kind: IndicatorKind = IndicatorKind.MACD


@dataclass(slots=True, frozen=True)
class BollingerOutput:
    """Output of Bollinger Bands."""

    points: tuple[BollingerPoint, ...]
    kind: IndicatorKind = IndicatorKind.BB


IndicatorPoint = Union[SeriesPoint, MACDPoint, BollingerPoint]
IndicatorOutput = Union[LineOutput, MACDOutput, BollingerOutput]

OUTPUT_TYPES = (LineOutput, MACDOutput, BollingerOutput)
