"""OHLCV bar data model."""

from pydantic import BaseModel, ConfigDict, Field


class Bar(BaseModel):
    """One OHLCV bar (candlestick) for a fixed period.

    Bars are supplied by the price history provider already validated and
    ordered by strictly increasing ``timestamp``.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: int  # Unix epoch in milliseconds
    open: float
    high: float
    low: float
    close: float
    volume: int = Field(default=0, ge=0)

    @property
    def is_bullish(self) -> bool:
        """Check if this is a bullish (green) candle."""
        return self.close > self.open

    @property
    def is_bearish(self) -> bool:
        """Check if this is a bearish (red) candle."""
        return self.close < self.open

    @property
    def body_size(self) -> float:
        """Get the absolute size of the candle body."""
        return abs(self.close - self.open)

    @property
    def range_size(self) -> float:
        """Get the full range (high - low) of the candle."""
        return self.high - self.low

    @property
    def upper_wick(self) -> float:
        return self.high - max(self.open, self.close)

    @property
    def lower_wick(self) -> float:
        return min(self.open, self.close) - self.low

    @property
    def typical_price(self) -> float:
        """(high + low + close) / 3, used by VWAP and MFI."""
        return (self.high + self.low + self.close) / 3


def source_values(bars: list[Bar], source: str = "close") -> list[float]:
    """Extract one price field ("open", "high", "low" or "close") from bars."""
    return [getattr(bar, source) for bar in bars]


def bar_timestamps(bars: list[Bar]) -> list[int]:
    """Get the master timestamp axis of a bar sequence."""
    return [bar.timestamp for bar in bars]
