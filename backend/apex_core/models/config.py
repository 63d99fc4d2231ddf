"""Indicator and analysis configuration models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from apex_core.validation import (
    require_fast_below_slow,
    require_period,
    require_positive,
)


class IndicatorKind(str, Enum):
    """Supported indicator kinds."""

    SMA = "SMA"
    EMA = "EMA"
    RSI = "RSI"
    MACD = "MACD"
    BB = "BB"
    ATR = "ATR"
    VWAP = "VWAP"
    MFI = "MFI"


class PriceSource(str, Enum):
    """Bar field an indicator reads its prices from."""

    OPEN = "open"
    HIGH = "high"
    LOW = "low"
    CLOSE = "close"


# Default period per kind when none is given (MACD and VWAP take no period)
DEFAULT_PERIODS: dict[IndicatorKind, int] = {
    IndicatorKind.SMA: 14,
    IndicatorKind.EMA: 14,
    IndicatorKind.RSI: 14,
    IndicatorKind.BB: 20,
    IndicatorKind.ATR: 14,
    IndicatorKind.MFI: 14,
}


class IndicatorConfig(BaseModel):
    """Immutable description of one indicator instance.

    Raises InvalidParameterError for a non-positive period or std-dev
    multiplier, or a MACD fast period that is not below the slow one.
    """

    model_config = ConfigDict(frozen=True)

    kind: IndicatorKind
    source: PriceSource = PriceSource.CLOSE
    period: int | None = None
    fast_period: int = 12
    slow_period: int = 26
    signal_period: int = 9
    std_dev: float = 2.0
    id: str = ""  # Will be set in model_post_init

    def model_post_init(self, __context) -> None:
        """Fill the kind default period, validate, and derive the id."""
        if self.period is None and self.kind in DEFAULT_PERIODS:
            object.__setattr__(self, "period", DEFAULT_PERIODS[self.kind])

        if self.kind == IndicatorKind.MACD:
            require_period("fast_period", self.fast_period)
            require_period("slow_period", self.slow_period)
            require_period("signal_period", self.signal_period)
            require_fast_below_slow(self.fast_period, self.slow_period)
        elif self.kind != IndicatorKind.VWAP:
            require_period("period", self.period)
        if self.kind == IndicatorKind.BB:
            require_positive("std_dev", self.std_dev)

        if not self.id:
            object.__setattr__(self, "id", self.label)

    @property
    def label(self) -> str:
        """Short display label, e.g. 'SMA 50', 'MACD 12-26-9', 'BB 20/2.0'."""
        if self.kind == IndicatorKind.MACD:
            name = f"MACD {self.fast_period}-{self.slow_period}-{self.signal_period}"
        elif self.kind == IndicatorKind.BB:
            name = f"BB {self.period}/{self.std_dev}"
        elif self.kind == IndicatorKind.VWAP:
            name = "VWAP"
        else:
            name = f"{self.kind.value} {self.period}"
        if self.source != PriceSource.CLOSE:
            name += f" ({self.source.value})"
        return name


class AnalysisConfig(BaseModel):
    """Periods used when scoring and analyzing one timeframe.

    Raises InvalidParameterError for a non-positive period or a MACD fast
    period that is not below the slow one.
    """

    model_config = ConfigDict(frozen=True)

    rsi_period: int = 14
    sma_period: int = 50
    ema_period: int = 20

    # MACD
    macd_fast: int = 12
    macd_slow: int = 26
    macd_signal: int = 9

    # Fast/slow SMA pair reported as "SMA (20/50)"
    fast_sma_period: int = 20
    slow_sma_period: int = 50

    def model_post_init(self, __context) -> None:
        for name in (
            "rsi_period",
            "sma_period",
            "ema_period",
            "macd_fast",
            "macd_slow",
            "macd_signal",
            "fast_sma_period",
            "slow_sma_period",
        ):
            require_period(name, getattr(self, name))
        require_fast_below_slow(self.macd_fast, self.macd_slow)
