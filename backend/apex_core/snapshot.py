"""Watchlist-style technical snapshot of a price series."""

from typing import Sequence

from pydantic import BaseModel, ConfigDict

from apex_core.errors import InsufficientDataError
from apex_core.indicators import ema, macd, rsi, sma
from apex_core.models.series import MACDPoint
from apex_core.models.signal import Bias
from apex_core.scoring import RSI_OVERBOUGHT, RSI_OVERSOLD


class TechnicalSnapshot(BaseModel):
    """Latest readings for one symbol."""

    model_config = ConfigDict(frozen=True)

    price: float
    rsi: float
    rsi_state: str
    macd: Bias
    sma50: float
    ema20: float


def macd_bias(point: MACDPoint | None) -> Bias:
    """Bullish when histogram > 0 and MACD > signal, Bearish when both are
    negative/below, Neutral otherwise (including no point)."""
    if point is None:
        return Bias.NEUTRAL
    if point.histogram > 0 and point.macd > point.signal:
        return Bias.BULLISH
    if point.histogram < 0 and point.macd < point.signal:
        return Bias.BEARISH
    return Bias.NEUTRAL


def rsi_state(value: float) -> str:
    if value > RSI_OVERBOUGHT:
        return "Overbought"
    if value < RSI_OVERSOLD:
        return "Oversold"
    return "Neutral"


def technical_snapshot(prices: Sequence[float]) -> TechnicalSnapshot:
    """
    Build a snapshot from a close series.

    SMA(50) and EMA(20) fall back to the latest price when they cannot be
    computed.

    Raises:
        InsufficientDataError: If ``prices`` is empty
    """
    if not prices:
        raise InsufficientDataError("Cannot build a snapshot without prices")

    price = float(prices[-1])
    rsi_value = rsi(prices)
    sma_points = sma(prices, 50)
    ema_points = ema(prices, 20)
    macd_points = macd(prices)

    return TechnicalSnapshot(
        price=price,
        rsi=rsi_value,
        rsi_state=rsi_state(rsi_value),
        macd=macd_bias(macd_points[-1] if macd_points else None),
        sma50=sma_points[-1].value if sma_points else price,
        ema20=ema_points[-1].value if ema_points else price,
    )
