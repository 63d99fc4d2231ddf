"""Rule-based signal scoring for one symbol/timeframe.

Rules, evaluated in this order (the order of ``factors``):

1. RSI < 30: +2 "RSI Oversold (<30)"; RSI > 70: -2 "RSI Overbought (>70)"
2. price > SMA: +1 "Price above SMA"; otherwise -1 "Price below SMA"
3. SMA > previous SMA: +1 "MA Trend Rising"; otherwise -1 "MA Trend Falling"
4. price > EMA and EMA > SMA: +1 "Strong Momentum"

Score mapping (inclusive thresholds):
    >= 3      BUY   "Strong Buy"
    1 .. 2    BUY   "Weak Buy"
    <= -3     SELL  "Strong Sell"
    -2 .. -1  SELL  "Weak Sell"
    0         HOLD  "Neutral"

A missing input (None or NaN) is neutral: every rule that reads it is
skipped.
"""

import logging
import math
from typing import Sequence

from apex_core.indicators import ema, rsi, sma
from apex_core.models.config import AnalysisConfig
from apex_core.models.signal import Action, TradingSignal

logger = logging.getLogger(__name__)

RSI_OVERSOLD = 30.0
RSI_OVERBOUGHT = 70.0

STRONG_THRESHOLD = 3
WEAK_THRESHOLD = 1


def _present(value: float | None) -> bool:
    return value is not None and not math.isnan(value)


def _classify(score: int) -> tuple[Action, str]:
    if score >= STRONG_THRESHOLD:
        return Action.BUY, "Strong Buy"
    if score >= WEAK_THRESHOLD:
        return Action.BUY, "Weak Buy"
    if score <= -STRONG_THRESHOLD:
        return Action.SELL, "Strong Sell"
    if score <= -WEAK_THRESHOLD:
        return Action.SELL, "Weak Sell"
    return Action.HOLD, "Neutral"


def score_signal(
    price: float,
    rsi_value: float | None,
    sma_value: float | None,
    prev_sma: float | None,
    ema_value: float | None,
) -> TradingSignal:
    """Score the current readings into a TradingSignal.

    Pure and deterministic: the same inputs always give the same action,
    strength, score and factors.
    """
    score = 0
    factors: list[str] = []

    if _present(rsi_value):
        if rsi_value < RSI_OVERSOLD:
            score += 2
            factors.append("RSI Oversold (<30)")
        elif rsi_value > RSI_OVERBOUGHT:
            score -= 2
            factors.append("RSI Overbought (>70)")

    if _present(price) and _present(sma_value):
        if price > sma_value:
            score += 1
            factors.append("Price above SMA")
        else:
            score -= 1
            factors.append("Price below SMA")

        if _present(prev_sma):
            if sma_value > prev_sma:
                score += 1
                factors.append("MA Trend Rising")
            else:
                score -= 1
                factors.append("MA Trend Falling")

        if _present(ema_value) and price > ema_value and ema_value > sma_value:
            score += 1
            factors.append("Strong Momentum")

    action, strength = _classify(score)
    return TradingSignal(action=action, strength=strength, score=score, factors=tuple(factors))


def evaluate_prices(
    prices: Sequence[float],
    config: AnalysisConfig | None = None,
) -> TradingSignal:
    """Derive scoring inputs from a close series and score them.

    Uses the latest price, scalar RSI, the last two SMA points and the
    last EMA point. An SMA that cannot be computed yet leaves its rules out.
    """
    if config is None:
        config = AnalysisConfig()
    if not prices:
        logger.debug("No prices to evaluate, returning a neutral signal")
        return TradingSignal(action=Action.HOLD, strength="Neutral", score=0)

    sma_points = sma(prices, config.sma_period)
    ema_points = ema(prices, config.ema_period)

    sma_value = sma_points[-1].value if sma_points else None
    prev_sma = sma_points[-2].value if len(sma_points) >= 2 else None

    return score_signal(
        price=float(prices[-1]),
        rsi_value=rsi(prices, config.rsi_period),
        sma_value=sma_value,
        prev_sma=prev_sma,
        ema_value=ema_points[-1].value,
    )
