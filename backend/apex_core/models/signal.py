"""Signal, timeframe and consensus data models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Bias(str, Enum):
    """Directional bias."""

    BULLISH = "Bullish"
    BEARISH = "Bearish"
    NEUTRAL = "Neutral"


class Action(str, Enum):
    """Trading action suggested by the scoring engine."""

    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


class TradingSignal(BaseModel):
    """Result of scoring one symbol/timeframe."""

    model_config = ConfigDict(frozen=True)

    action: Action
    strength: str  # "Strong Buy", "Weak Buy", "Neutral", "Weak Sell", "Strong Sell"
    score: int
    factors: tuple[str, ...] = ()

    @property
    def bias(self) -> Bias:
        """Map the action onto a directional bias."""
        if self.action == Action.BUY:
            return Bias.BULLISH
        if self.action == Action.SELL:
            return Bias.BEARISH
        return Bias.NEUTRAL


class KeySignal(BaseModel):
    """A named indicator reading contributing to a timeframe's bias."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: float
    bias: Bias | None = None


class TimeframeSignal(BaseModel):
    """Directional reading for one timeframe."""

    model_config = ConfigDict(frozen=True)

    timeframe: str
    bias: Bias
    strength: int = Field(default=0, ge=0, le=100)
    confidence: int = Field(default=0, ge=0, le=100)
    key_signals: tuple[KeySignal, ...] = ()


class ConsensusResult(BaseModel):
    """Aggregated bias across timeframes."""

    model_config = ConfigDict(frozen=True)

    overall_bias: Bias
    overall_strength: int = 0
    agreeing: int = 0  # Timeframes matching overall_bias
    total: int = 0
    conflict_count: int = 0
    conflict_description: str = ""
    per_timeframe: tuple[TimeframeSignal, ...] = ()

    @property
    def agreement(self) -> str:
        """Agreement ratio formatted as 'k/n'."""
        return f"{self.agreeing}/{self.total}"

    @property
    def agreement_ratio(self) -> float:
        if self.total == 0:
            return 0.0
        return self.agreeing / self.total
