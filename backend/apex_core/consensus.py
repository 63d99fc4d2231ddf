"""Multi-timeframe consensus.

Overall bias is a plurality vote over the timeframe biases. When two or
more biases tie for the top count, the overall bias is Neutral, so it is
never decided by input order.
"""

import logging
import math
from collections import Counter
from typing import Mapping, Sequence

from apex_core.models.bar import Bar
from apex_core.models.config import AnalysisConfig
from apex_core.models.signal import Bias, ConsensusResult, TimeframeSignal
from apex_core.timeframe import analyze_timeframes

logger = logging.getLogger(__name__)

_BIAS_ORDER = (Bias.BULLISH, Bias.BEARISH, Bias.NEUTRAL)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _group(signals: Sequence[TimeframeSignal]) -> dict[Bias, list[str]]:
    groups: dict[Bias, list[str]] = {bias: [] for bias in _BIAS_ORDER}
    for signal in signals:
        groups[signal.bias].append(signal.timeframe)
    return groups


def _describe(
    signals: Sequence[TimeframeSignal],
    overall: Bias,
    is_tie: bool,
) -> str:
    """Human-readable summary, e.g. 'Bullish on 4h, 15m vs Bearish on 1d; Neutral on 1h'."""
    n = len(signals)
    if n == 0:
        return "No timeframes analyzed"

    groups = _group(signals)
    if len(groups[overall]) == n:
        if n == 1:
            return f"{signals[0].timeframe} is {overall.value}"
        return f"All {n} timeframes agree: {overall.value}"

    def phrase(bias: Bias) -> str:
        return f"{bias.value} on {', '.join(groups[bias])}"

    if is_tie and not groups[Bias.NEUTRAL]:
        return "No majority: " + " vs ".join(
            phrase(bias) for bias in _BIAS_ORDER if groups[bias]
        )

    others = [phrase(bias) for bias in _BIAS_ORDER if bias != overall and groups[bias]]
    return f"{phrase(overall)} vs {'; '.join(others)}"


def build_consensus(signals: Sequence[TimeframeSignal]) -> ConsensusResult:
    """
    Aggregate per-timeframe signals into one ConsensusResult.

    - overall bias: most common bias, Neutral on a tie for the top count
    - agreement: timeframes matching the overall bias, out of all of them
    - conflict count: timeframes whose bias differs from the overall bias
    - overall strength: mean strength of all timeframes, rounded half up
    """
    signals = tuple(signals)
    n = len(signals)
    if n == 0:
        return ConsensusResult(
            overall_bias=Bias.NEUTRAL,
            conflict_description=_describe(signals, Bias.NEUTRAL, False),
        )

    counts = Counter(signal.bias for signal in signals)
    top = max(counts.values())
    leaders = [bias for bias in _BIAS_ORDER if counts[bias] == top]
    is_tie = len(leaders) > 1
    overall = Bias.NEUTRAL if is_tie else leaders[0]

    agreeing = counts[overall]
    strength = _round_half_up(sum(signal.strength for signal in signals) / n)

    result = ConsensusResult(
        overall_bias=overall,
        overall_strength=strength,
        agreeing=agreeing,
        total=n,
        conflict_count=n - agreeing,
        conflict_description=_describe(signals, overall, is_tie),
        per_timeframe=signals,
    )
    logger.debug(
        f"Consensus {overall.value} ({result.agreement}), "
        f"{result.conflict_count} conflicts"
    )
    return result


class MultiTimeframeEngine:
    """Analyze each timeframe and build the consensus in one call."""

    def __init__(self, config: AnalysisConfig | None = None):
        self.config = config or AnalysisConfig()

    def analyze(self, bars_by_timeframe: Mapping[str, Sequence[Bar]]) -> ConsensusResult:
        """Run the timeframe analyzer on every timeframe, then vote.

        Timeframes that cannot be analyzed are left out of the vote.
        """
        signals = analyze_timeframes(bars_by_timeframe, self.config)
        return build_consensus(signals)
