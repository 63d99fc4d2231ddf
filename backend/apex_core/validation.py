"""Parameter checks shared by indicator functions and IndicatorConfig."""

from apex_core.errors import InvalidParameterError


def require_period(name: str, value: int) -> int:
    """Ensure a period is a positive integer."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidParameterError(f"{name} must be a positive integer, got {value!r}")
    return value


def require_positive(name: str, value: float) -> float:
    """Ensure a multiplier is a positive number."""
    if not value > 0:
        raise InvalidParameterError(f"{name} must be positive, got {value!r}")
    return value


def require_fast_below_slow(fast_period: int, slow_period: int) -> None:
    """MACD needs a fast period strictly shorter than the slow one."""
    if fast_period >= slow_period:
        raise InvalidParameterError(
            f"fast_period ({fast_period}) must be less than slow_period ({slow_period})"
        )
