"""Errors raised by indicator computation and alignment."""


class IndicatorError(Exception):
    """Base class for errors local to a single indicator computation."""


class InsufficientDataError(IndicatorError):
    """Input is shorter than the computation can work with."""


class InvalidParameterError(IndicatorError):
    """An indicator parameter is out of range (e.g. non-positive period)."""


class AlignmentMismatchError(IndicatorError):
    """Indicator output is longer than the timestamp axis it is aligned to.

    The indicator algorithms never produce more points than bars, so this
    signals a programming error rather than bad input.
    """
