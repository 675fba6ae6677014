"""
Exception hierarchy for price retrieval and outcome analysis.
"""


class BellCurveError(Exception):
    """Base class for all BellCurve errors."""


class SourceUnavailable(BellCurveError):
    """The remote price source could not be reached or returned a bad status."""


class ParseError(BellCurveError):
    """A price payload did not decompose into the expected fields."""


class NotFound(BellCurveError):
    """No record exists for the requested ticker and kind."""


class InvalidInput(BellCurveError, ValueError):
    """A numeric input (price, horizon) is outside its valid domain."""


class InsufficientData(BellCurveError, ValueError):
    """Not enough price history to derive return statistics."""
