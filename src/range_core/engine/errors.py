"""Engine error taxonomy."""

from __future__ import annotations


class RangeEngineError(Exception):
    """Base class for all range engine errors."""


class InvalidInputError(RangeEngineError, ValueError):
    """Malformed input: empty or unordered candle window, bad price or horizons."""


class UpstreamUnavailableError(RangeEngineError):
    """Every configured market data source failed."""
