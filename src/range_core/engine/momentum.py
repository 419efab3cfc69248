"""Momentum scorer — ATR-normalised slope of recent closes."""

from __future__ import annotations

from typing import Sequence

from range_core.engine.indicators import atr
from range_core.models import Candle

MOMENTUM_PERIODS = 10


def momentum_score(candles: Sequence[Candle], periods: int = MOMENTUM_PERIODS) -> float:
    """Slope per candle over *periods* divided by ATR, clamped to [-1, 1].

    Returns 0.0 when the ATR of the last *periods* candles is zero or the
    window holds a single candle.
    """
    if len(candles) < 2:
        return 0.0
    closes = [c.close for c in candles[-(periods + 1):]]
    slope = (closes[-1] - closes[0]) / periods

    volatility = atr(candles[-periods:], periods)
    if volatility <= 0:
        return 0.0
    return max(-1.0, min(1.0, slope / volatility))


def momentum_bias(value: float) -> str:
    """Range-center bias label."""
    if value > 0.25:
        return "slight bullish"
    if value < -0.25:
        return "slight bearish"
    return "neutral"


def momentum_direction(value: float) -> str:
    """Market assessment direction label."""
    if value > 0.1:
        return "bullish"
    if value < -0.1:
        return "bearish"
    return "neutral"
