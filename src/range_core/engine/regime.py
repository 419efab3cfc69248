"""Regime classifier — ADX trend strength with a Bollinger width override."""

from __future__ import annotations

from typing import Sequence

from range_core.engine.indicators import adx, bollinger_band_width, ema
from range_core.models import Candle, Regime

ADX_PERIOD = 14
BB_PERIOD = 20
FAST_EMA = 20
SLOW_EMA = 50

TREND_ADX = 25.0
RANGE_ADX = 20.0

# Baseline band width as a fraction of the last close.
BASELINE_BB_FRACTION = 0.04
EXPANSION_RATIO = 1.3
COMPRESSION_RATIO = 0.7


def trend_direction(closes: Sequence[float]) -> str:
    """``up`` if EMA20 sits above EMA50, else ``down``.

    With fewer closes than the slow period the slow EMA degenerates to the
    last close, so the last close is compared against EMA20 instead.
    """
    fast = ema(closes, FAST_EMA)
    if len(closes) < SLOW_EMA:
        return "up" if closes[-1] > fast else "down"
    return "up" if fast > ema(closes, SLOW_EMA) else "down"


def classify_regime(candles: Sequence[Candle]) -> Regime:
    """Label the window as trend, range, expansion or compression.

    ADX decides trend vs range first; the Bollinger width override is
    applied last and replaces only the type, keeping strength and direction.
    """
    closes = [c.close for c in candles]
    highs = [c.high for c in candles]
    lows = [c.low for c in candles]

    adx_value = adx(highs, lows, closes, ADX_PERIOD)
    bb_width = bollinger_band_width(closes, BB_PERIOD)
    baseline = closes[-1] * BASELINE_BB_FRACTION

    regime_type = "range"
    strength = 0.5
    direction = "neutral"

    if adx_value > TREND_ADX:
        regime_type = "trend"
        strength = min((adx_value - TREND_ADX) / TREND_ADX, 1.0)
        direction = trend_direction(closes)
    elif adx_value < RANGE_ADX:
        strength = min((RANGE_ADX - adx_value) / RANGE_ADX, 1.0)

    if bb_width > baseline * EXPANSION_RATIO:
        regime_type = "expansion"
    elif bb_width < baseline * COMPRESSION_RATIO:
        regime_type = "compression"

    return Regime(
        type=regime_type,
        strength=round(strength, 2),
        direction=direction,
        adx=round(adx_value, 1),
        bb_width=round(bb_width, 2),
    )
