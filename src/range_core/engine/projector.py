"""Range projector — turns a candle window into an anchored price range per horizon.

The window-level reads (regime, realized volatility, structure, momentum,
confidence, volatility state) do not depend on the horizon, so they are
computed once into a :class:`WindowAnalysis` and reused for every horizon
projected from the same window.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from range_core.engine.indicators import realized_volatility
from range_core.engine.momentum import momentum_bias, momentum_score
from range_core.engine.regime import classify_regime
from range_core.engine.structure import find_market_structure
from range_core.logging import get_logger
from range_core.models import (
    Candle,
    Invalidations,
    MarketSnapshot,
    MarketStructure,
    Momentum,
    PriceRange,
    RangePrediction,
    Regime,
    Volatility,
)

log = get_logger(__name__)

VOL_LOOKBACK = 24
STABILITY_LOOKBACK = 12

# z-score of a ~90% two-sided interval.
Z_SCORE = 1.65
MOMENTUM_SKEW = 0.12
ANCHOR_TOLERANCE = 0.25

REGIME_VOL_MULTIPLIERS = {
    "trend": 1.2,
    "range": 0.85,
    "expansion": 1.4,
    "compression": 0.7,
}

REGIME_WIDTH_MULTIPLIERS = {
    "expansion": 1.35,
    "compression": 0.75,
    "trend": 1.15,
    "range": 0.9,
}

BASE_CONFIDENCE = 0.70
MIN_CONFIDENCE = 0.40
MAX_CONFIDENCE = 0.95
SWING_PROXIMITY = 0.02
SWING_BONUS = 0.10
VOLUME_RECENT = 6
VOLUME_ADJUSTMENT = 0.05


@dataclass(frozen=True)
class WindowAnalysis:
    """Horizon-independent reads of one candle window."""

    regime: Regime
    realized_vol: float
    structure: MarketStructure
    momentum: float
    confidence: float
    volatility_state: str
    candle_interval_hours: float = 1.0


def project_volatility(
    realized_vol: float,
    horizon_hours: float,
    regime_type: str,
    lookback_hours: float = VOL_LOOKBACK,
) -> float:
    """Scale realized volatility to *horizon_hours* and adjust for the regime."""
    scaled = realized_vol * math.sqrt(horizon_hours / lookback_hours)
    return scaled * REGIME_VOL_MULTIPLIERS.get(regime_type, 1.0)


def anchor_low(range_low: float, supports: Sequence[float], width: float) -> float:
    """Raise *range_low* to the highest support within a quarter width above it."""
    tolerance = width * ANCHOR_TOLERANCE
    candidates = [s for s in supports if range_low < s <= range_low + tolerance]
    return max(candidates) if candidates else range_low


def anchor_high(range_high: float, resistances: Sequence[float], width: float) -> float:
    """Lower *range_high* to the lowest resistance within a quarter width below it."""
    tolerance = width * ANCHOR_TOLERANCE
    candidates = [r for r in resistances if range_high - tolerance <= r < range_high]
    return min(candidates) if candidates else range_high


def volatility_stability(candles: Sequence[Candle], candle_interval_hours: float = 1.0) -> float:
    """Similarity of the last 12 candles' volatility to the 12 before, in [0, 1].

    Returns 0.0 when the older half has zero volatility.
    """
    recent = realized_volatility(candles[-STABILITY_LOOKBACK:], STABILITY_LOOKBACK, candle_interval_hours)
    older = realized_volatility(
        candles[-2 * STABILITY_LOOKBACK:-STABILITY_LOOKBACK],
        STABILITY_LOOKBACK,
        candle_interval_hours,
    )
    if older <= 0:
        return 0.0
    return max(0.0, min(1.0, 1 - abs(recent - older) / older))


def confidence_score(
    candles: Sequence[Candle],
    regime: Regime,
    structure: MarketStructure,
    price: float,
    candle_interval_hours: float = 1.0,
) -> float:
    """Confidence in [0.40, 0.95] from vol stability, regime clarity, swing proximity and volume."""
    confidence = BASE_CONFIDENCE
    confidence += (volatility_stability(candles, candle_interval_hours) - 0.5) * 0.3
    confidence += (regime.strength - 0.5) * 0.2

    swings = [*structure.swing_lows, *structure.swing_highs]
    if any(abs(level - price) <= price * SWING_PROXIMITY for level in swings):
        confidence += SWING_BONUS

    recent_volume = [c.volume for c in candles[-VOLUME_RECENT:]]
    session_volume = [c.volume for c in candles[-VOL_LOOKBACK:]]
    session_avg = sum(session_volume) / len(session_volume)
    if session_avg > 0:
        ratio = sum(recent_volume) / len(recent_volume) / session_avg
        if ratio >= 1.2:
            confidence += VOLUME_ADJUSTMENT
        elif ratio <= 0.8:
            confidence -= VOLUME_ADJUSTMENT

    return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, confidence))


def classify_volatility(
    realized_vol: float,
    candles: Sequence[Candle],
    lookback: int = VOL_LOOKBACK,
    candle_interval_hours: float = 1.0,
) -> str:
    """Percentile of *realized_vol* within the window's trailing-vol history.

    Windows too short to build any history are classified ``normal``.
    """
    history = sorted(
        realized_volatility(candles[i - lookback:i], lookback, candle_interval_hours)
        for i in range(lookback, len(candles))
    )
    if not history:
        return "normal"
    percentile = sum(1 for v in history if v < realized_vol) / len(history)
    if percentile < 0.33:
        return "low"
    if percentile > 0.67:
        return "high"
    return "normal"


def build_invalidations(
    low: float,
    high: float,
    realized_vol: float,
    horizon_hours: int,
    candles: Sequence[Candle],
    regime: Regime,
) -> Invalidations:
    session = candles[-VOL_LOOKBACK:]
    avg_volume = sum(c.volume for c in session) / len(session)
    return Invalidations(
        hard=[
            f"Price breaks {low * 0.97:.0f} or {high * 1.03:.0f}",
            f"Volatility spikes above {realized_vol * 2 * 100:.1f}%",
            f"Volume exceeds {avg_volume * 5 / 1_000_000:.1f}M",
        ],
        soft=[
            f"Time exceeds {horizon_hours * 2} hours",
            "New swing high/low forms outside range",
            f"Regime changes from {regime.type}",
        ],
    )


def analyze_window(
    candles: Sequence[Candle],
    price: float,
    candle_interval_hours: float = 1.0,
) -> WindowAnalysis:
    """Compute every horizon-independent read of *candles* once."""
    regime = classify_regime(candles)
    realized = realized_volatility(candles, VOL_LOOKBACK, candle_interval_hours)
    structure = find_market_structure(candles)
    return WindowAnalysis(
        regime=regime,
        realized_vol=realized,
        structure=structure,
        momentum=momentum_score(candles),
        confidence=confidence_score(candles, regime, structure, price, candle_interval_hours),
        volatility_state=classify_volatility(realized, candles, VOL_LOOKBACK, candle_interval_hours),
        candle_interval_hours=candle_interval_hours,
    )


def project_range(
    candles: Sequence[Candle],
    price: float,
    horizon_hours: int,
    market: MarketSnapshot | None = None,
    *,
    analysis: WindowAnalysis | None = None,
    candle_interval_hours: float = 1.0,
) -> RangePrediction:
    """Project the probable price range *horizon_hours* ahead.

    Monetary values are rounded to cents only when the record is built.
    """
    if analysis is None:
        analysis = analyze_window(candles, price, candle_interval_hours)
    regime = analysis.regime

    projected_vol = project_volatility(
        analysis.realized_vol,
        horizon_hours,
        regime.type,
        VOL_LOOKBACK * analysis.candle_interval_hours,
    )
    base_width = price * projected_vol * Z_SCORE
    center = price * (1 + analysis.momentum * MOMENTUM_SKEW)
    width = base_width * REGIME_WIDTH_MULTIPLIERS.get(regime.type, 1.0)

    range_low = anchor_low(center - width / 2, analysis.structure.supports, width)
    range_high = anchor_high(center + width / 2, analysis.structure.resistances, width)

    log.debug(
        "range_projected",
        asset=market.asset if market else None,
        horizon_hours=horizon_hours,
        regime=regime.type,
        projected_vol=projected_vol,
        low=range_low,
        high=range_high,
    )

    return RangePrediction(
        horizon_hours=horizon_hours,
        timeframe=f"{horizon_hours}h",
        range=PriceRange(
            low=round(range_low, 2),
            high=round(range_high, 2),
            center=round(center, 2),
            width=round(range_high - range_low, 2),
            width_percent=round((range_high - range_low) / price * 100, 2),
        ),
        confidence=round(analysis.confidence * 100, 1),
        volatility=Volatility(
            state=analysis.volatility_state,
            realized=round(analysis.realized_vol * 100, 2),
            projected=round(projected_vol * 100, 2),
        ),
        regime=regime,
        momentum=Momentum(
            value=round(analysis.momentum, 3),
            bias=momentum_bias(analysis.momentum),
        ),
        invalidations=build_invalidations(
            range_low, range_high, analysis.realized_vol, horizon_hours, candles, regime,
        ),
    )
