"""Multi-horizon orchestrator — projects every horizon and derives zones and assessment."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

from range_core.engine.errors import InvalidInputError
from range_core.engine.indicators import ema, rsi
from range_core.engine.momentum import momentum_direction
from range_core.engine.projector import WindowAnalysis, analyze_window, project_range
from range_core.engine.zones import generate_trading_zones
from range_core.logging import get_logger
from range_core.models import (
    AnalysisReport,
    AssessmentMomentum,
    AssessmentStructure,
    AssessmentVolatility,
    Candle,
    MarketAssessment,
    MarketSnapshot,
    Technicals,
)

log = get_logger(__name__)

DEFAULT_HORIZONS = (1, 2, 4, 6, 12, 24)
MIN_WINDOW = 50


def validate_inputs(price: float, candles: Sequence[Candle], horizons: Sequence[int]) -> None:
    """Reject malformed input; short windows only warn and degrade."""
    if price <= 0:
        raise InvalidInputError(f"price must be positive, got {price!r}")
    if not candles:
        raise InvalidInputError("candle window is empty")
    for prev, cur in zip(candles, candles[1:]):
        if cur.timestamp <= prev.timestamp:
            raise InvalidInputError(
                f"candle timestamps must be strictly increasing: {cur.timestamp.isoformat()} "
                f"follows {prev.timestamp.isoformat()}"
            )
    if not horizons:
        raise InvalidInputError("at least one horizon is required")
    bad = [h for h in horizons if isinstance(h, bool) or not isinstance(h, int) or h <= 0]
    if bad:
        raise InvalidInputError(f"horizons must be positive integers, got {bad!r}")

    if len(candles) < MIN_WINDOW:
        log.warning("candle_window_short", candles=len(candles), minimum=MIN_WINDOW)
    if abs(candles[-1].close - price) > price * 1e-9:
        log.warning("last_close_mismatch", last_close=candles[-1].close, price=price)


def assess_market(
    candles: Sequence[Candle],
    price: float,
    analysis: WindowAnalysis | None = None,
    candle_interval_hours: float = 1.0,
) -> MarketAssessment:
    """Window-wide read: regime, volatility, momentum, technicals and VWAP position."""
    if analysis is None:
        analysis = analyze_window(candles, price, candle_interval_hours)

    closes = [c.close for c in candles]
    ema20 = ema(closes, 20)
    ema50 = ema(closes, 50)
    structure = analysis.structure

    return MarketAssessment(
        regime=analysis.regime,
        volatility=AssessmentVolatility(
            annualized=round(analysis.realized_vol * 100, 2),
            state=analysis.volatility_state,
        ),
        momentum=AssessmentMomentum(
            value=round(analysis.momentum, 3),
            direction=momentum_direction(analysis.momentum),
        ),
        technicals=Technicals(
            rsi=round(rsi(closes, 14), 1),
            ema20=round(ema20, 2),
            ema50=round(ema50, 2),
            price_vs_ema20=round((price - ema20) / ema20 * 100, 2),
            price_vs_ema50=round((price - ema50) / ema50 * 100, 2),
        ),
        structure=AssessmentStructure(
            session_high=round(structure.session_high, 2),
            session_low=round(structure.session_low, 2),
            vwap=round(structure.vwap, 2),
            position="above VWAP" if price > structure.vwap else "below VWAP",
        ),
    )


def run_analysis(
    market: MarketSnapshot,
    candles: Sequence[Candle],
    horizons: Sequence[int] = DEFAULT_HORIZONS,
    *,
    zone_horizon_index: int = 1,
    candle_interval_hours: float = 1.0,
) -> AnalysisReport:
    """Project every horizon from one window, then derive zones and assessment.

    Zones are cut from the prediction at *zone_horizon_index* (the second
    horizon by default), falling back to the last one for shorter lists.
    """
    price = market.price
    horizons = list(horizons)
    validate_inputs(price, candles, horizons)

    analysis = analyze_window(candles, price, candle_interval_hours)
    predictions = [
        project_range(candles, price, h, market, analysis=analysis)
        for h in horizons
    ]
    assessment = assess_market(candles, price, analysis)

    zone_source = predictions[min(max(zone_horizon_index, 0), len(predictions) - 1)]
    zones = generate_trading_zones(zone_source, price)

    log.info(
        "analysis_completed",
        asset=market.asset,
        source=market.source,
        price=price,
        candles=len(candles),
        horizons=horizons,
        regime=analysis.regime.type,
        current_zone=zones.current_zone,
    )

    return AnalysisReport(
        timestamp=datetime.now(timezone.utc),
        current_price=price,
        market=market,
        market_assessment=assessment,
        range_predictions=predictions,
        trading_zones=zones,
    )
