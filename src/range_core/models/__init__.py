"""Pydantic domain models."""

from range_core.models.market import Candle, MarketSnapshot
from range_core.models.prediction import (
    AnalysisReport,
    AssessmentMomentum,
    AssessmentStructure,
    AssessmentVolatility,
    Invalidations,
    MarketAssessment,
    MarketStructure,
    Momentum,
    PriceRange,
    RangePrediction,
    Regime,
    Technicals,
    TradingZones,
    Volatility,
    Zone,
)

__all__ = [
    "AnalysisReport",
    "AssessmentMomentum",
    "AssessmentStructure",
    "AssessmentVolatility",
    "Candle",
    "Invalidations",
    "MarketAssessment",
    "MarketSnapshot",
    "MarketStructure",
    "Momentum",
    "PriceRange",
    "RangePrediction",
    "Regime",
    "Technicals",
    "TradingZones",
    "Volatility",
    "Zone",
]
