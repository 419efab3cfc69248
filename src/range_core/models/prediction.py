"""Derived analysis models — regime, structure, range predictions, zones."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from range_core.models.market import MarketSnapshot

RegimeType = Literal["trend", "range", "expansion", "compression"]
Direction = Literal["up", "down", "neutral"]
VolatilityState = Literal["low", "normal", "high"]
Bias = Literal["slight bullish", "slight bearish", "neutral"]
MomentumDirection = Literal["bullish", "bearish", "neutral"]
ZoneLabel = Literal["Strong Buy Zone", "Buy Zone", "Neutral Zone", "Sell Zone", "Strong Sell Zone"]


class _Record(BaseModel):
    """Immutable value object serialized with camelCase field names."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Regime(_Record):
    """Market-state label with strength and direction."""

    type: RegimeType
    strength: float = Field(ge=0.0, le=1.0)
    direction: Direction = "neutral"
    adx: float
    bb_width: float


class MarketStructure(_Record):
    """Session extremes, recent swing points and VWAP bands."""

    session_high: float
    session_low: float
    swing_highs: list[float] = Field(default_factory=list)
    swing_lows: list[float] = Field(default_factory=list)
    vwap: float
    vwap_upper1: float
    vwap_upper2: float
    vwap_lower1: float
    vwap_lower2: float

    @property
    def supports(self) -> list[float]:
        return [self.session_low, *self.swing_lows, self.vwap_lower1, self.vwap_lower2]

    @property
    def resistances(self) -> list[float]:
        return [self.session_high, *self.swing_highs, self.vwap_upper1, self.vwap_upper2]


class PriceRange(_Record):
    low: float
    high: float
    center: float
    width: float
    width_percent: float


class Volatility(_Record):
    state: VolatilityState
    realized: float
    projected: float


class Momentum(_Record):
    value: float = Field(ge=-1.0, le=1.0)
    bias: Bias


class Invalidations(_Record):
    """Advisory conditions; consumers decide when one has triggered."""

    hard: list[str] = Field(default_factory=list)
    soft: list[str] = Field(default_factory=list)


class RangePrediction(_Record):
    """Projected price range for one horizon."""

    horizon_hours: int = Field(gt=0)
    timeframe: str
    range: PriceRange
    confidence: float = Field(ge=40.0, le=95.0)
    volatility: Volatility
    regime: Regime
    momentum: Momentum
    invalidations: Invalidations


class AssessmentVolatility(_Record):
    annualized: float
    state: VolatilityState


class AssessmentMomentum(_Record):
    value: float = Field(ge=-1.0, le=1.0)
    direction: MomentumDirection


class Technicals(_Record):
    rsi: float = Field(ge=0.0, le=100.0)
    ema20: float
    ema50: float
    price_vs_ema20: float = Field(alias="priceVsEMA20")
    price_vs_ema50: float = Field(alias="priceVsEMA50")


class AssessmentStructure(_Record):
    session_high: float
    session_low: float
    vwap: float
    position: Literal["above VWAP", "below VWAP"]


class MarketAssessment(_Record):
    """Window-wide market read, independent of any single horizon."""

    regime: Regime
    volatility: AssessmentVolatility
    momentum: AssessmentMomentum
    technicals: Technicals
    structure: AssessmentStructure


class Zone(_Record):
    low: float
    high: float
    description: str


class TradingZones(_Record):
    """Five contiguous bands covering one range, lowest first."""

    strong_buy_zone: Zone
    buy_zone: Zone
    neutral_zone: Zone
    sell_zone: Zone
    strong_sell_zone: Zone
    current_zone: ZoneLabel


class AnalysisReport(_Record):
    """Full engine output for one run."""

    success: bool = True
    timestamp: datetime
    current_price: float
    market: MarketSnapshot
    market_assessment: MarketAssessment
    range_predictions: list[RangePrediction]
    trading_zones: TradingZones
