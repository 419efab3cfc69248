"""Market structure — session extremes, swing points and VWAP bands."""

from __future__ import annotations

from typing import Sequence

from range_core.engine.indicators import swing_points, vwap, vwap_std_dev
from range_core.models import Candle, MarketStructure

SESSION_CANDLES = 24
SWING_LOOKBACK = 5
MAX_SWINGS = 3


def find_market_structure(candles: Sequence[Candle]) -> MarketStructure:
    """Build support/resistance levels from a candle window.

    Session levels and VWAP bands use the last 24 candles; swing points are
    searched over the whole window and only the three most recent are kept.
    """
    session = candles[-SESSION_CANDLES:]
    swing_highs = swing_points([c.high for c in candles], "high", SWING_LOOKBACK)
    swing_lows = swing_points([c.low for c in candles], "low", SWING_LOOKBACK)

    center = vwap(session)
    sigma = vwap_std_dev(session, center)

    return MarketStructure(
        session_high=max(c.high for c in session),
        session_low=min(c.low for c in session),
        swing_highs=swing_highs[-MAX_SWINGS:],
        swing_lows=swing_lows[-MAX_SWINGS:],
        vwap=center,
        vwap_upper1=center + sigma,
        vwap_upper2=center + 2 * sigma,
        vwap_lower1=center - sigma,
        vwap_lower2=center - 2 * sigma,
    )
