"""Trading zones — five proportional bands across one projected range."""

from __future__ import annotations

from range_core.models import RangePrediction, TradingZones, Zone

# Cumulative width fractions bounding each band, lowest first.
ZONE_EDGES = (0.0, 0.15, 0.35, 0.65, 0.85, 1.0)

ZONE_LABELS = (
    "Strong Buy Zone",
    "Buy Zone",
    "Neutral Zone",
    "Sell Zone",
    "Strong Sell Zone",
)

ZONE_DESCRIPTIONS = (
    "Aggressive entry - best risk/reward",
    "Good entry - near support",
    "Avoid - low edge zone",
    "Take profits - near resistance",
    "Exit all - high rejection risk",
)


def determine_current_zone(price: float, low: float, high: float, width: float) -> str:
    """Label of the band containing *price*.

    Prices outside ``[low, high]`` saturate to the nearest extreme band. A
    zero-width range puts the price below, inside or above the collapsed
    bound.
    """
    if width <= 0:
        if price < low:
            return ZONE_LABELS[0]
        if price > high:
            return ZONE_LABELS[-1]
        return ZONE_LABELS[2]

    position = (price - low) / width
    for label, upper in zip(ZONE_LABELS, ZONE_EDGES[1:-1]):
        if position < upper:
            return label
    return ZONE_LABELS[-1]


def generate_trading_zones(prediction: RangePrediction, price: float) -> TradingZones:
    """Partition *prediction*'s range into contiguous bands and locate *price*."""
    low = prediction.range.low
    high = prediction.range.high
    width = high - low

    edges = [round(low + width * f, 2) for f in ZONE_EDGES[:-1]] + [round(high, 2)]
    zones = [
        Zone(low=edges[i], high=edges[i + 1], description=ZONE_DESCRIPTIONS[i])
        for i in range(len(ZONE_LABELS))
    ]
    return TradingZones(
        strong_buy_zone=zones[0],
        buy_zone=zones[1],
        neutral_zone=zones[2],
        sell_zone=zones[3],
        strong_sell_zone=zones[4],
        current_zone=determine_current_zone(price, low, high, width),
    )
