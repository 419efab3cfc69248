"""Technical indicators — pure functions on price series and candle windows.

Every indicator degrades to a documented neutral value when the input is
shorter than its period or a denominator collapses to zero; none of them
raise on short input.
"""

from __future__ import annotations

import math
from typing import Literal, Sequence

import numpy as np

from range_core.models import Candle

HOURS_PER_YEAR = 365 * 24


def ema(series: Sequence[float], period: int) -> float:
    """Exponential moving average seeded with the SMA of the first *period* values.

    Returns the last element unchanged if the series is shorter than *period*,
    and 0.0 for an empty series.
    """
    if not series:
        return 0.0
    if len(series) < period:
        return series[-1]

    k = 2 / (period + 1)
    value = sum(series[:period]) / period
    for price in series[period:]:
        value = price * k + value * (1 - k)
    return value


def rsi(closes: Sequence[float], period: int = 14) -> float:
    """Relative Strength Index over the first *period* deltas only.

    No Wilder smoothing is applied past the first window. Returns 50.0 if
    there are fewer than ``period + 1`` closes and 100.0 when the window
    holds no losses.
    """
    if len(closes) < period + 1:
        return 50.0

    gains = 0.0
    losses = 0.0
    for i in range(1, period + 1):
        delta = closes[i] - closes[i - 1]
        if delta > 0:
            gains += delta
        else:
            losses -= delta

    avg_gain = gains / period
    avg_loss = losses / period
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100 - 100 / (1 + rs)


def adx(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 14,
) -> float:
    """Directional index from a single accumulation window.

    +DM, -DM and true range are summed over the first ``min(period + 1, n)``
    bars (no recursive smoothing). A zero true range or a zero +DI/-DI sum
    yields 0.0.
    """
    n = min(period + 1, len(closes), len(highs), len(lows))
    plus_dm = 0.0
    minus_dm = 0.0
    tr = 0.0

    for i in range(1, n):
        high_diff = highs[i] - highs[i - 1]
        low_diff = lows[i - 1] - lows[i]
        if high_diff > 0 and high_diff > low_diff:
            plus_dm += high_diff
        if low_diff > 0 and low_diff > high_diff:
            minus_dm += low_diff
        tr += _true_range(highs[i], lows[i], closes[i - 1])

    if tr <= 0:
        return 0.0
    plus_di = plus_dm / tr * 100
    minus_di = minus_dm / tr * 100
    if plus_di + minus_di == 0:
        return 0.0
    return abs(plus_di - minus_di) / (plus_di + minus_di) * 100


def bollinger_band_width(closes: Sequence[float], period: int = 20) -> float:
    """Full Bollinger band width at 2 std: ``4 * stdev(last period closes)``.

    Returns 0.0 if fewer than *period* closes are available.
    """
    if len(closes) < period:
        return 0.0
    window = np.asarray(closes[-period:], dtype=np.float64)
    return float(np.std(window) * 4)


def _true_range(high: float, low: float, prev_close: float) -> float:
    return max(high - low, abs(high - prev_close), abs(low - prev_close))


def true_ranges(candles: Sequence[Candle]) -> list[float]:
    """Per-bar true range, starting from the second candle."""
    return [
        _true_range(candles[i].high, candles[i].low, candles[i - 1].close)
        for i in range(1, len(candles))
    ]


def atr(candles: Sequence[Candle], period: int = 14) -> float:
    """Average true range over the last ``period + 1`` candles (up to *period* bars).

    Returns 0.0 with fewer than two candles.
    """
    trs = true_ranges(candles[-(period + 1):])
    if not trs:
        return 0.0
    return sum(trs) / len(trs)


def vwap(candles: Sequence[Candle]) -> float:
    """Volume-weighted mean of typical price.

    Falls back to the plain mean of typical prices when total volume is zero.
    """
    if not candles:
        return 0.0
    typical = np.array([c.typical_price for c in candles], dtype=np.float64)
    volume = np.array([c.volume for c in candles], dtype=np.float64)
    if volume.sum() <= 0:
        return float(typical.mean())
    return float(np.average(typical, weights=volume))


def vwap_std_dev(candles: Sequence[Candle], center: float | None = None) -> float:
    """Volume-weighted standard deviation of typical price around *center*."""
    if not candles:
        return 0.0
    if center is None:
        center = vwap(candles)
    typical = np.array([c.typical_price for c in candles], dtype=np.float64)
    volume = np.array([c.volume for c in candles], dtype=np.float64)
    sq_diff = (typical - center) ** 2
    if volume.sum() <= 0:
        return float(math.sqrt(sq_diff.mean()))
    return float(math.sqrt(np.average(sq_diff, weights=volume)))


def log_returns(closes: Sequence[float]) -> list[float]:
    return [math.log(closes[i] / closes[i - 1]) for i in range(1, len(closes))]


def realized_volatility(
    candles: Sequence[Candle],
    lookback: int = 24,
    candle_interval_hours: float = 1.0,
) -> float:
    """Annualised population stdev of log returns over the last *lookback* candles.

    The annualisation factor is ``sqrt(hours per year / candle interval)``.
    Returns 0.0 when fewer than two candles are available.
    """
    recent = candles[-lookback:]
    returns = log_returns([c.close for c in recent])
    if not returns:
        return 0.0
    periods_per_year = HOURS_PER_YEAR / candle_interval_hours
    return float(np.std(np.asarray(returns, dtype=np.float64)) * math.sqrt(periods_per_year))


def swing_points(
    series: Sequence[float],
    kind: Literal["high", "low"],
    lookback: int = 5,
) -> list[float]:
    """Values that are the strict extreme of their ``2 * lookback + 1`` window.

    Returned in time order (oldest first).
    """
    swings: list[float] = []
    for i in range(lookback, len(series) - lookback):
        current = series[i]
        neighbours = [*series[i - lookback:i], *series[i + 1:i + lookback + 1]]
        if kind == "high":
            if all(current > v for v in neighbours):
                swings.append(current)
        elif all(current < v for v in neighbours):
            swings.append(current)
    return swings
