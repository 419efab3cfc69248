"""Synthetic candle history — a backward random walk that ends at the live price."""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

import numpy as np

from range_core.models import Candle

STEP_VOLATILITY = 0.008
TREND_AMPLITUDE = 0.002
WICK_NOISE = 0.003
BASE_VOLUME = 1_000_000
VOLUME_SPREAD = 5_000_000


def generate_candles(
    price: float,
    count: int = 100,
    *,
    end: datetime | None = None,
    interval_hours: float = 1.0,
    rng: np.random.Generator | None = None,
) -> list[Candle]:
    """Walk backwards from *price* to build *count* candles, oldest first.

    Each step draws a uniform move of up to ``STEP_VOLATILITY`` plus a slow
    sinusoidal drift; wicks extend the body by up to ``WICK_NOISE``. The last
    candle closes exactly at *price*.
    """
    if rng is None:
        rng = np.random.default_rng()
    if end is None:
        end = datetime.now(timezone.utc).replace(minute=0, second=0, microsecond=0)
    step = timedelta(hours=interval_hours)

    candles: list[Candle] = []
    close = price
    for age, i in enumerate(range(count, 0, -1)):
        drift = math.sin(i / 10) * TREND_AMPLITUDE
        change = close * (STEP_VOLATILITY * (rng.random() - 0.5) * 2 + drift)
        open_ = close - change
        candles.append(Candle(
            timestamp=end - step * age,
            open=open_,
            high=max(open_, close) * (1 + rng.random() * WICK_NOISE),
            low=min(open_, close) * (1 - rng.random() * WICK_NOISE),
            close=close,
            volume=BASE_VOLUME + rng.random() * VOLUME_SPREAD,
        ))
        close = open_

    candles.reverse()
    return candles
