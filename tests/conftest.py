"""Shared test fixtures."""

import logging
from datetime import datetime, timedelta, timezone

import numpy as np
import pytest
import structlog

from range_core.feed.synthetic import generate_candles
from range_core.models import Candle, MarketSnapshot

START = datetime(2026, 1, 1, tzinfo=timezone.utc)


def build_candles(closes, spread=0.5, volume=1_000_000.0, volumes=None):
    """Hourly candles opening at the previous close, wicks *spread* beyond the body."""
    candles = []
    prev = closes[0]
    for i, close in enumerate(closes):
        candles.append(Candle(
            timestamp=START + timedelta(hours=i),
            open=prev,
            high=max(prev, close) + spread,
            low=min(prev, close) - spread,
            close=close,
            volume=volumes[i] if volumes is not None else volume,
        ))
        prev = close
    return candles


@pytest.fixture
def candle_factory():
    return build_candles


@pytest.fixture
def flat_candles():
    """100 candles closing at 100 with constant volume."""
    return build_candles([100.0] * 100)


@pytest.fixture
def walk_candles():
    """Deterministic 100-candle random walk ending at 60000."""
    return generate_candles(60000.0, 100, end=START, rng=np.random.default_rng(42))


@pytest.fixture
def walk_snapshot():
    return MarketSnapshot(
        price=60000.0,
        change24h=1.5,
        volume24h=2.5e10,
        market_cap=1.2e12,
        source="test",
    )


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo setup_logging() so handlers never outlive a captured stream."""
    yield
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()
