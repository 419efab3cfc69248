"""Tests for the range projector, confidence scoring and invalidations."""

from __future__ import annotations

import numpy as np
import pytest

from range_core.engine.projector import (
    REGIME_WIDTH_MULTIPLIERS,
    Z_SCORE,
    analyze_window,
    anchor_high,
    anchor_low,
    build_invalidations,
    classify_volatility,
    confidence_score,
    project_range,
    project_volatility,
    volatility_stability,
)
from range_core.engine.regime import classify_regime
from range_core.engine.structure import find_market_structure
from range_core.feed.synthetic import generate_candles
from range_core.models import MarketStructure, Regime

from conftest import START

HORIZONS = [1, 2, 4, 6, 12, 24]


def _walk(seed, price=60000.0, count=100):
    return generate_candles(price, count, end=START, rng=np.random.default_rng(seed))


class TestFlatScenario:
    def test_zero_volatility_collapses_range(self, flat_candles):
        prediction = project_range(flat_candles, 100.0, 1)
        assert prediction.volatility.realized == 0.0
        assert prediction.volatility.projected == 0.0
        assert prediction.range.low == 100.0
        assert prediction.range.high == 100.0
        assert prediction.range.center == 100.0
        assert prediction.range.width == 0.0
        assert prediction.range.width_percent == 0.0

    def test_flat_confidence(self, flat_candles):
        # 0.70 - 0.15 (no measurable stability) + 0.10 (range strength 1.0)
        prediction = project_range(flat_candles, 100.0, 1)
        assert prediction.confidence == 65.0
        assert prediction.momentum.value == 0.0
        assert prediction.momentum.bias == "neutral"


class TestProjectVolatility:
    def test_full_day_horizon(self):
        assert project_volatility(0.5, 24, "trend") == pytest.approx(0.6)

    def test_unknown_regime_uses_unit_multiplier(self):
        assert project_volatility(0.5, 24, "other") == pytest.approx(0.5)

    def test_square_root_time_scaling(self):
        assert project_volatility(0.5, 6, "range") == pytest.approx(0.5 * 0.5 * 0.85)

    def test_strictly_increasing_in_horizon(self):
        values = [project_volatility(0.4, h, "range") for h in range(1, 49)]
        assert all(b > a for a, b in zip(values, values[1:]))


class TestAnchoring:
    def test_low_raised_to_highest_nearby_support(self):
        assert anchor_low(100.0, [101.0, 103.0, 99.0, 106.0], 20.0) == 103.0

    def test_low_unchanged_without_candidates(self):
        assert anchor_low(100.0, [99.0, 90.0, 106.0], 20.0) == 100.0

    def test_support_at_bound_is_ignored(self):
        assert anchor_low(100.0, [100.0], 20.0) == 100.0

    def test_high_lowered_to_lowest_nearby_resistance(self):
        assert anchor_high(200.0, [199.0, 197.0, 201.0, 190.0], 20.0) == 197.0

    def test_high_unchanged_without_candidates(self):
        assert anchor_high(200.0, [201.0, 190.0], 20.0) == 200.0

    def test_zero_width_never_moves(self):
        assert anchor_low(100.0, [100.0, 100.5], 0.0) == 100.0
        assert anchor_high(100.0, [100.0, 99.5], 0.0) == 100.0


class TestRangeInvariants:
    @pytest.mark.parametrize("seed", range(12))
    def test_ordering_and_bounds(self, seed):
        candles = _walk(seed)
        price = candles[-1].close
        for h in HORIZONS:
            p = project_range(candles, price, h)
            assert p.range.low <= p.range.center <= p.range.high
            assert 40.0 <= p.confidence <= 95.0
            assert -1.0 <= p.momentum.value <= 1.0
            assert p.range.width == pytest.approx(p.range.high - p.range.low, abs=0.011)

    @pytest.mark.parametrize("seed", range(12))
    def test_anchoring_never_widens(self, seed):
        candles = _walk(seed)
        price = candles[-1].close
        analysis = analyze_window(candles, price)
        for h in HORIZONS:
            p = project_range(candles, price, h, analysis=analysis)
            projected = project_volatility(analysis.realized_vol, h, analysis.regime.type)
            width = price * projected * Z_SCORE * REGIME_WIDTH_MULTIPLIERS[analysis.regime.type]
            center = price * (1 + analysis.momentum * 0.12)
            assert p.range.low >= round(center - width / 2, 2)
            assert p.range.high <= round(center + width / 2, 2)

    def test_width_grows_with_horizon(self, walk_candles):
        price = walk_candles[-1].close
        predictions = [project_range(walk_candles, price, h) for h in HORIZONS]
        projected = [p.volatility.projected for p in predictions]
        assert all(b > a for a, b in zip(projected, projected[1:]))

    def test_shared_analysis_matches_fresh_run(self, walk_candles):
        price = walk_candles[-1].close
        analysis = analyze_window(walk_candles, price)
        assert project_range(walk_candles, price, 4, analysis=analysis) == project_range(walk_candles, price, 4)

    def test_record_fields(self, walk_candles):
        p = project_range(walk_candles, walk_candles[-1].close, 6)
        assert p.horizon_hours == 6
        assert p.timeframe == "6h"
        assert p.volatility.state in {"low", "normal", "high"}
        assert len(p.invalidations.hard) == 3
        assert len(p.invalidations.soft) == 3


class TestConfidence:
    def test_volume_surge_adds_confidence(self, candle_factory):
        volumes = [1.0] * 94 + [2.0] * 6
        candles = candle_factory([100.0] * 100, volumes=volumes)
        regime = classify_regime(candles)
        structure = find_market_structure(candles)
        assert confidence_score(candles, regime, structure, 100.0) == pytest.approx(0.70)

    def test_thin_volume_removes_confidence(self, candle_factory):
        volumes = [1.0] * 94 + [0.5] * 6
        candles = candle_factory([100.0] * 100, volumes=volumes)
        regime = classify_regime(candles)
        structure = find_market_structure(candles)
        assert confidence_score(candles, regime, structure, 100.0) == pytest.approx(0.60)

    def test_zero_volume_has_no_volume_term(self, candle_factory):
        candles = candle_factory([100.0] * 100, volume=0.0)
        regime = classify_regime(candles)
        structure = find_market_structure(candles)
        assert confidence_score(candles, regime, structure, 100.0) == pytest.approx(0.65)

    def test_swing_proximity_bonus(self, flat_candles):
        regime = classify_regime(flat_candles)
        near = MarketStructure(
            session_high=101.0, session_low=99.0,
            swing_highs=[], swing_lows=[98.5],
            vwap=100.0, vwap_upper1=100.0, vwap_upper2=100.0,
            vwap_lower1=100.0, vwap_lower2=100.0,
        )
        far = near.model_copy(update={"swing_lows": [90.0]})
        assert confidence_score(flat_candles, regime, near, 100.0) == pytest.approx(0.75)
        assert confidence_score(flat_candles, regime, far, 100.0) == pytest.approx(0.65)

    def test_weak_regime_lowers_confidence(self, flat_candles):
        weak = Regime(type="range", strength=0.0, direction="neutral", adx=22.0, bb_width=4.0)
        structure = find_market_structure(flat_candles)
        # 0.70 - 0.15 - 0.10
        assert confidence_score(flat_candles, weak, structure, 100.0) == pytest.approx(0.45)

    def test_clamped_to_ceiling(self, candle_factory):
        volumes = [1.0] * 94 + [2.0] * 6
        candles = candle_factory([100.0, 101.0] * 50, volumes=volumes)
        strong = Regime(type="trend", strength=1.0, direction="up", adx=50.0, bb_width=4.0)
        near = MarketStructure(
            session_high=102.0, session_low=99.0,
            swing_highs=[101.5], swing_lows=[],
            vwap=100.5, vwap_upper1=101.0, vwap_upper2=101.5,
            vwap_lower1=100.0, vwap_lower2=99.5,
        )
        # 0.70 + 0.15 + 0.10 + 0.10 + 0.05 = 1.10 before clamping
        assert confidence_score(candles, strong, near, 101.0) == pytest.approx(0.95)

    @pytest.mark.parametrize("seed", range(8))
    def test_bounds(self, seed):
        candles = _walk(seed)
        regime = classify_regime(candles)
        structure = find_market_structure(candles)
        assert 0.40 <= confidence_score(candles, regime, structure, candles[-1].close) <= 0.95


class TestVolatilityStability:
    def test_degenerate_older_half(self, flat_candles):
        assert volatility_stability(flat_candles) == 0.0

    def test_identical_halves_are_fully_stable(self, candle_factory):
        closes = [100.0, 101.0] * 12 + [100.0]
        assert volatility_stability(candle_factory(closes)) == pytest.approx(1.0)

    def test_clamped_at_zero(self, candle_factory):
        calm = [100.0, 100.1] * 6
        wild = [100.0, 120.0] * 6
        assert volatility_stability(candle_factory(calm + wild)) == 0.0


class TestClassifyVolatility:
    def test_short_window_is_normal(self, flat_candles):
        assert classify_volatility(0.5, flat_candles[:24]) == "normal"

    def test_extremes(self, walk_candles):
        assert classify_volatility(0.0, walk_candles) == "low"
        assert classify_volatility(10.0, walk_candles) == "high"


class TestInvalidations:
    def test_messages(self, flat_candles):
        regime = Regime(type="range", strength=0.5, direction="neutral", adx=22.0, bb_width=4.0)
        inv = build_invalidations(100.0, 200.0, 0.5, 4, flat_candles, regime)
        assert inv.hard == [
            "Price breaks 97 or 206",
            "Volatility spikes above 100.0%",
            "Volume exceeds 5.0M",
        ]
        assert inv.soft == [
            "Time exceeds 8 hours",
            "New swing high/low forms outside range",
            "Regime changes from range",
        ]
