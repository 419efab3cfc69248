"""One-shot analysis: python -m range_core [--config path] [--price P] [--horizons 1,2,4]."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

import numpy as np

from range_core.api.app import parse_horizons
from range_core.config import load_config
from range_core.engine import RangeEngineError, run_analysis
from range_core.feed import MarketDataProvider, generate_candles
from range_core.logging import get_logger, setup_logging
from range_core.models import MarketSnapshot

log = get_logger("range_core")


async def _resolve_window(args: argparse.Namespace, provider: MarketDataProvider):
    if args.price is None:
        return await provider.get_market_window()
    snapshot = MarketSnapshot(price=args.price, source="manual", asset=provider.config.feed.asset)
    candles = generate_candles(
        args.price,
        provider.config.engine.candle_count,
        interval_hours=provider.config.engine.candle_interval_hours,
        rng=np.random.default_rng(args.seed),
    )
    return snapshot, candles


async def _run(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    setup_logging(config.logging.level, config.logging.format)
    provider = MarketDataProvider(config)
    try:
        horizons = parse_horizons(args.horizons) if args.horizons else config.engine.horizons
        snapshot, candles = await _resolve_window(args, provider)
        report = run_analysis(
            snapshot,
            candles,
            horizons,
            zone_horizon_index=config.engine.zone_horizon_index,
            candle_interval_hours=config.engine.candle_interval_hours,
        )
    except RangeEngineError as exc:
        log.error("analysis_failed", error=str(exc))
        return 1
    finally:
        await provider.close()

    json.dump(report.model_dump(mode="json", by_alias=True), sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Project BTC price ranges once and print JSON")
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    parser.add_argument("--price", type=float, default=None,
                        help="Skip quote sources and use this price with synthetic candles")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed for synthetic candles")
    parser.add_argument("--horizons", default=None, help="Comma-separated horizons in hours")
    args = parser.parse_args(argv)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
