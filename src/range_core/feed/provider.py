"""Market data provider — resolves the snapshot and candle window the engine consumes."""

from __future__ import annotations

import httpx
import numpy as np

from range_core.config.schema import AppConfig
from range_core.engine.errors import UpstreamUnavailableError
from range_core.feed.cache import SnapshotCache
from range_core.feed.hyperliquid import HyperliquidClient
from range_core.feed.quotes import QuoteClient
from range_core.feed.synthetic import generate_candles
from range_core.logging import get_logger
from range_core.models import Candle, MarketSnapshot

log = get_logger(__name__)


class MarketDataProvider:
    """Fetches a quote, then a candle window ending at that quote's price.

    Results are cached for ``feed.cache_ttl_s`` so dashboard polling does not
    hit the upstream sources on every request.
    """

    def __init__(
        self,
        config: AppConfig,
        quotes: QuoteClient | None = None,
        hyperliquid: HyperliquidClient | None = None,
        cache: SnapshotCache | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.config = config
        self.quotes = quotes or QuoteClient(config.feed.quote_sources, config.feed.timeout_s)
        self.hyperliquid = hyperliquid or HyperliquidClient(
            config.feed.hyperliquid_url, config.feed.timeout_s,
        )
        self.cache = cache or SnapshotCache(ttl_seconds=config.feed.cache_ttl_s)
        self._rng = rng

    async def close(self) -> None:
        await self.quotes.close()
        await self.hyperliquid.close()

    async def candles_for(self, price: float) -> list[Candle]:
        feed = self.config.feed
        count = self.config.engine.candle_count
        if feed.candle_source == "hyperliquid":
            try:
                candles = await self.hyperliquid.fetch_candles(
                    feed.asset, count, price, self.config.engine.candle_interval_hours,
                )
            except (httpx.HTTPError, ValueError, KeyError, TypeError) as exc:
                log.warning("candle_source_failed", source="hyperliquid", error=str(exc))
                raise UpstreamUnavailableError(f"Candle source failed: {exc}") from exc
            if not candles:
                raise UpstreamUnavailableError("Candle source returned no candles")
            return candles
        return generate_candles(
            price,
            count,
            interval_hours=self.config.engine.candle_interval_hours,
            rng=self._rng,
        )

    async def get_market_window(self) -> tuple[MarketSnapshot, list[Candle]]:
        """Return ``(snapshot, candles)``, served from cache while fresh.

        Raises:
            UpstreamUnavailableError: no quote source answered, or the candle
                source failed.
        """
        return await self.cache.get_or_load(f"window:{self.config.feed.asset}", self._fetch_window)

    async def _fetch_window(self) -> tuple[MarketSnapshot, list[Candle]]:
        snapshot = await self.quotes.fetch_snapshot()
        candles = await self.candles_for(snapshot.price)
        log.info(
            "market_window_fetched",
            source=snapshot.source,
            candle_source=self.config.feed.candle_source,
            price=snapshot.price,
            candles=len(candles),
        )
        return snapshot, candles
