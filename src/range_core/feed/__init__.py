"""External market data: quote sources, candle sources and caching."""

from range_core.feed.cache import SnapshotCache
from range_core.feed.hyperliquid import HyperliquidClient
from range_core.feed.provider import MarketDataProvider
from range_core.feed.quotes import QuoteClient
from range_core.feed.synthetic import generate_candles

__all__ = [
    "HyperliquidClient",
    "MarketDataProvider",
    "QuoteClient",
    "SnapshotCache",
    "generate_candles",
]
