"""Spot quote sources — CoinCap and CryptoCompare REST, tried in order."""

from __future__ import annotations

from typing import Any, Sequence

import httpx

from range_core.engine.errors import UpstreamUnavailableError
from range_core.logging import get_logger
from range_core.models import MarketSnapshot

log = get_logger(__name__)

COINCAP_URL = "https://api.coincap.io/v2/assets/bitcoin"
CRYPTOCOMPARE_URL = "https://min-api.cryptocompare.com/data/pricemultifull"


class QuoteClient:
    """Async client that resolves one MarketSnapshot from the first healthy source."""

    def __init__(
        self,
        sources: Sequence[str] = ("coincap", "cryptocompare"),
        timeout_s: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        unknown = [s for s in sources if s not in self._FETCHERS]
        if unknown:
            raise ValueError(f"Unknown quote sources: {unknown!r}")
        self.sources = list(sources)
        self.timeout_s = timeout_s
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    async def _get_http(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport)
        return self._http

    async def close(self) -> None:
        if self._http and not self._http.is_closed:
            await self._http.aclose()

    # --- Parsers ---

    @staticmethod
    def parse_coincap(body: dict[str, Any]) -> MarketSnapshot | None:
        """Parse ``GET /v2/assets/bitcoin``; returns None if ``data`` is missing."""
        data = body.get("data")
        if not data:
            return None
        return MarketSnapshot(
            price=float(data["priceUsd"]),
            change24h=float(data.get("changePercent24Hr") or 0),
            volume24h=float(data.get("volumeUsd24Hr") or 0),
            market_cap=float(data.get("marketCapUsd") or 0),
            source="CoinCap",
        )

    @staticmethod
    def parse_cryptocompare(body: dict[str, Any]) -> MarketSnapshot | None:
        """Parse ``pricemultifull``; returns None if ``RAW.BTC.USD`` is missing."""
        btc = body.get("RAW", {}).get("BTC", {}).get("USD")
        if not btc:
            return None
        return MarketSnapshot(
            price=float(btc["PRICE"]),
            change24h=float(btc.get("CHANGEPCT24HOUR") or 0),
            volume24h=float(btc.get("VOLUME24HOURTO") or 0),
            market_cap=float(btc.get("MKTCAP") or 0),
            source="CryptoCompare",
        )

    # --- REST ---

    async def _fetch_coincap(self) -> MarketSnapshot | None:
        http = await self._get_http()
        resp = await http.get(COINCAP_URL)
        resp.raise_for_status()
        return self.parse_coincap(resp.json())

    async def _fetch_cryptocompare(self) -> MarketSnapshot | None:
        http = await self._get_http()
        resp = await http.get(CRYPTOCOMPARE_URL, params={"fsyms": "BTC", "tsyms": "USD"})
        resp.raise_for_status()
        return self.parse_cryptocompare(resp.json())

    _FETCHERS = {
        "coincap": _fetch_coincap,
        "cryptocompare": _fetch_cryptocompare,
    }

    async def fetch_snapshot(self) -> MarketSnapshot:
        """Return the first snapshot any source yields.

        Raises:
            UpstreamUnavailableError: every source failed or returned no quote.
        """
        for source in self.sources:
            try:
                snapshot = await self._FETCHERS[source](self)
            except (httpx.HTTPError, ValueError, KeyError, TypeError) as exc:
                log.warning("quote_source_failed", source=source, error=str(exc))
                continue
            if snapshot is None:
                log.warning("quote_source_empty", source=source)
                continue
            log.debug("quote_fetched", source=snapshot.source, price=snapshot.price)
            return snapshot
        raise UpstreamUnavailableError("All price sources failed")
