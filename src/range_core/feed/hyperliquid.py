"""Hyperliquid candle source — REST ``candleSnapshot`` at the engine's candle width."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any

import httpx

from range_core.config.schema import HYPERLIQUID_INTERVALS
from range_core.models import Candle

MS_PER_HOUR = 3_600_000


def interval_for_hours(hours: float) -> str:
    """Hyperliquid interval string for candles *hours* wide, e.g. ``4.0 -> "4h"``."""
    try:
        return HYPERLIQUID_INTERVALS[hours]
    except KeyError:
        raise ValueError(f"hyperliquid has no {hours}h candles") from None


class HyperliquidClient:
    """Async client for Hyperliquid's info endpoint."""

    def __init__(
        self,
        base_url: str = "https://api.hyperliquid.xyz",
        timeout_s: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
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

    async def _post_info(self, payload: dict) -> Any:
        http = await self._get_http()
        resp = await http.post(f"{self.base_url}/info", json=payload)
        resp.raise_for_status()
        return resp.json()

    async def get_candle_snapshot(
        self,
        coin: str,
        interval: str,
        start_time_ms: int,
        end_time_ms: int,
    ) -> list[dict]:
        """Fetch historical candles.

        Returns list of candle dicts with keys: t, T, s, i, o, c, h, l, v, n.
        """
        return await self._post_info({
            "type": "candleSnapshot",
            "req": {
                "coin": coin,
                "interval": interval,
                "startTime": start_time_ms,
                "endTime": end_time_ms,
            },
        })

    @staticmethod
    def parse_candle(raw: dict) -> Candle:
        return Candle(
            timestamp=datetime.fromtimestamp(raw["t"] / 1000, tz=timezone.utc),
            open=float(raw["o"]),
            high=float(raw["h"]),
            low=float(raw["l"]),
            close=float(raw["c"]),
            volume=float(raw["v"]),
        )

    async def fetch_candles(
        self,
        coin: str,
        count: int,
        price: float,
        interval_hours: float = 1.0,
    ) -> list[Candle]:
        """Most recent *count* candles, oldest first, ending at *price*.

        The last (still open) candle's close is replaced by the live price so
        the window ends exactly where the quote does.
        """
        interval = interval_for_hours(interval_hours)
        step = int(interval_hours * MS_PER_HOUR)
        end_ms = int(time.time() * 1000)
        raw = await self.get_candle_snapshot(coin, interval, end_ms - step * (count + 1), end_ms)
        candles = [self.parse_candle(r) for r in sorted(raw, key=lambda r: r["t"])][-count:]
        if candles:
            last = candles[-1]
            candles[-1] = last.model_copy(update={
                "close": price,
                "high": max(last.high, price),
                "low": min(last.low, price),
            })
        return candles
