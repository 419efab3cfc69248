"""Market data models — candles and quote snapshots."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Candle(BaseModel):
    """One OHLCV bar.

    The high/low envelope is not enforced: a wick that fails to cover the
    body is tolerated by every indicator.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    open: float = Field(gt=0)
    high: float = Field(gt=0)
    low: float = Field(gt=0)
    close: float = Field(gt=0)
    volume: float = Field(default=0.0, ge=0)

    @property
    def typical_price(self) -> float:
        return (self.high + self.low + self.close) / 3


class MarketSnapshot(BaseModel):
    """A point-in-time quote for one asset."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    price: float = Field(gt=0)
    change24h: float = 0.0
    volume24h: float = Field(default=0.0, ge=0)
    market_cap: float = Field(default=0.0, ge=0)
    source: str
    asset: str = "BTC"
    ts: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
