"""Configuration schema — Pydantic models for config.yaml."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

# Candle widths, in hours, that Hyperliquid serves through candleSnapshot
HYPERLIQUID_INTERVALS = {
    0.25: "15m",
    0.5: "30m",
    1.0: "1h",
    2.0: "2h",
    4.0: "4h",
    8.0: "8h",
    12.0: "12h",
    24.0: "1d",
}


class EngineConfig(BaseModel):
    horizons: list[int] = Field(default_factory=lambda: [1, 2, 4, 6, 12, 24])
    candle_count: int = Field(default=100, ge=2)
    candle_interval_hours: float = Field(default=1.0, gt=0)
    # Index into horizons of the prediction the trading zones are cut from
    zone_horizon_index: int = Field(default=1, ge=0)

    @field_validator("horizons")
    @classmethod
    def _positive_horizons(cls, v: list[int]) -> list[int]:
        if not v or any(h <= 0 for h in v):
            raise ValueError("horizons must be a non-empty list of positive hours")
        return v


class FeedConfig(BaseModel):
    asset: str = "BTC"
    quote_sources: list[Literal["coincap", "cryptocompare"]] = Field(
        default_factory=lambda: ["coincap", "cryptocompare"],
    )
    timeout_s: float = 10.0
    candle_source: Literal["synthetic", "hyperliquid"] = "synthetic"
    hyperliquid_url: str = "https://api.hyperliquid.xyz"
    cache_ttl_s: float = 60.0


class ApiConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "json"


class AppConfig(BaseModel):
    engine: EngineConfig = Field(default_factory=EngineConfig)
    feed: FeedConfig = Field(default_factory=FeedConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def _candle_source_serves_interval(self) -> AppConfig:
        hours = self.engine.candle_interval_hours
        if self.feed.candle_source == "hyperliquid" and hours not in HYPERLIQUID_INTERVALS:
            raise ValueError(
                f"hyperliquid has no {hours}h candles; "
                f"candle_interval_hours must be one of {sorted(HYPERLIQUID_INTERVALS)}"
            )
        return self
