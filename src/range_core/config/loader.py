"""Config loader — reads YAML, applies RANGE_* env var overrides."""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from range_core.config.schema import AppConfig


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from a YAML file, then apply env var overrides.

    If *path* is None or the file doesn't exist, returns defaults.

    Environment variable overrides:
        RANGE_LOG_LEVEL      -> logging.level
        RANGE_LOG_FORMAT     -> logging.format
        RANGE_CANDLE_SOURCE  -> feed.candle_source
        RANGE_API_PORT       -> api.port
    """
    data: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p) as f:
                data = yaml.safe_load(f) or {}

    log_level = os.environ.get("RANGE_LOG_LEVEL")
    if log_level:
        data.setdefault("logging", {})["level"] = log_level

    log_format = os.environ.get("RANGE_LOG_FORMAT")
    if log_format:
        data.setdefault("logging", {})["format"] = log_format

    candle_source = os.environ.get("RANGE_CANDLE_SOURCE")
    if candle_source:
        data.setdefault("feed", {})["candle_source"] = candle_source

    api_port = os.environ.get("RANGE_API_PORT")
    if api_port:
        data.setdefault("api", {})["port"] = api_port

    return AppConfig.model_validate(data)
