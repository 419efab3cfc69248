"""Configuration system."""

from range_core.config.loader import load_config
from range_core.config.schema import AppConfig

__all__ = ["AppConfig", "load_config"]
