"""Bitcoin price-range projection engine."""

__version__ = "0.1.0"
