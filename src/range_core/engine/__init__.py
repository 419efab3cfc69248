"""Range projection engine."""

from range_core.engine.errors import InvalidInputError, RangeEngineError, UpstreamUnavailableError
from range_core.engine.orchestrator import assess_market, run_analysis
from range_core.engine.projector import WindowAnalysis, analyze_window, project_range
from range_core.engine.zones import determine_current_zone, generate_trading_zones

__all__ = [
    "InvalidInputError",
    "RangeEngineError",
    "UpstreamUnavailableError",
    "WindowAnalysis",
    "analyze_window",
    "assess_market",
    "determine_current_zone",
    "generate_trading_zones",
    "project_range",
    "run_analysis",
]
