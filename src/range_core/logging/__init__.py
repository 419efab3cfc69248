"""Structured logging for the range engine."""

from range_core.logging.setup import SERVICE, bind_request, get_logger, setup_logging

__all__ = ["SERVICE", "bind_request", "get_logger", "setup_logging"]
