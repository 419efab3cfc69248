"""structlog configuration for the engine, the CLI and the API server.

Every record carries ``service`` and, inside an API request, the
``request_id`` bound by :func:`bind_request`. Third-party HTTP loggers are
held at WARNING so upstream polling does not drown the engine's events.
"""

from __future__ import annotations

import logging
import sys
import uuid

import structlog

SERVICE = "range-engine"
QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def _add_service(logger, method_name: str, event_dict: dict) -> dict:
    event_dict.setdefault("service", SERVICE)
    return event_dict


def setup_logging(level: str = "INFO", log_format: str = "json") -> None:
    """Route structlog and stdlib logging to stderr as JSON or console lines.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL. Unknown names mean INFO.
        log_format: ``"json"`` for the API server, ``"console"`` for the CLI.
    """
    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_service,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    renderer: structlog.types.Processor
    if log_format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    # Loggers are created at import time, so they must not cache the first config.
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    ))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(root.level, logging.WARNING))


def get_logger(name: str | None = None, **initial_context) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger


def bind_request(request_id: str | None = None, **context) -> str:
    """Start a fresh per-request log context and return its request id."""
    request_id = request_id or uuid.uuid4().hex[:12]
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, **context)
    return request_id
