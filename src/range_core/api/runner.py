"""Serve the range API with uvicorn: range-engine-api [--config path] [--host H] [--port P]."""

from __future__ import annotations

import argparse

import uvicorn

from range_core.api.app import create_app
from range_core.config import load_config
from range_core.logging import get_logger, setup_logging

log = get_logger(__name__)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="BTC range engine API server")
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    parser.add_argument("--host", default=None, help="Override api.host")
    parser.add_argument("--port", type=int, default=None, help="Override api.port")
    args = parser.parse_args(argv)

    config = load_config(args.config)
    setup_logging(config.logging.level, config.logging.format)
    host = args.host or config.api.host
    port = args.port or config.api.port

    log.info(
        "api_starting",
        host=host,
        port=port,
        candle_source=config.feed.candle_source,
        horizons=config.engine.horizons,
    )
    # log_config=None keeps uvicorn on the structlog handlers installed above
    uvicorn.run(create_app(config), host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
