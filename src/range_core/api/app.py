"""FastAPI application serving range analyses to the dashboard."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from range_core import __version__
from range_core.config.loader import load_config
from range_core.config.schema import AppConfig
from range_core.engine import run_analysis
from range_core.engine.errors import InvalidInputError, RangeEngineError, UpstreamUnavailableError
from range_core.feed import MarketDataProvider
from range_core.logging import bind_request, get_logger

logger = get_logger(__name__)


def parse_horizons(raw: str) -> list[int]:
    """Parse a comma-separated horizon list such as ``"1,4,24"``."""
    try:
        horizons = [int(part) for part in raw.split(",") if part.strip()]
    except ValueError as exc:
        raise InvalidInputError(f"invalid horizons {raw!r}") from exc
    if not horizons:
        raise InvalidInputError("at least one horizon is required")
    bad = [h for h in horizons if h <= 0]
    if bad:
        raise InvalidInputError(f"horizons must be positive integers, got {bad!r}")
    return horizons


def get_provider(request: Request) -> MarketDataProvider:
    """Dependency returning the app's market data provider."""
    return request.app.state.provider


def create_app(
    config: AppConfig | None = None,
    provider: MarketDataProvider | None = None,
) -> FastAPI:
    config = config or load_config()

    app = FastAPI(
        title="BTC Range Engine API",
        description="Probable price ranges, regime and trading zones across horizons",
        version=__version__,
    )
    app.state.config = config
    app.state.provider = provider or MarketDataProvider(config)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = bind_request(request.headers.get("x-request-id"), path=request.url.path)
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.on_event("shutdown")
    async def shutdown_event():
        await app.state.provider.close()

    @app.exception_handler(RangeEngineError)
    async def engine_error_handler(request: Request, exc: RangeEngineError):
        if isinstance(exc, UpstreamUnavailableError):
            status, error = 503, "Upstream unavailable"
        elif isinstance(exc, InvalidInputError):
            status, error = 422, "Invalid input"
        else:
            status, error = 500, "Engine failed"
        logger.warning("analysis_rejected", status=status, error=str(exc))
        return JSONResponse(
            status_code=status,
            content={"success": False, "error": error, "message": str(exc)},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("engine_error")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Engine failed", "message": str(exc)},
        )

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.get("/api/analyze")
    async def analyze(
        horizons: Optional[str] = None,
        provider: MarketDataProvider = Depends(get_provider),
    ):
        """Run the engine on the latest market window."""
        engine_cfg = app.state.config.engine
        requested = parse_horizons(horizons) if horizons else engine_cfg.horizons

        snapshot, candles = await provider.get_market_window()
        # CPU-bound, runs off the event loop
        report = await run_in_threadpool(
            run_analysis,
            snapshot,
            candles,
            requested,
            zone_horizon_index=engine_cfg.zone_horizon_index,
            candle_interval_hours=engine_cfg.candle_interval_hours,
        )
        return report.model_dump(mode="json", by_alias=True)

    return app
