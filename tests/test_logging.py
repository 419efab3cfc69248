"""Tests for structured logging."""

from __future__ import annotations

import json
import logging

import structlog

from range_core.logging import SERVICE, bind_request, get_logger, setup_logging


def _lines(err: str) -> list[dict]:
    return [json.loads(line) for line in err.strip().splitlines()]


class TestSetupLogging:
    def test_json_line_shape(self, capsys):
        setup_logging(level="INFO", log_format="json")
        get_logger("range_core.test").info("range_projected", horizon_hours=4)

        (line,) = _lines(capsys.readouterr().err)
        assert line["event"] == "range_projected"
        assert line["horizon_hours"] == 4
        assert line["level"] == "info"
        assert line["logger"] == "range_core.test"
        assert line["service"] == SERVICE
        assert line["timestamp"].endswith("Z")

    def test_console_format(self, capsys):
        setup_logging(level="INFO", log_format="console")
        get_logger("range_core.test").info("analysis_completed", regime="range")

        err = capsys.readouterr().err
        assert "analysis_completed" in err
        assert "regime" in err

    def test_level_filtering(self, capsys):
        setup_logging(level="WARNING", log_format="json")
        logger = get_logger("range_core.test")
        logger.info("quote_fetched")
        logger.warning("quote_source_failed", source="coincap")

        err = capsys.readouterr().err
        assert "quote_fetched" not in err
        assert "quote_source_failed" in err

    def test_unknown_level_means_info(self):
        setup_logging(level="chatty")
        assert logging.getLogger().level == logging.INFO

    def test_http_libraries_quieted(self):
        setup_logging(level="DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("uvicorn.access").level == logging.WARNING

    def test_stdlib_records_rendered(self, capsys):
        setup_logging(level="INFO", log_format="json")
        logging.getLogger("uvicorn.error").info("Application startup complete.")

        (line,) = _lines(capsys.readouterr().err)
        assert line["event"] == "Application startup complete."
        assert line["service"] == SERVICE

    def test_initial_context(self, capsys):
        setup_logging(level="INFO", log_format="json")
        get_logger("range_core.test", asset="BTC", source="CoinCap").info("market_window_fetched")

        (line,) = _lines(capsys.readouterr().err)
        assert line["asset"] == "BTC"
        assert line["source"] == "CoinCap"


class TestBindRequest:
    def test_binds_request_id(self, capsys):
        setup_logging(level="INFO", log_format="json")
        assert bind_request("abc123", path="/api/analyze") == "abc123"
        get_logger("range_core.test").info("analysis_completed")

        (line,) = _lines(capsys.readouterr().err)
        assert line["request_id"] == "abc123"
        assert line["path"] == "/api/analyze"
        structlog.contextvars.clear_contextvars()

    def test_replaces_previous_context(self):
        bind_request("first", path="/a")
        request_id = bind_request()
        ctx = structlog.contextvars.get_contextvars()
        assert ctx == {"request_id": request_id}
        assert request_id != "first"
        structlog.contextvars.clear_contextvars()


class TestEngineEvents:
    def test_short_window_warning(self, capsys, flat_candles):
        from range_core.engine.orchestrator import validate_inputs

        setup_logging(level="WARNING", log_format="json")
        validate_inputs(100.0, flat_candles[:10], [1])

        (line,) = _lines(capsys.readouterr().err)
        assert line["event"] == "candle_window_short"
        assert line["candles"] == 10
        assert line["logger"] == "range_core.engine.orchestrator"
