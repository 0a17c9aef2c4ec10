"""Tests for structured logging system."""

from __future__ import annotations

import io
import json
import logging

from rich.logging import RichHandler

from dexvault.shared.errors import ApplicationError, ErrorCode, ErrorContext
from dexvault.shared.logging import (
    StructuredFormatter,
    log_api_call,
    log_operation_error,
    log_operation_start,
    log_operation_success,
    setup_structured_logger,
)


class TestStructuredFormatter:
    """Test StructuredFormatter JSON output."""

    def test_format_basic_log(self):
        """Test basic log record formatting to JSON."""
        formatter = StructuredFormatter()
        record = logging.LogRecord(
            name="test_logger",
            level=logging.INFO,
            pathname="test.py",
            lineno=10,
            msg="Name index ready: %d names",
            args=(1025,),
            exc_info=None,
        )

        log_data = json.loads(formatter.format(record))

        assert log_data["level"] == "INFO"
        assert log_data["logger"] == "test_logger"
        assert log_data["message"] == "Name index ready: 1025 names"
        assert "timestamp" in log_data

    def test_format_log_with_context(self):
        """Extra fields set by the helpers are carried into the JSON."""
        formatter = StructuredFormatter()
        record = logging.LogRecord(
            name="test_logger",
            level=logging.ERROR,
            pathname="test.py",
            lineno=20,
            msg="Request failed",
            args=(),
            exc_info=None,
        )
        record.error_code = "RESOURCE_NOT_FOUND"
        record.context = {"url": "https://pokeapi.test/pokemon/0"}
        record.operation = "resolve"

        log_data = json.loads(formatter.format(record))

        assert log_data["error_code"] == "RESOURCE_NOT_FOUND"
        assert log_data["context"] == {"url": "https://pokeapi.test/pokemon/0"}
        assert log_data["operation"] == "resolve"


class TestSetupStructuredLogger:
    """Test structured logger setup."""

    def test_json_console_handler(self):
        logger = setup_structured_logger(name="test_structured_json", use_rich_console=False)

        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, StructuredFormatter)
        assert logger.propagate is False

    def test_rich_console_handler(self):
        logger = setup_structured_logger(name="test_structured_rich", level="debug")

        assert isinstance(logger.handlers[0], RichHandler)
        assert logger.level == logging.DEBUG

    def test_repeated_setup_replaces_handlers(self, tmp_path):
        """Calling setup twice does not duplicate output."""
        setup_structured_logger(name="test_structured_twice", use_rich_console=False)
        logger = setup_structured_logger(
            name="test_structured_twice",
            log_file=str(tmp_path / "dexvault.log"),
            use_rich_console=False,
        )

        assert len(logger.handlers) == 2
        for handler in logger.handlers:
            handler.close()


class TestLoggingHelpers:
    """Test logging helper functions."""

    def test_log_operation_error(self, caplog):
        logger = logging.getLogger("test_error_log")
        error = ApplicationError(
            code=ErrorCode.INDEX_NOT_LOADED,
            message="Name index has not been loaded",
            context=ErrorContext(operation="search"),
        )

        with caplog.at_level(logging.WARNING):
            log_operation_error(logger, error, level=logging.WARNING)

        record = caplog.records[0]
        assert record.levelname == "WARNING"
        assert record.error_code == "INDEX_NOT_LOADED"
        assert record.operation == "search"
        assert record.context["additional_data"] == {}

    def test_log_operation_success_is_debug(self, caplog):
        logger = logging.getLogger("test_success_log")

        with caplog.at_level(logging.DEBUG):
            log_operation_success(logger, operation="resolve", duration_ms=12.5, result_info={"id": 25})

        assert caplog.records[0].levelname == "DEBUG"
        assert caplog.records[0].result_info == {"id": 25}

    def test_log_operation_start(self, caplog):
        logger = logging.getLogger("test_start_log")

        with caplog.at_level(logging.DEBUG):
            log_operation_start(logger, operation="name_index_load")

        assert "name_index_load" in caplog.records[0].message

    def test_log_api_call_levels(self, caplog):
        """Failures are warnings, successes debug."""
        logger = logging.getLogger("test_api_log")

        with caplog.at_level(logging.DEBUG):
            log_api_call(logger, "https://pokeapi.test/pokemon/1", status_code=200, duration_ms=3.14159)
            log_api_call(logger, "https://pokeapi.test/pokemon/0", status_code=404)
            log_api_call(logger, "https://pokeapi.test/pokemon/2")

        assert [r.levelname for r in caplog.records] == ["DEBUG", "WARNING", "WARNING"]
        assert caplog.records[0].context["duration_ms"] == 3.14


class TestJSONLoggingIntegration:
    def test_structured_logger_outputs_json(self):
        logger = logging.getLogger("test_json_output")
        logger.handlers.clear()
        logger.setLevel(logging.INFO)
        stream = io.StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)

        logger.info("Test JSON message")

        log_data = json.loads(stream.getvalue().strip())
        assert log_data["message"] == "Test JSON message"
        assert log_data["level"] == "INFO"
