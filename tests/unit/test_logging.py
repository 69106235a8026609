"""Unit tests for structured logging."""

import json
import logging
from io import StringIO
from unittest.mock import MagicMock, patch

import pytest
import structlog

from campushub.config.settings import Settings
from campushub.core.logging import (
    add_environment_info,
    bind_contextvars,
    clear_contextvars,
    drop_color_message_key,
    get_logger,
    log_database_query,
    log_exception,
    log_request_end,
    setup_logging,
)


@pytest.fixture
def patched_settings():
    """Settings seen by the logging module."""
    settings = Settings(ENVIRONMENT="test", log_level="INFO")
    with patch("campushub.core.logging.get_settings", return_value=settings):
        yield settings


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


class TestProcessors:
    """Tests for custom structlog processors."""

    def test_add_environment_info(self, patched_settings):
        result = add_environment_info(None, "info", {})

        assert result["environment"] == "test"

    def test_drops_color_message(self):
        event_dict = {"event": "test", "color_message": "colored test"}

        result = drop_color_message_key(None, "info", event_dict)

        assert result == {"event": "test"}

    def test_no_color_message(self):
        assert drop_color_message_key(None, "info", {"event": "test"}) == {"event": "test"}


@pytest.mark.usefixtures("patched_settings", "restore_root_logger")
class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_sets_root_level(self):
        setup_logging(log_level="DEBUG")

        assert logging.getLogger().level == logging.DEBUG

    def test_quietens_sqlalchemy(self):
        setup_logging(log_level="DEBUG")

        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    def test_json_output(self):
        setup_logging(log_level="INFO", json_format=True)
        output = StringIO()
        logging.getLogger().handlers[0].setStream(output)

        get_logger("campushub.test").info("search_completed", query="数据库", total=3)

        data = json.loads(output.getvalue().strip().splitlines()[-1])
        assert data["event"] == "search_completed"
        assert data["query"] == "数据库"
        assert data["total"] == 3
        assert data["level"] == "info"
        assert data["logger"] == "campushub.test"
        assert data["environment"] == "test"
        assert "timestamp" in data

    def test_stdlib_records_rendered_as_json(self):
        setup_logging(log_level="INFO", json_format=True)
        output = StringIO()
        logging.getLogger().handlers[0].setStream(output)

        logging.getLogger("campushub.stdlib").warning("plain %s message", "stdlib")

        data = json.loads(output.getvalue().strip().splitlines()[-1])
        assert data["event"] == "plain stdlib message"
        assert data["level"] == "warning"

    def test_level_filtering(self):
        setup_logging(log_level="WARNING", json_format=True)
        output = StringIO()
        logging.getLogger().handlers[0].setStream(output)

        get_logger("campushub.test").info("suggestion_computed")

        assert output.getvalue() == ""


class TestContextVars:
    """Tests for context variable helpers."""

    def test_bind(self):
        clear_contextvars()
        bind_contextvars(request_id="abc", actor_id=7)

        assert structlog.contextvars.get_contextvars() == {"request_id": "abc", "actor_id": 7}

    def test_clear(self):
        bind_contextvars(request_id="abc")

        clear_contextvars()

        assert structlog.contextvars.get_contextvars() == {}


class TestLogHelpers:
    """Tests for logging helper functions."""

    @pytest.fixture
    def mock_logger(self):
        return MagicMock()

    @pytest.mark.parametrize(
        ("status_code", "level"),
        [(200, "info"), (400, "warning"), (404, "warning"), (503, "error")],
    )
    def test_log_request_end_level(self, mock_logger, status_code, level):
        log_request_end(mock_logger, "GET", "/v1/search", status_code, 12.345)

        method = getattr(mock_logger, level)
        method.assert_called_once()
        args, kwargs = method.call_args
        assert args[0] == "request_completed"
        assert kwargs["http_status"] == status_code
        assert kwargs["duration_ms"] == 12.35

    def test_log_exception(self, mock_logger):
        log_exception(mock_logger, ValueError("bad limit"), query="database")

        args, kwargs = mock_logger.exception.call_args
        assert args[0] == "exception_occurred"
        assert kwargs["error_type"] == "ValueError"
        assert kwargs["error_message"] == "bad limit"
        assert kwargs["query"] == "database"

    def test_log_database_query(self, mock_logger):
        log_database_query(mock_logger, "hybrid_search", "resources", 15.5, rows=10)

        args, kwargs = mock_logger.debug.call_args
        assert args[0] == "database_query"
        assert kwargs["query_type"] == "hybrid_search"
        assert kwargs["table"] == "resources"
        assert kwargs["rows"] == 10
