"""Tests for logging configuration and formatters."""

import io
import json
import logging

import pytest

from repricer.logging import ComponentLoggerAdapter, get_logger
from repricer.logging.config import (
    ContextualFilter,
    JSONFormatter,
    KeyValueFormatter,
    configure_logging,
)
from repricer.logging.context import log_context


def _record(message="Test message", extra=None):
    return logging.getLogger("test").makeRecord(
        "test", logging.INFO, "test.py", 1, message, (), None, extra=extra
    )


def _key_value_formatter():
    return KeyValueFormatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_mandatory_fields(self):
        """Test that output is JSON with timestamp, level and message."""
        log_obj = json.loads(JSONFormatter().format(_record()))

        assert log_obj["level"] == "INFO"
        assert log_obj["message"] == "Test message"
        assert log_obj["timestamp"].endswith("Z")
        # 2025-11-04T10:30:00.123Z
        assert len(log_obj["timestamp"]) == 24

    def test_extra_fields(self):
        """Test that extra fields are included with their JSON types."""
        record = _record(extra={"event": "pricing.node.adjusted", "amount_count": 2, "ok": True})
        log_obj = json.loads(JSONFormatter().format(record))

        assert log_obj["event"] == "pricing.node.adjusted"
        assert log_obj["amount_count"] == 2
        assert log_obj["ok"] is True

    def test_non_json_values_stringified(self):
        """Test that arbitrary objects are rendered with str()."""
        from decimal import Decimal

        record = _record(extra={"delta": Decimal("-2.46")})
        log_obj = json.loads(JSONFormatter().format(record))

        assert log_obj["delta"] == "-2.46"

    def test_standard_attributes_not_duplicated(self):
        """Test that LogRecord internals are not emitted as fields."""
        log_obj = json.loads(JSONFormatter().format(_record(extra={"event": "x"})))

        assert "name" not in log_obj
        assert "lineno" not in log_obj
        assert log_obj["event"] == "x"

    def test_exception_info(self):
        """Test that exception tracebacks are included."""
        try:
            raise ValueError("boom")
        except ValueError:
            import sys

            record = logging.getLogger("test").makeRecord(
                "test", logging.ERROR, "test.py", 1, "failed", (), sys.exc_info()
            )

        log_obj = json.loads(JSONFormatter().format(record))
        assert "ValueError: boom" in log_obj["exc_info"]


class TestKeyValueFormatter:
    """Tests for KeyValueFormatter."""

    def test_basic(self):
        """Test readable base line."""
        output = _key_value_formatter().format(_record())

        assert "[INFO]" in output
        assert "test: Test message" in output

    def test_extras_as_pairs(self):
        """Test that extras are rendered as sorted key=value pairs."""
        record = _record(extra={"event": "locator.scan.completed", "limit": None, "ok": False})
        output = _key_value_formatter().format(record)

        assert output.endswith("event=locator.scan.completed limit=null ok=false")

    def test_values_with_spaces_quoted(self):
        """Test quoting of values that contain spaces."""
        output = _key_value_formatter().format(_record(extra={"adjustment": "a b"}))
        assert 'adjustment="a b"' in output

    def test_static_fields_hidden(self):
        """Test that service and environment are left out of key-value lines."""
        record = _record()
        ContextualFilter(service="repricer", environment="test").filter(record)
        output = _key_value_formatter().format(record)

        assert "service=" not in output
        assert "environment=" not in output


class TestContextualFilter:
    """Tests for ContextualFilter."""

    def test_static_fields(self):
        """Test that service and environment are stamped on the record."""
        record = _record()
        assert ContextualFilter(service="svc", environment="test").filter(record) is True

        assert record.service == "svc"
        assert record.environment == "test"

    def test_context_fields(self):
        """Test that active log context is merged into the record."""
        with log_context(run_id="abc123", node_index=4):
            record = _record()
            ContextualFilter().filter(record)

        assert record.run_id == "abc123"
        assert record.node_index == 4

    def test_explicit_extra_wins_over_context(self):
        """Test that a field passed via extra is not overwritten by context."""
        with log_context(node_index=4):
            record = _record(extra={"node_index": 7})
            ContextualFilter().filter(record)

        assert record.node_index == 7

    def test_full_json_line(self):
        """Test context + filter + JSON formatter together."""
        with log_context(run_id="abc123"):
            record = _record("Node adjusted", extra={"event": "pricing.node.adjusted"})
            ContextualFilter(environment="test").filter(record)
            log_obj = json.loads(JSONFormatter().format(record))

        assert log_obj["service"] == "repricer"
        assert log_obj["environment"] == "test"
        assert log_obj["run_id"] == "abc123"
        assert log_obj["event"] == "pricing.node.adjusted"


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_invalid_level(self):
        """Test that an unknown level is rejected."""
        with pytest.raises(ValueError, match="Invalid log level"):
            configure_logging(level="INVALID")

    def test_invalid_format(self):
        """Test that an unknown format is rejected."""
        with pytest.raises(ValueError, match="Invalid log format"):
            configure_logging(format_type="invalid")

    @pytest.mark.parametrize(
        "format_type,formatter_class",
        [("json", JSONFormatter), ("key-value", KeyValueFormatter)],
    )
    def test_installs_single_handler(self, format_type, formatter_class):
        """Test that exactly one handler with the right formatter is installed."""
        configure_logging(level="DEBUG", format_type=format_type, environment="test")
        configure_logging(level="DEBUG", format_type=format_type, environment="test")

        root_logger = logging.getLogger()
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, formatter_class)
        assert root_logger.level == logging.DEBUG

    def test_custom_stream(self):
        """Test that logs can be routed to a given stream."""
        stream = io.StringIO()
        configure_logging(level="INFO", format_type="json", stream=stream)

        get_logger("repricer.test", component="cli").info("hello", extra={"event": "t.e"})

        log_obj = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert log_obj["message"] == "hello"
        assert log_obj["component"] == "cli"
        assert log_obj["event"] == "t.e"


class TestGetLogger:
    """Tests for get_logger."""

    def test_plain_logger(self):
        """Test that no component gives a plain logger."""
        assert isinstance(get_logger("repricer.x"), logging.Logger)

    def test_component_adapter_merges_extra(self):
        """Test that the component tag is merged with call extras."""
        adapter = get_logger("repricer.x", component="locator")
        assert isinstance(adapter, ComponentLoggerAdapter)

        _, kwargs = adapter.process("msg", {"extra": {"event": "e"}})
        assert kwargs["extra"] == {"component": "locator", "event": "e"}
