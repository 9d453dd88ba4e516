"""Tests for QueryKit logging helpers."""

import json
import logging
from collections.abc import Generator
from unittest.mock import Mock

import pytest

from querykit import Connection, SelectQuery
from querykit.utils.logging import (
    CorrelationIDFilter,
    StructuredFormatter,
    configure_logging,
    get_correlation_id,
    get_logger,
    set_correlation_id,
)


@pytest.fixture
def clean_correlation_id() -> Generator[None, None, None]:
    set_correlation_id(None)
    yield
    set_correlation_id(None)


@pytest.fixture
def restore_root_logger() -> Generator[logging.Logger, None, None]:
    root = logging.getLogger("querykit")
    handlers, level, propagate = list(root.handlers), root.level, root.propagate
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
    root.propagate = propagate


def test_get_logger_uses_namespace() -> None:
    assert get_logger().name == "querykit"
    assert get_logger("builder").name == "querykit.builder"
    assert get_logger("querykit.driver").name == "querykit.driver"


def test_get_logger_adds_single_correlation_filter() -> None:
    logger = get_logger("tests.filters")
    get_logger("tests.filters")
    assert sum(isinstance(f, CorrelationIDFilter) for f in logger.filters) == 1


def test_correlation_id_roundtrip(clean_correlation_id: None) -> None:
    assert get_correlation_id() is None
    set_correlation_id("req-1")
    assert get_correlation_id() == "req-1"


def test_structured_formatter_outputs_json(clean_correlation_id: None) -> None:
    set_correlation_id("req-42")
    record = logging.LogRecord("querykit.test", logging.INFO, __file__, 10, "rendered %s", ("SELECT",), None)
    record.extra_fields = {"bindings": 2}
    payload = json.loads(StructuredFormatter().format(record))
    assert payload["message"] == "rendered SELECT"
    assert payload["level"] == "INFO"
    assert payload["correlation_id"] == "req-42"
    assert payload["bindings"] == 2


def test_correlation_filter_sets_attribute(clean_correlation_id: None) -> None:
    set_correlation_id("req-7")
    record = logging.LogRecord("querykit.test", logging.INFO, __file__, 1, "msg", (), None)
    assert CorrelationIDFilter().filter(record)
    assert record.correlation_id == "req-7"


def test_configure_logging_installs_handler(restore_root_logger: logging.Logger) -> None:
    extra = logging.NullHandler()
    configure_logging(level="debug", format_style="plain", extra_handlers=[extra])
    assert restore_root_logger.level == logging.DEBUG
    assert extra in restore_root_logger.handlers
    assert restore_root_logger.propagate is False


def test_render_logs_statement_kind_and_binding_count(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="querykit")
    SelectQuery("users").where("age", ">", 18).render()
    assert "Rendered SELECT statement with 1 bindings" in caplog.text


def test_rollback_is_logged_as_warning(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="querykit")
    db = Connection(Mock())
    with pytest.raises(KeyError), db.transaction():
        raise KeyError("missing")
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "KeyError" in warnings[0].getMessage()


def test_render_record_carries_structured_fields(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="querykit")
    SelectQuery("users").where("age", ">", 18).where_in("country", ["US", "CA"]).render()
    (record,) = [r for r in caplog.records if r.getMessage().startswith("Rendered")]
    assert record.extra_fields == {"statement_kind": "SELECT", "binding_count": 3}
    payload = json.loads(StructuredFormatter().format(record))
    assert payload["statement_kind"] == "SELECT"
    assert payload["binding_count"] == 3


def test_connection_records_carry_structured_fields(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="querykit")
    executor = Mock()
    executor.execute.return_value = []
    db = Connection(executor)
    with pytest.raises(KeyError), db.transaction():
        db.raw("SELECT * FROM users WHERE id = ?", 1)
        raise KeyError("missing")
    executed = [r for r in caplog.records if r.getMessage().startswith("Executing")]
    assert executed[0].extra_fields == {"binding_count": 1}
    (warning,) = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert json.loads(StructuredFormatter().format(warning))["error_type"] == "KeyError"
