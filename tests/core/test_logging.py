from __future__ import annotations

import json
import logging
import sys

from app.core.logging import (
    RequestContextFilter,
    _ContainerFormatter,
    _JsonFormatter,
    request_id_var,
    setup_logging,
)


def _record(
    level: int = logging.INFO, msg: str = "hello", args: tuple = ()
) -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=level,
        pathname="svc.py",
        lineno=99,
        msg=msg,
        args=args,
        exc_info=None,
    )


# ---- setup_logging ----


def test_setup_logging_sets_root_level() -> None:
    setup_logging("debug")
    assert logging.getLogger().level == logging.DEBUG

    setup_logging("warning")
    assert logging.getLogger().level == logging.WARNING


def test_setup_logging_defaults_to_info_for_unknown_level() -> None:
    setup_logging("nonexistent")
    assert logging.getLogger().level == logging.INFO


def test_setup_logging_quiets_third_party_at_debug() -> None:
    setup_logging("debug")
    assert logging.getLogger("uvicorn").level == logging.WARNING
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


def test_setup_logging_installs_single_handler_with_request_filter() -> None:
    setup_logging("info", json_format=True)
    setup_logging("info", json_format=True)
    handlers = logging.getLogger().handlers
    assert len(handlers) == 1
    assert isinstance(handlers[0].formatter, _JsonFormatter)
    assert any(isinstance(f, RequestContextFilter) for f in handlers[0].filters)
    setup_logging("info")


# ---- container formatter ----


def test_formatter_excludes_location_for_info() -> None:
    output = _ContainerFormatter().format(_record())
    assert "hello" in output
    assert "[svc.py:" not in output


def test_formatter_includes_location_for_warning() -> None:
    output = _ContainerFormatter().format(_record(logging.WARNING, "bad thing"))
    assert "bad thing" in output
    assert "[svc.py:99]" in output


def test_formatter_shows_current_request_id() -> None:
    token = request_id_var.set("req-42")
    try:
        output = _ContainerFormatter().format(_record())
    finally:
        request_id_var.reset(token)
    assert "[req-42]" in output


# ---- JSON formatter ----


def test_json_formatter_produces_valid_json() -> None:
    record = _record(msg="Hello %s", args=("world",))
    parsed = json.loads(_JsonFormatter().format(record))
    assert parsed["level"] == "INFO"
    assert parsed["logger"] == "test"
    assert parsed["message"] == "Hello world"
    assert "timestamp" in parsed


def test_json_formatter_includes_request_fields() -> None:
    record = _record()
    record.request_id = "abc-123"  # type: ignore[attr-defined]
    record.path = "/api/progress"  # type: ignore[attr-defined]
    record.duration_ms = 12.5  # type: ignore[attr-defined]

    parsed = json.loads(_JsonFormatter().format(record))
    assert parsed["request_id"] == "abc-123"
    assert parsed["path"] == "/api/progress"
    assert parsed["duration_ms"] == 12.5
    assert "method" not in parsed


def test_json_formatter_includes_exception() -> None:
    try:
        raise ValueError("certificate insert failed")
    except ValueError:
        record = _record(logging.ERROR, "Something failed")
        record.exc_info = sys.exc_info()

    parsed = json.loads(_JsonFormatter().format(record))
    assert "ValueError: certificate insert failed" in parsed["exception"]


def test_request_filter_stamps_context_id() -> None:
    token = request_id_var.set("ctx-id")
    try:
        record = _record()
        assert RequestContextFilter().filter(record) is True
    finally:
        request_id_var.reset(token)
    assert record.request_id == "ctx-id"  # type: ignore[attr-defined]
