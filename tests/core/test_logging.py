from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator

import pytest

from app.core.logging import _ContainerFormatter, _JsonFormatter, setup_logging


@pytest.fixture(autouse=True)
def restore_logging() -> Iterator[None]:
    yield
    setup_logging("info")


def _record(level: int = logging.INFO, msg: str = "hello", lineno: int = 1) -> logging.LogRecord:
    return logging.LogRecord(
        name="app.api.token",
        level=level,
        pathname="token.py",
        lineno=lineno,
        msg=msg,
        args=(),
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


def test_setup_logging_keeps_httpx_quiet_at_debug() -> None:
    setup_logging("debug")
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("uvicorn").level == logging.WARNING


def test_setup_logging_allows_third_party_at_error() -> None:
    setup_logging("error")
    assert logging.getLogger("httpx").level == logging.ERROR


def test_setup_logging_json_installs_json_formatter() -> None:
    setup_logging("info", json_format=True)
    handlers = logging.getLogger().handlers
    assert len(handlers) == 1
    assert isinstance(handlers[0].formatter, _JsonFormatter)


# ---- _ContainerFormatter ----


def test_container_formatter_excludes_location_for_info() -> None:
    output = _ContainerFormatter().format(_record())
    assert "hello" in output
    assert "app.api.token" in output
    assert "[token.py:" not in output


def test_container_formatter_includes_location_for_warning() -> None:
    output = _ContainerFormatter().format(
        _record(logging.WARNING, "callback rejected", lineno=42)
    )
    assert "callback rejected" in output
    assert "[token.py:42]" in output


def test_container_formatter_resets_format_after_warning() -> None:
    fmt = _ContainerFormatter()
    fmt.format(_record(logging.WARNING))
    assert "[token.py:" not in fmt.format(_record(logging.INFO))


# ---- _JsonFormatter ----


def test_json_formatter_produces_valid_json() -> None:
    parsed = json.loads(_JsonFormatter().format(_record(msg="state issued")))
    assert parsed["level"] == "INFO"
    assert parsed["logger"] == "app.api.token"
    assert parsed["message"] == "state issued"
    assert "timestamp" in parsed


def test_json_formatter_includes_context_and_outcome_fields() -> None:
    record = _record(logging.WARNING, "token exchange failed")
    record.request_id = "abc-123"  # type: ignore[attr-defined]
    record.path = "/api/token/new"  # type: ignore[attr-defined]
    record.outcome = "upstream_error"  # type: ignore[attr-defined]
    record.provider_status = 503  # type: ignore[attr-defined]

    parsed = json.loads(_JsonFormatter().format(record))
    assert parsed["request_id"] == "abc-123"
    assert parsed["path"] == "/api/token/new"
    assert parsed["outcome"] == "upstream_error"
    assert parsed["provider_status"] == 503
    assert "method" not in parsed


def test_json_formatter_includes_exception_info() -> None:
    try:
        raise ValueError("test error")
    except ValueError:
        record = _record(logging.ERROR, "failed")
        record.exc_info = sys.exc_info()
        output = _JsonFormatter().format(record)

    parsed = json.loads(output)
    assert "ValueError: test error" in parsed["exception"]
