"""Logging configuration for the OAuth bridge.

Two output modes, picked by LOG_JSON:

  _ContainerFormatter: one human-readable line per record, for a dev
    terminal.  Records at WARNING and above carry [file:line] so a
    rejected callback can be traced to the guard that rejected it.

  _JsonFormatter: JSON Lines for log aggregation.  Request context
    (request_id, method, path, status_code, duration_ms) and the
    exchange outcome are lifted to top-level keys.

What never reaches a log line: access tokens, authorization codes,
state values and the client secret.  Handlers log outcomes and
provider error names only.

WHERE CONTEXT FIELDS COME FROM
--------------------------------
Nothing in this module reads request state.  RequestContextMiddleware
passes request_id, method, path, status_code and duration_ms as
``extra=`` on its completion line; the token handlers pass ``outcome``
("issued", "rejected", "upstream_error") and the token exchange passes
the provider's HTTP status as ``provider_status``.  A record without a
field simply omits that key in JSON output.
"""

from __future__ import annotations

import json
import logging
import sys

_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"


class _ContainerFormatter(logging.Formatter):
    """Single-line formatter tuned for container stdout.

    - Always: ISO-8601 timestamp with milliseconds, level, logger, message
    - WARNING+: appends [filename:lineno] so a 401 or 502 can be traced
      to the branch that produced it
    - Exceptions: stack trace appended when the record carries exc_info
    """

    _BASE_FMT = "%(asctime)s %(levelname)-8s %(name)s  %(message)s"
    _LOC_SUFFIX = "  [%(filename)s:%(lineno)d]"

    def __init__(self) -> None:
        super().__init__(datefmt=_DATEFMT)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        base = super().formatTime(record, datefmt)
        # Millisecond precision, placed before the +0000 offset.
        return f"{base[:-5]}.{int(record.msecs):03d}{base[-5:]}"

    def format(self, record: logging.LogRecord) -> str:
        fmt = self._BASE_FMT
        if record.levelno >= logging.WARNING:
            fmt += self._LOC_SUFFIX
        self._style._fmt = fmt
        return super().format(record)


class _JsonFormatter(logging.Formatter):
    """JSON Lines formatter: one object per record, one record per line.

    Base keys are timestamp, level, logger and message.  Any of
    _CONTEXT_FIELDS present on the record becomes a top-level key, so an
    aggregator can filter on ``outcome == "upstream_error"`` without
    parsing message text.  Exception info, when present, is rendered
    into an "exception" key.
    """

    _CONTEXT_FIELDS = (
        "request_id",
        "method",
        "path",
        "status_code",
        "duration_ms",
        "outcome",
        "provider_status",
    )

    def __init__(self) -> None:
        super().__init__(datefmt=_DATEFMT)

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in self._CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = value

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def setup_logging(level_name: str, *, json_format: bool = False) -> None:
    """Point the root logger at stdout with the chosen formatter.

    Unknown level names fall back to INFO.  uvicorn and the httpx stack
    never log below WARNING: httpx at DEBUG would print request lines
    for the token endpoint call.
    """
    level = getattr(logging, level_name.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_JsonFormatter() if json_format else _ContainerFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in ("uvicorn", "uvicorn.access", "uvicorn.error", "httpcore", "httpx"):
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
