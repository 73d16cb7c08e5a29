"""Logging configuration for the status service and the smoke runner.

Every record becomes one JSON object per line on stdout. setup_logging() is
idempotent: calling it again never duplicates handlers.
"""
from __future__ import annotations

import json
import logging
import os
import sys
from datetime import UTC, datetime
from logging import Handler, LogRecord
from typing import Any

_DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime", "taskName"}


class JsonFormatter(logging.Formatter):
    """Render records as JSON lines.

    Core keys are ``ts``, ``level``, ``logger`` and ``message``. Structured
    fields passed via ``extra={...}`` are merged in without overwriting them.
    """

    def format(self, record: LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
        }

        if isinstance(record.msg, dict):
            payload.update(record.msg)
        else:
            payload["message"] = record.getMessage()

        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS or key in payload:
                continue
            payload[key] = value

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        # Resource ids, datetimes and the like fall back to str().
        return json.dumps(payload, ensure_ascii=False, default=str)


def _make_stream_handler(level: int) -> Handler:
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(JsonFormatter())
    return handler


def _coerce_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def setup_logging(level: str | int = _DEFAULT_LEVEL) -> None:
    """Configure root and uvicorn loggers for JSON output.

    Only attaches a handler if the root logger has none yet (reload, tests).
    """
    root = logging.getLogger()
    if root.handlers:
        return

    lvl = _coerce_level(level)
    root.setLevel(lvl)
    root.addHandler(_make_stream_handler(lvl))

    # uvicorn installs its own handlers; route them through root instead.
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        lg = logging.getLogger(name)
        lg.setLevel(lvl)
        lg.propagate = True
        for h in list(lg.handlers):
            lg.removeHandler(h)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the ``faststatus`` namespace.

    Usage: logger = get_logger("api")  ->  "faststatus.api"
    """
    if not name:
        return logging.getLogger("faststatus")
    if name == "faststatus" or name.startswith(("faststatus.", "runner")):
        return logging.getLogger(name)
    return logging.getLogger(f"faststatus.{name}")
