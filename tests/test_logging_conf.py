"""Tests for the JSON log formatter."""

import json
import logging
import sys

from faststatus.domain.status import Status
from faststatus.logging_conf import JsonFormatter, get_logger


def _record(msg, extra=None, exc_info=None):
    logger = logging.getLogger("faststatus.test")
    return logger.makeRecord(
        logger.name, logging.INFO, __file__, 1, msg, None, exc_info, extra=extra
    )


def test_plain_message_with_extras():
    line = JsonFormatter().format(
        _record("resource.put", extra={"event": "resource_put", "status": Status.BUSY})
    )
    payload = json.loads(line)
    assert payload["message"] == "resource.put"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "faststatus.test"
    assert payload["event"] == "resource_put"
    assert payload["status"] == 1
    assert "lineno" not in payload


def test_dict_message_is_merged():
    payload = json.loads(JsonFormatter().format(_record({"event": "summary", "created": 3})))
    assert payload["event"] == "summary"
    assert payload["created"] == 3
    assert "message" not in payload


def test_exception_is_attached():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = _record("failed", exc_info=sys.exc_info())
    payload = json.loads(JsonFormatter().format(record))
    assert "RuntimeError: boom" in payload["exc_info"]


def test_get_logger_namespacing():
    assert get_logger("api").name == "faststatus.api"
    assert get_logger("faststatus.store.kv").name == "faststatus.store.kv"
    assert get_logger("runner.client").name == "runner.client"
    assert get_logger().name == "faststatus"
