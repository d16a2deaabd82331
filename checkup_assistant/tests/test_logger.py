import json
import logging
import sys

from checkup_assistant.infrastructure.logging.logger import JsonLineFormatter, logger


def _record(msg, exc_info=None, **fields):
    record = logging.LogRecord("checkup_assistant", logging.ERROR, __file__, 1, msg, None, exc_info)
    if fields:
        record.extra = fields
    return record


def test_formatter_flattens_extra_fields():
    line = JsonLineFormatter().format(_record("Reply resolved", mode="demo", degraded=False))
    entry = json.loads(line)
    assert entry["msg"] == "Reply resolved"
    assert entry["level"] == "ERROR"
    assert entry["mode"] == "demo"
    assert entry["degraded"] is False
    assert entry["ts"].endswith("Z")


def test_formatter_includes_exception_text():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        exc_info = sys.exc_info()
    entry = json.loads(JsonLineFormatter().format(_record("failed", exc_info=exc_info)))
    assert "RuntimeError" in entry["exc"]


def test_logger_has_single_json_handler():
    handlers = [h for h in logger.handlers if isinstance(h.formatter, JsonLineFormatter)]
    assert len(handlers) == 1
