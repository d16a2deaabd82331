import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

from checkup_assistant.config.settings import settings


REDACTED_LENGTH = 64


def _redact(text: str) -> str:
    return text[:REDACTED_LENGTH] if settings.log_redact_content else text


class JsonLineFormatter(logging.Formatter):
    """每条日志一行 JSON；通过 extra={"extra": {...}} 传入的字段平铺到顶层。"""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: Dict[str, Any] = {
            "ts": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": _redact(record.getMessage() or ""),
        }
        fields = record.__dict__.get("extra")
        if isinstance(fields, dict):
            entry.update(fields)
        if record.exc_info:
            entry["exc"] = _redact(self.formatException(record.exc_info))
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logger() -> logging.Logger:
    logger = logging.getLogger("checkup_assistant")
    logger.setLevel(logging.INFO)
    if any(isinstance(h.formatter, JsonLineFormatter) for h in logger.handlers):
        return logger
    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_dir / "assistant.log", encoding="utf-8")
    handler.setLevel(logging.INFO)
    handler.setFormatter(JsonLineFormatter())
    logger.addHandler(handler)
    return logger


logger = setup_logger()
