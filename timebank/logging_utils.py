from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Context keys the balance engine attaches through ``extra=``, emitted in this
# order right after the base fields. Other extras follow sorted by name.
CONTEXT_FIELDS = (
    "request_id",
    "employee_id",
    "period_type",
    "period_key",
    "prior_period_key",
    "range_start",
    "range_end",
)

_STANDARD_RECORD_FIELDS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per line: ts, level, logger, message, then context."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_RECORD_FIELDS and not key.startswith("_")
        }
        for key in CONTEXT_FIELDS:
            if key in extras:
                payload[key] = extras.pop(key)
        for key in sorted(extras):
            payload[key] = extras[key]

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str, ensure_ascii=True)


def resolve_log_level(level: str | int) -> int:
    """Map ``"debug"``, ``" WARNING "`` or ``10`` to a level; unknown names give INFO."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_json_logging(level: str | int = logging.INFO) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(resolve_log_level(level))
