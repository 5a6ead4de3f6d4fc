from __future__ import annotations

import json
import logging
from datetime import date, datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

LOG_FILE_NAME = "tasks.jsonl"

# Attributes every LogRecord has; anything else came in through `extra=`.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def _default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        # structured extras (we always log with `extra={...}`)
        for k, v in record.__dict__.items():
            if k not in _RECORD_ATTRS:
                payload[k] = v

        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=_default)


def setup_logging(level: str = "INFO", log_dir: Optional[str] = None) -> Optional[Path]:
    """Route the root logger to JSON lines on stderr and, if log_dir is set, a rotating file.

    Returns the log file path, or None when logging to the console only.
    """
    level = level.upper()
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()  # avoids duplicate handlers during reload

    fmt = JsonFormatter()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(fmt)
    root.addHandler(console)

    log_path = None
    if log_dir:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        log_path = directory / LOG_FILE_NAME
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=10_000_000,  # 10MB
            backupCount=10,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(fmt)
        root.addHandler(file_handler)

    # Silence uvicorn access logs; we do our own in middleware
    logging.getLogger("uvicorn.access").setLevel(logging.CRITICAL)
    logging.getLogger("uvicorn.error").setLevel(level)
    return log_path
