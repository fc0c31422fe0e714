"""Structured JSON logging on top of the standard library."""
from __future__ import annotations

import json
import logging
import sys
from typing import Any

ROOT_LOGGER = "functions"


def log_event(logger: logging.Logger, event: str, **fields: Any) -> None:
    """Emit one INFO record named ``event`` carrying ``fields``."""
    logger.info(event, extra={"fields": fields})


class JsonFormatter(logging.Formatter):
    """Render each record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "severity": record.levelname,
            "event": record.getMessage(),
        }
        entry.update(getattr(record, "fields", None) or {})
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(level: str = "INFO") -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    # Repeated app construction must not stack handlers.
    if not any(isinstance(h.formatter, JsonFormatter) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)
    return logger
