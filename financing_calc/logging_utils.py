"""Structured logging for the financing calculator.

Every logger handed out by ``get_logger`` writes one JSON object per line to
stderr, so the tables and JSON the CLI prints on stdout stay clean. Callers
attach fields with ``extra={"context": {...}}``; ``Decimal`` amounts in the
context are written as strings to keep their exact digits.

The level comes from the ``FINANCING_CALC_LOG_LEVEL`` environment variable
(``INFO`` when unset).
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from decimal import Decimal

LOG_LEVEL_ENV = "FINANCING_CALC_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"


def _json_default(value):
    if isinstance(value, Decimal):
        return str(value)
    return repr(value)


class JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = getattr(record, "context", None)
        if isinstance(context, dict):
            payload["context"] = context
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=_json_default)


def log_level_from_env() -> str:
    level = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).strip().upper()
    return level if isinstance(logging.getLevelName(level), int) else DEFAULT_LOG_LEVEL


def get_logger(name: str) -> logging.Logger:
    """Return ``name``'s logger, attaching the JSON handler on first use."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JsonLogFormatter())
        logger.addHandler(handler)
        logger.setLevel(log_level_from_env())
        logger.propagate = False
    return logger
