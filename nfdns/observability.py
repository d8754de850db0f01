"""Logging configuration (formatter + dictConfig builder)."""

from __future__ import annotations

import json
import logging
from logging.config import dictConfig
from typing import Any


def _compact_json(value: Any, *, limit: int = 512) -> str:
    encoded = json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)
    if len(encoded) <= limit:
        return encoded
    return encoded[:limit] + "... (truncated)"


class ExtrasFormatter(logging.Formatter):
    """Append structured `data` payloads when present."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        data = record.__dict__.get("data")
        if data:
            message = f"{message} | data={_compact_json(data)}"
        return message


def build_logging_config(level: str = "WARNING") -> dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "extras": {
                "()": ExtrasFormatter,
                "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
            },
        },
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "formatter": "extras",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            "nfdns": {"level": level.upper(), "handlers": ["stderr"], "propagate": False},
        },
    }


def configure_logging(level: str = "WARNING") -> None:
    dictConfig(build_logging_config(level))
