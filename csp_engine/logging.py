"""Structured JSON or plain-text logging for simulation runs."""

from __future__ import annotations

import json
import logging
from typing import Any

from csp_engine.config import settings


class JSONFormatter(logging.Formatter):
    """Structured JSON log formatter with simulation context injection."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)

        # Include extra fields
        for key in ("schedule", "component", "hours", "time_s"):
            val = getattr(record, key, None)
            if val is not None:
                log_entry[key] = val

        return json.dumps(log_entry)


def setup_logging(json_format: bool | None = None, level: str | None = None) -> None:
    """Configure the root logger.

    Defaults come from :data:`csp_engine.config.settings`; use
    ``json_format=True`` when logs are shipped to a collector.
    """
    if json_format is None:
        json_format = settings.log_json
    root = logging.getLogger()
    root.setLevel((level or settings.log_level).upper())

    handler = logging.StreamHandler()
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    # Remove existing handlers to avoid duplicates
    root.handlers.clear()
    root.addHandler(handler)

    # Quiet noisy libraries
    logging.getLogger("numpy").setLevel(logging.WARNING)
