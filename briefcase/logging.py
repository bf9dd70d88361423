from __future__ import annotations

import json
import logging
import os


class JsonFormatter(logging.Formatter):
    """Very small JSON formatter for structured logs."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - short
        payload = {
            "level": record.levelname.lower(),
            "message": record.getMessage(),
            "event_type": getattr(record, "event_type", record.getMessage()),
            "backend": getattr(record, "backend", None),
            "entry": getattr(record, "entry", None),
            "location": getattr(record, "location", None),
        }
        return json.dumps(payload, default=str)


def configure_logging(level: str | int | None = None) -> None:
    """Configure logging on stderr.

    Defaults to ``WARNING`` so that ``get`` output on stdout is never mixed
    with diagnostics. ``LOG_LEVEL`` overrides the level and ``LOG_FORMAT=json``
    switches to structured JSON lines.
    """

    if level is None:
        level = os.getenv("LOG_LEVEL", "WARNING").upper()

    fmt = os.getenv("LOG_FORMAT", "plain").lower()
    if fmt == "json":
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        logging.basicConfig(level=level, handlers=[handler], force=True)
    else:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%H:%M:%S",
            force=True,
        )
