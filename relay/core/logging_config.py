"""Structured logging configuration.

Logs are emitted as one JSON object per line so the relay can be shipped to a
log aggregator as-is. Plain text output is available for local development.
"""

import json
import logging
import sys
from datetime import datetime, timezone

APP_NAME = "document-ai-relay"

# Context keys copied from logger.info(..., extra={...}) into the JSON record
EXTRA_KEYS = (
    "trace_id",
    "result_id",
    "status",
    "service",
    "http_status",
    "duration_ms",
    "payload_bytes",
    "stored",
    "capacity",
    "document_id",
    "document_type",
    "file_name",
)

NOISY_LOGGERS = ("httpx", "httpcore", "asyncio", "multipart")

TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class StructuredFormatter(logging.Formatter):
    """Render a LogRecord as a single JSON line.

    Only whitelisted `extra` keys are copied; unset keys are left out rather
    than written as null.

    Example:
        >>> logger.info("Result stored", extra={"result_id": "res_1", "stored": 3})
        {"timestamp": "2025-12-05T17:52:00.123Z", "level": "INFO", "app": "document-ai-relay",
         "logger": "api.routes.webhook", "message": "Result stored", "result_id": "res_1", ...}
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "app": APP_NAME,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        entry.update(
            {key: getattr(record, key) for key in EXTRA_KEYS if hasattr(record, key)}
        )

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, _ = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(entry, ensure_ascii=False, default=str)


def configure_structured_logging(level: str = "INFO", json_format: bool = True) -> None:
    """Install a single stdout handler on the root logger.

    Args:
        level: Root level name, e.g. "DEBUG" or "INFO"
        json_format: JSON lines when True, human-readable text otherwise
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        StructuredFormatter() if json_format else logging.Formatter(TEXT_FORMAT)
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
