"""Structured logging configuration for metricline.

- JSON structured logging with StructuredFormatter
- Logger hierarchy under the metricline namespace
- Environment variable control (METRICLINE_LOG_LEVEL, METRICLINE_LOG_FORMAT)
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Optional

# Keys redacted from structured log context
SENSITIVE_KEYS = {
    "password", "token", "secret", "apikey", "api_key",
    "authorization", "credential", "auth", "bearer",
}

# Standard LogRecord attributes, never copied into context
_STANDARD_FIELDS = {
    "name",
    "msg",
    "args",
    "created",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "thread",
    "threadName",
    "exc_info",
    "exc_text",
    "stack_info",
    "taskName",
}

LOGGER_NAMESPACE = "metricline"

# StreamHandler installed by configure_logging(), reused on later calls
_handler: Optional[logging.Handler] = None


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter.

    Outputs logs in JSON format with:
    - timestamp: UTC ISO 8601 format with 'Z' suffix
    - level: Log level name (INFO, ERROR, etc.)
    - logger: Logger name (metricline hierarchy)
    - message: Log message
    - context: Extras dict merged from LogRecord attributes
    - exception: Formatted traceback, when the record carries exc_info

    Sensitive keys (password, token, api_key, etc.) are redacted.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: LogRecord to format

        Returns:
            JSON string with structured log data
        """
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extras = {
            k: ("[REDACTED]" if k.lower() in SENSITIVE_KEYS else v)
            for k, v in record.__dict__.items()
            if k not in _STANDARD_FIELDS and not k.startswith("_")
        }

        if extras:
            log_data["context"] = extras

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter for development.

    Used when METRICLINE_LOG_FORMAT=text for easier local debugging.
    """

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def configure_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Configure structured logging for all metricline loggers.

    Args:
        level: Optional log level override. If not provided, uses
               METRICLINE_LOG_LEVEL (default: INFO).
        log_format: Optional format override ("json" or "text"). If not
               provided, uses METRICLINE_LOG_FORMAT (default: json).

    Environment Variables:
        METRICLINE_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR). Default: INFO
        METRICLINE_LOG_FORMAT: Output format (json, text). Default: json
    """
    global _handler

    if level is None:
        level = os.getenv("METRICLINE_LOG_LEVEL", "INFO")

    log_level = getattr(logging, level.upper(), logging.INFO)

    if log_format is None:
        log_format = os.getenv("METRICLINE_LOG_FORMAT", "json")

    if log_format.lower() == "text":
        formatter = TextFormatter()
    else:
        formatter = StructuredFormatter()

    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(log_level)

    # Only our own handler is created and reformatted; handlers attached by
    # host applications or test harnesses keep their formatters.
    if _handler is None:
        _handler = logging.StreamHandler()
    if _handler not in logger.handlers:
        logger.addHandler(_handler)
    _handler.setFormatter(formatter)

    logger.propagate = False


def get_handler() -> Optional[logging.Handler]:
    """Return the handler installed by configure_logging(), if any."""
    return _handler
