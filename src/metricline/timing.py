"""Timing utilities for structured logging and scan metrics.

Uses time.perf_counter() for sub-millisecond precision.
"""

import logging
import time
from contextlib import contextmanager
from typing import Optional

from prometheus_client import Histogram


@contextmanager
def timed_operation(
    operation: str,
    logger: logging.Logger,
    level: int = logging.INFO,
    extra: Optional[dict] = None,
    histogram: Optional[Histogram] = None,
    interrupt_on: tuple[type[BaseException], ...] = (),
):
    """Context manager for timing operations with structured logging.

    Outcomes, each logged with duration_ms and status:
    - success: "{operation}_completed" at `level`
    - interrupted: "{operation}_interrupted" at INFO when the block raises
      one of `interrupt_on`. The exception is re-raised.
    - failed: "{operation}_failed" at ERROR with error details for any
      other exception. The exception is re-raised.

    Args:
        operation: Operation name used as the log message prefix
        logger: Logger instance to use for logging
        level: Log level for success case (default: INFO)
        extra: Optional dict of extra context to include in log.
            The caller may keep mutating it inside the block; the final
            contents are logged.
        histogram: Optional Histogram observed with the duration in seconds,
            whatever the outcome
        interrupt_on: Exception types that stop the operation without
            counting as a failure of the operation itself

    Example:
        >>> logger = logging.getLogger("metricline.cli")
        >>> with timed_operation("scan_document", logger, extra={"path": "m.prom"}):
        ...     pass

    Logs on success:
        {"timestamp": "...", "level": "INFO", "message": "scan_document_completed",
         "context": {"path": "m.prom", "duration_ms": 1.23, "status": "success"}}
    """
    start = time.perf_counter()
    _extra = extra if extra is not None else {}

    def _elapsed() -> float:
        elapsed = time.perf_counter() - start
        if histogram is not None:
            histogram.observe(elapsed)
        return round(elapsed * 1000, 2)

    try:
        yield
    except interrupt_on as e:
        logger.info(
            f"{operation}_interrupted",
            extra={
                **_extra,
                "duration_ms": _elapsed(),
                "status": "interrupted",
                "reason": type(e).__name__,
            },
        )
        raise
    except Exception as e:
        logger.error(
            f"{operation}_failed",
            extra={
                **_extra,
                "duration_ms": _elapsed(),
                "status": "failed",
                "error": str(e),
                "error_type": type(e).__name__,
            },
        )
        raise
    else:
        logger.log(
            level,
            f"{operation}_completed",
            extra={**_extra, "duration_ms": _elapsed(), "status": "success"},
        )
