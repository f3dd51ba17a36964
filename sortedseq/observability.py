from __future__ import annotations

import json
import logging

from .config import get_settings


class Counter:
    """Minimal Prometheus-style counter."""

    def __init__(self, name: str, documentation: str):
        self.name = name
        self.documentation = documentation
        self.value = 0.0

    def inc(self, amount: float = 1.0) -> None:
        self.value += amount

    def render(self) -> str:
        return (
            f"# HELP {self.name} {self.documentation}\n"
            f"# TYPE {self.name} counter\n"
            f"{self.name} {self.value}\n"
        )


_RESERVED_ATTRS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "message",
}


class JSONFormatter(logging.Formatter):
    """Render log records as one JSON object per line, including ``extra`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        data = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                data[key] = value
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, default=repr)


PACKAGE_LOGGER = "sortedseq"

logger = logging.getLogger(f"{PACKAGE_LOGGER}.observability")


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach a JSON handler to the package logger.

    Calling it again only updates the level. The root logger is left alone.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level or get_settings().log_level)
    if not any(
        isinstance(h.formatter, JSONFormatter) for h in package_logger.handlers
    ):
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        package_logger.addHandler(handler)
    return package_logger


# Counters
STORAGE_GROW_COUNTER = Counter(
    "sortedseq_storage_grows_total", "Number of backing storage reallocations"
)
STORAGE_SHRINK_COUNTER = Counter(
    "sortedseq_storage_shrinks_total", "Number of backing storage shrinks"
)

COUNTERS = [
    STORAGE_GROW_COUNTER,
    STORAGE_SHRINK_COUNTER,
]


def _check_threshold(name: str, value: float, threshold: int) -> None:
    if threshold and value >= threshold:
        logger.warning(f"{name} threshold {threshold} reached")


def inc_storage_grow(threshold: int | None = None) -> None:
    STORAGE_GROW_COUNTER.inc()
    if threshold is None:
        threshold = get_settings().growth_alert_threshold
    _check_threshold(
        STORAGE_GROW_COUNTER.name, STORAGE_GROW_COUNTER.value, threshold
    )


def inc_storage_shrink() -> None:
    STORAGE_SHRINK_COUNTER.inc()


def generate_metrics() -> bytes:
    return "".join(counter.render() for counter in COUNTERS).encode()


__all__ = [
    "JSONFormatter",
    "configure_logging",
    "inc_storage_grow",
    "inc_storage_shrink",
    "generate_metrics",
    "logger",
]
