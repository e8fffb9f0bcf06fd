"""Structured logging utilities."""

import logging
import sys
from typing import Any, TextIO


class StructuredFormatter(logging.Formatter):
    """Formatter that appends context fields as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        extra = ""
        if hasattr(record, "extra_fields"):
            fields = getattr(record, "extra_fields")
            if fields:
                extra = " " + " ".join(f"{k}={v}" for k, v in fields.items())

        message = super().format(record)
        return f"{message}{extra}"


def configure_logging(
    level: str = "INFO",
    structured: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Configure logging for image-check.

    Stdout carries the check response, so log output always goes to
    stderr unless another stream is given.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        structured: Use structured logging format
        stream: Stream to write log records to
    """
    handler = logging.StreamHandler(stream or sys.stderr)

    if structured:
        handler.setFormatter(StructuredFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    logger = logging.getLogger("imagecheck")
    logger.setLevel(getattr(logging, level.upper()))
    logger.handlers = [handler]
    logger.propagate = False


def set_level(level: str) -> None:
    """Change the level of the image-check logger without touching handlers."""
    logging.getLogger("imagecheck").setLevel(getattr(logging, level.upper()))


def get_logger(name: str) -> logging.Logger:
    """Get a logger for an image-check module.

    Args:
        name: Module name (will be prefixed with imagecheck)

    Returns:
        Configured logger
    """
    if not name.startswith("imagecheck"):
        name = f"imagecheck.{name}"
    return logging.getLogger(name)


class LoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds extra fields to log messages."""

    def process(
        self, msg: str, kwargs: dict[str, Any]
    ) -> tuple[str, dict[str, Any]]:
        extra = kwargs.get("extra", {})
        extra["extra_fields"] = self.extra
        kwargs["extra"] = extra
        return msg, kwargs


def get_logger_with_context(name: str, **context: Any) -> LoggerAdapter:
    """Get a logger with additional context fields.

    Args:
        name: Module name
        **context: Context fields to include in all log messages

    Returns:
        LoggerAdapter with context
    """
    logger = get_logger(name)
    return LoggerAdapter(logger, context)
