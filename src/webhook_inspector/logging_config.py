"""Logging configuration for structured single-line output."""
from __future__ import annotations

import logging
import sys

import structlog


def _sanitize_string(value: str) -> str:
    """Escape control characters so the log entry stays on a single line."""
    return (
        value.replace("\\", "\\\\")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )


def replace_newlines_processor(logger, method_name, event_dict):
    """
    Escape newlines in string values, including nested list/dict members.
    Must run after format_exc_info so tracebacks are covered as well.
    """
    for key, value in event_dict.items():
        if isinstance(value, str):
            event_dict[key] = _sanitize_string(value)
        elif isinstance(value, (list, tuple)):
            event_dict[key] = [
                _sanitize_string(item) if isinstance(item, str) else item
                for item in value
            ]
        elif isinstance(value, dict):
            event_dict[key] = {
                k: _sanitize_string(v) if isinstance(v, str) else v
                for k, v in value.items()
            }
    return event_dict


class SingleLineFormatter(logging.Formatter):
    """Formatter that ensures output is always on a single line."""

    def format(self, record):
        message = super().format(record)
        return message.replace("\n", "\\n").replace("\r", "\\r")


def _renderer(log_format: str):
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    # key=value, values with spaces are quoted
    return structlog.processors.KeyValueRenderer(
        key_order=["timestamp", "level", "logger", "event", "message"],
        drop_missing=True,
    )


def configure_logging(level: str = "INFO", log_format: str = "kv") -> None:
    """Configure structlog and route stdlib logging (aiohttp included) through it."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(SingleLineFormatter("%(message)s"))

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level.upper())

    aiohttp_logger = logging.getLogger("aiohttp.access")
    aiohttp_logger.setLevel(level.upper())
    aiohttp_logger.propagate = True
    aiohttp_logger.handlers = []

    structlog.configure(
        processors=[
            # trace_id, request_id etc. bound by the trace middleware
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            replace_newlines_processor,
            _renderer(log_format),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
