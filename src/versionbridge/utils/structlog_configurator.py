"""Structlog-based logging configuration for versionbridge.

Library code only calls ``structlog.get_logger``; applications and the CLI call
``configure_structlog`` once at startup to choose the output format:
- Docker: JSON lines on stdout
- Development: human-readable console output, JSON on request
"""

import logging
import os
import sys
from collections.abc import Callable
from typing import Any

import structlog

from versionbridge.config.models import LoggingConfig


def is_docker_environment() -> bool:
    """Check if running in a Docker container."""
    return os.path.exists("/.dockerenv") or os.environ.get("DOCKER_CONTAINER") == "true"


def _add_static_context(extra_fields: dict[str, str]) -> Callable:
    """Processor to add static context fields to all log entries."""

    def processor(
        logger: structlog.BoundLogger, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict.update(extra_fields)
        return event_dict

    return processor


def _use_json(config: LoggingConfig) -> bool:
    """Decide between JSON and console rendering."""
    if os.environ.get("VERSIONBRIDGE_JSON_LOGS", "false").lower() == "true":
        return True
    if config.json_logs is not None:
        return config.json_logs
    return is_docker_environment()


def _configure_processors(config: LoggingConfig) -> list:
    """Configure structlog processors for the given settings."""
    processors = [
        structlog.contextvars.merge_contextvars,
        _add_static_context(dict(config.extra_fields)),
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="ISO"),
    ]

    if config.include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder())

    if _use_json(config):
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    return processors


def _configure_handlers(log_level: int) -> None:
    """Route stdlib logging through a single stderr handler."""
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(log_level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)


def configure_structlog(config: LoggingConfig) -> None:
    """Configure structlog-based logging.

    Args:
        config: Logging settings, usually ``BridgeSettings.logging``
    """
    log_level = getattr(logging, config.level.upper(), logging.INFO)

    structlog.configure(
        processors=_configure_processors(config),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configure_handlers(log_level)

    logger = structlog.get_logger(__name__)
    logger.debug(
        "Structured logging configured",
        log_level=config.level,
        json_output=_use_json(config),
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog BoundLogger instance
    """
    return structlog.get_logger(name)
