"""
Logging configuration using structlog for structured logging.

JSON output is the default so CI logs stay machine-readable; ``json_logs=False``
switches to the console renderer for local runs. Values of keys that look like
credentials are redacted before rendering.
"""

import logging
from typing import Any

import structlog

VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

SENSITIVE_KEYS = ("token", "secret", "password", "authorization")


def redact_sensitive_data(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Replace values of credential-like keys with a fixed marker."""
    for key in list(event_dict):
        if any(marker in key.lower() for marker in SENSITIVE_KEYS):
            event_dict[key] = "***REDACTED***"
    return event_dict


def configure_logging(log_level: str = "INFO", json_logs: bool = True) -> None:
    """Configure structured logging.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL),
            case-insensitive
        json_logs: Render JSON lines when True, human-readable console output
            otherwise

    Raises:
        ValueError: If log_level is not a known level name
    """
    level_name = log_level.upper()
    if level_name not in VALID_LEVELS:
        raise ValueError(f"Invalid log level '{log_level}'. Must be one of: {', '.join(VALID_LEVELS)}")

    renderer: Any = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            redact_sensitive_data,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level_name)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a logger instance.

    Example:
        >>> log = get_logger(__name__)
        >>> log.info("run_started", workflow="epic-evaluation.yml", run_id=42)
    """
    return structlog.get_logger(name)
