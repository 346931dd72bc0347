# src/limelock/core/logging.py
"""Structured logging configuration for Limelock.

Uses structlog for structured events. The same ProcessorFormatter chain
renders stdlib records too, so logging.getLogger(__name__) output from
libraries matches structlog.get_logger() output from Limelock modules.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter

# Third-party loggers that are noise at DEBUG level (connection pool and
# per-request chatter). Kept at WARNING even when Limelock runs verbose.
_NOISY_LOGGERS: tuple[str, ...] = (
    "httpx",
    "httpcore",
    "urllib3",
)

# Request body keys that must never reach a log line.
_SENSITIVE_KEYS = frozenset({"authtoken", "auth_token", "token", "password"})


def redact(body: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of a request body that is safe to log.

    Sensitive values are masked and the payload "data" field is replaced
    by its length, since payloads can be large.
    """
    safe: dict[str, Any] = {}
    for key, value in body.items():
        if key.lower() in _SENSITIVE_KEYS:
            safe[key] = "<redacted>" if value is not None else None
        elif key == "data" and isinstance(value, str | bytes):
            safe["data_length"] = len(value)
        else:
            safe[key] = value
    return safe


def _remove_internal_fields(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Drop ProcessorFormatter's bookkeeping fields from output.

    ProcessorFormatter always adds _record and _from_structlog.
    """
    del event_dict["_record"]
    del event_dict["_from_structlog"]
    return event_dict


def configure_logging(
    *,
    json_output: bool = False,
    level: str = "INFO",
) -> None:
    """Configure structlog and stdlib logging for Limelock.

    Args:
        json_output: If True, output JSON. If False, human-readable.
        level: Log level (DEBUG, INFO, WARNING, ERROR).
    """
    log_level = getattr(logging, level.upper())

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_output:
        final_processors: list[Any] = [
            _remove_internal_fields,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        final_processors = [
            _remove_internal_fields,
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    structlog.configure(
        processors=[*shared_processors, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Caching off so tests can reconfigure
        cache_logger_on_first_use=False,
    )

    # Logs go to stderr; stdout carries command output (hashes, JSON records)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        ProcessorFormatter(
            processors=final_processors,
            foreign_pre_chain=shared_processors,
        )
    )

    root = logging.getLogger()
    root.handlers = []
    root.addHandler(handler)
    root.setLevel(log_level)

    # Never make noisy loggers less restrictive than the root level
    noisy_level = max(log_level, logging.WARNING)
    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(noisy_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a bound logger for a module.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Bound structlog logger.
    """
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
