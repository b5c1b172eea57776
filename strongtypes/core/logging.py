"""Structured Logging for the Generation Engine

Generation-time events (declarations resolved, wrappers built, adapters
emitted) are logged through structlog with:
- Colored, human-readable dev output
- JSON structured production output
- Sensitive key redaction

Runtime validation failures are never logged here; they are returned to
the caller as values.
"""
import logging
import sys

import structlog
from structlog.types import EventDict, Processor

from strongtypes import __version__
from strongtypes.core.config import get_settings

# Silent until the host configures logging
logging.getLogger("strongtypes").addHandler(logging.NullHandler())


def _censor_sensitive_keys(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Processor that redacts values attached under sensitive keys."""
    sensitive_keys = {"value", "inner", "password", "token", "secret"}

    def _redact(obj: dict | list | str, depth: int = 0) -> dict | list | str:
        if depth > 5:  # Prevent infinite recursion
            return obj
        if isinstance(obj, dict):
            return {
                k: "[REDACTED]" if k.lower() in sensitive_keys else _redact(v, depth + 1)
                for k, v in obj.items()
            }
        if isinstance(obj, list):
            return [_redact(item, depth + 1) for item in obj]
        return obj

    return _redact(event_dict)


def _add_library_info(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Processor that adds library metadata."""
    event_dict.setdefault("library", "strongtypes")
    event_dict.setdefault("version", __version__)
    return event_dict


def get_shared_processors() -> list[Processor]:
    """Processors used in both dev and prod configurations."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_library_info,
        _censor_sensitive_keys,
    ]


def configure_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """Configure the logging system.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Defaults to settings.LOG_LEVEL.
        json_logs: If True, output JSON format. If False, colored console output.
            Defaults to settings.LOG_JSON.
    """
    settings = get_settings()
    level = level or settings.LOG_LEVEL
    json_logs = settings.LOG_JSON if json_logs is None else json_logs
    log_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors = get_shared_processors()

    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )

    # Formatter for stdlib logger (handles logs from third-party libs)
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    library_logger = logging.getLogger("strongtypes")
    library_logger.handlers = [handler]
    library_logger.setLevel(log_level)
    library_logger.propagate = False

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Events go through the stdlib logger ``name``, so nothing is emitted until
    the host application configures logging (or calls configure_logging).

    Args:
        name: Logger name (typically __name__ from the calling module)

    Returns:
        Configured structlog logger
    """
    return structlog.wrap_logger(logging.getLogger(name))


class LoggerRegistry:
    """Registry of pre-configured loggers for the generation pipeline stages."""

    _loggers: dict[str, structlog.stdlib.BoundLogger] = {}

    @classmethod
    def get(cls, name: str) -> structlog.stdlib.BoundLogger:
        """Get or create a logger for the given stage."""
        if name not in cls._loggers:
            cls._loggers[name] = get_logger(f"strongtypes.{name}")
        return cls._loggers[name]


def resolver_logger() -> structlog.stdlib.BoundLogger:
    """Logger for declaration resolution events."""
    return LoggerRegistry.get("resolver")


def generator_logger() -> structlog.stdlib.BoundLogger:
    """Logger for wrapper generation events."""
    return LoggerRegistry.get("generator")


def adapter_logger() -> structlog.stdlib.BoundLogger:
    """Logger for capability adapter emission events."""
    return LoggerRegistry.get("adapters")
