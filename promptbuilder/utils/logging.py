"""Logging configuration using structlog."""

import logging
import sys
from pathlib import Path
from typing import Any

import structlog

from promptbuilder.config import Settings, settings

# Event keys whose values must never reach a log sink
SENSITIVE_KEYS = frozenset(
    {"authorization", "password", "password_hash", "token", "api_key", "jwt_secret"}
)
REDACTED = "***"

# Chatty third-party loggers; httpx logs every outbound request at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def redact_secrets(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """structlog processor masking credentials passed as event fields."""
    for key in event_dict:
        if key.lower() in SENSITIVE_KEYS:
            event_dict[key] = REDACTED
    return event_dict


def _log_file(config: Settings) -> Path:
    log_dir = Path(config.log_directory)
    if not log_dir.is_absolute():
        log_dir = Path(__file__).resolve().parents[2] / log_dir
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / config.log_file_name


def configure_logging(config: Settings | None = None) -> None:
    """Configure structured logging for the application.

    Log lines go to stdout and to ``<log_directory>/<log_file_name>``.
    Fields bound with ``structlog.contextvars`` (the request id) are merged
    into every event.
    """
    config = config or settings
    level = getattr(logging, config.log_level)

    logging.basicConfig(
        format="%(message)s",
        level=level,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(_log_file(config), encoding="utf-8"),
        ],
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        redact_secrets,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if config.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=config.is_development))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
