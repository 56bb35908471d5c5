"""Logging configuration for the storefront.

stdlib handlers carry the output (console plus rotating files); structlog
renders it, as JSON in production/staging and through the console renderer
everywhere else. The environment comes from ``Settings.environment``.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

from storefront.config import load_settings

_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}


def get_log_level(environment: str) -> str:
    return os.getenv("LOG_LEVEL", _LEVELS.get(environment, "INFO"))


def _rotating(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(environment: str, log_dir: str | Path = "logs") -> None:
    """Console plus ``bookstore.log`` and an errors-only ``bookstore_error.log``."""
    log_level = get_log_level(environment)

    log_dir = Path(os.getenv("LOG_DIR", log_dir))
    log_dir.mkdir(parents=True, exist_ok=True)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = [
        console_handler,
        _rotating(log_dir / "bookstore.log", log_level),
        _rotating(log_dir / "bookstore_error.log", logging.ERROR),
    ]

    # SQL echo from the key-value store is noise outside debugging
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def setup_structlog(environment: str) -> None:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if environment in ("production", "staging"):
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2),
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging() -> None:
    """Configure all logging for the application."""
    environment = load_settings().environment
    setup_stdlib_logging(environment)
    setup_structlog(environment)


def add_context(**kwargs: Any) -> None:
    """Bind request-scoped values (path, user id) to every later log line."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
