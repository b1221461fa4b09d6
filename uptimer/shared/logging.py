"""
Logging Configuration - Shared Layer

structlog on top of the standard ``logging`` module. Records from both
structlog loggers and plain stdlib loggers go through the same renderer.
Console output goes to stderr so that reports printed on stdout stay
parseable.
"""

import logging
import os
import sys
from typing import IO, Any, List, Optional

import structlog
from structlog.types import Processor

from uptimer.shared.consts import EnumEnvironment

DEFAULT_LOG_LEVEL = "WARNING"


def _build_handlers(
    stream: Optional[IO[str]], file_path: Optional[str]
) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [
        logging.StreamHandler(stream if stream is not None else sys.stderr)
    ]
    if file_path:
        handlers.append(logging.FileHandler(file_path))
    return handlers


def _select_renderer(json_logs: bool) -> Processor:
    if json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def configure_logging(
    level: Optional[str] = None,
    file_path: Optional[str] = None,
    environment: str = "development",
    json_logs: Optional[bool] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """
    Install structlog rendering on the root logger.

    Safe to call more than once; previous root handlers are replaced. Values
    not passed fall back to ``LOG_LEVEL`` / ``LOG_FILE_PATH`` so that early
    bootstrap works before settings are loaded.

    Args:
        level: Log level name, e.g. ``"DEBUG"``.
        file_path: Also write records to this file.
        environment: Application environment (development, production, etc.)
        json_logs: Force JSON (True) or console (False) rendering; by default
            production renders JSON and every other environment the console.
        stream: Console stream, stderr when omitted.
    """
    log_level = level or os.environ.get("LOG_LEVEL") or DEFAULT_LOG_LEVEL
    log_file = file_path or os.environ.get("LOG_FILE_PATH")
    numeric_level = getattr(logging, log_level.upper(), logging.WARNING)

    if json_logs is None:
        json_logs = environment.lower() == EnumEnvironment.PRODUCTION

    timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)

    # add_logger_name reads ``_record``, which the formatter strips last.
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=_select_renderer(json_logs),
        foreign_pre_chain=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            timestamper,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
        ],
    )

    handlers = _build_handlers(stream, log_file)
    for handler in handlers:
        handler.setFormatter(formatter)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            timestamper,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.handlers = handlers
    root_logger.setLevel(numeric_level)

    logging.debug(f"Logging configured with level: {log_level}")
    if log_file:
        logging.debug(f"Logging to file: {log_file}")


def update_logging_from_settings(
    settings: Any, stream: Optional[IO[str]] = None
) -> None:
    """
    Re-apply logging configuration from loaded application settings.

    Args:
        settings: ``AppSettings`` or any object with the same ``logging`` and
            ``environment`` attributes.
        stream: Console stream, stderr when omitted.
    """
    try:
        log_level = getattr(settings.logging.level, "value", settings.logging.level)
        environment = getattr(settings.environment, "value", settings.environment)

        configure_logging(
            level=log_level,
            file_path=settings.logging.file_path,
            environment=environment,
            json_logs=getattr(settings.logging, "json_logs", None),
            stream=stream,
        )

        logging.debug("Logging configuration updated from application settings")
    except Exception as e:
        logging.error(f"Failed to update logging from settings: {e}")


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger configured for the project."""
    return structlog.get_logger(name)
