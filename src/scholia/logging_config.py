"""
Structured logging setup.

structlog renders through the standard library, so third-party loggers
(httpx, asyncio) share the same handler and format.
"""

import logging
import os
import sys
from dataclasses import dataclass
from enum import Enum

import structlog


class LogFormat(str, Enum):
    JSON = "json"
    CONSOLE = "console"


@dataclass
class LogConfig:
    level: str = "WARNING"
    format: LogFormat = LogFormat.CONSOLE

    @classmethod
    def from_env(cls) -> "LogConfig":
        fmt = os.getenv("SCHOLIA_LOG_FORMAT", "console").lower()
        return cls(
            level=os.getenv("SCHOLIA_LOG_LEVEL", "WARNING").upper(),
            format=LogFormat.JSON if fmt == "json" else LogFormat.CONSOLE,
        )


def configure_logging(config: LogConfig | None = None) -> None:
    """Install a single stderr handler on the root logger."""
    if config is None:
        config = LogConfig.from_env()

    log_level = getattr(logging, config.level.upper(), logging.WARNING)

    shared_processors = [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    if config.format == LogFormat.JSON:
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))
    logging.getLogger("httpcore").setLevel(max(log_level, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Module logger.

        logger = get_logger(__name__)
        logger.warning("action_failed", action="add_note", error="boom")
    """
    return structlog.get_logger(name)
