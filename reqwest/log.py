"""
Logging setup for applications using reqwest.

The library itself only calls structlog.get_logger(); nothing is configured
on import.
"""

import logging
import sys

import structlog

from .config import config

RENDERERS = ('json', 'console')


def configure_logging(level: str = None, fmt: str = None):
    """Configure stdlib logging and structlog from arguments or the logging config section."""
    log_config = config.logging
    level = (level or log_config.get('level', 'INFO')).upper()
    fmt = fmt or log_config.get('format', 'json')

    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"Unknown log level: {level}")

    if fmt not in RENDERERS:
        raise ValueError(f"Unknown log format: {fmt} (expected one of {', '.join(RENDERERS)})")

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.getLevelName(level),
        force=True,
    )

    renderer = structlog.processors.JSONRenderer() if fmt == 'json' else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
