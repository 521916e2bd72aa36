"""structlog configuration for the CLI and embedding services."""

import logging
import sys

import structlog

from slidesmind.config import Settings


def configure_logging(settings: Settings | None = None) -> None:
    """Install the structlog processor chain.

    Uses a JSON renderer when ``settings.log_format == "json"``, otherwise
    the console renderer.  Log lines go to stderr so CLI output on stdout
    stays clean.
    """
    settings = settings or Settings()
    level = getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )
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
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
