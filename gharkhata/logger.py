"""
Operational Logging

All modules log through structlog on top of the standard library logging
module. Events are snake_case names with keyword context, e.g.

    logger.info("payment_recorded", payment_id=..., month="2024-05")

These are operational logs for debugging, not an audit trail.
"""

import logging
import sys
from typing import Optional

import structlog


_CONFIGURED = False


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """
    Configure structlog and the stdlib root handler.

    Safe to call more than once; the last call wins.
    """
    global _CONFIGURED

    log_level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()
    if not any(getattr(h, "_gharkhata", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        handler._gharkhata = True
        root.addHandler(handler)
    root.setLevel(log_level)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
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
    _CONFIGURED = True


def get_logger(name: Optional[str] = None):
    """Get a structlog logger, configuring defaults on first use."""
    if not _CONFIGURED:
        configure_logging()
    return structlog.get_logger(name)
