"""
Structured Logging

structlog over the standard library logger. Configured once at import
from LedgerSettings; call configure_logging() again to change level or
renderer (tests use the console renderer).

The computation engine does not log. Services log one event per mutation
or rejection, with identifiers as key/value pairs.
"""

import logging
import sys
from typing import Optional

import structlog

from parish_ledger.config import get_settings


def configure_logging(level: Optional[str] = None, json: Optional[bool] = None) -> None:
    """Configure stdlib logging and structlog processors."""
    settings = get_settings()
    level = (level or settings.log_level).upper()
    json = settings.log_json if json is None else json

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level),
    )
    logging.getLogger("parish_ledger").setLevel(getattr(logging, level))

    renderer = (
        structlog.processors.JSONRenderer(ensure_ascii=False)
        if json
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


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Logger bound to a module name under the parish_ledger namespace."""
    return structlog.get_logger(name)


configure_logging()
