"""
structlog setup shared by the evaluation entry points
"""

import logging
import sys
from typing import Optional

import structlog

from .config import settings


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """
    Настраивает logging и процессоры structlog

    Вызывается один раз приложением, которое использует mleval.

    Args:
        level: Уровень логирования (по умолчанию settings.LOG_LEVEL)
        fmt: "console" или "json" (по умолчанию settings.LOG_FORMAT)
    """
    level = (level or settings.LOG_LEVEL).upper()
    fmt = fmt or settings.LOG_FORMAT

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level, logging.INFO),
    )

    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
