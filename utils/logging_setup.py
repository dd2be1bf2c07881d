"""Central logging configuration.

``configure_logging`` is called once by ``main.py`` at startup and attaches a
single stream handler to the ``financial_calendar`` logger. Other modules only
call ``get_logger(__name__)`` and never attach handlers of their own.
"""
import logging
import os
import sys
from typing import IO

_ROOT_LOGGER_NAME = "financial_calendar"
_ENV_LEVEL = "FINANCIAL_CALENDAR_LOG_LEVEL"
_CONFIGURED = False


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
    env_val = os.getenv(_ENV_LEVEL)
    if env_val and env_val != level:
        return _parse_level(env_val)
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Configure the application logger exactly once.

    level falls back to $FINANCIAL_CALENDAR_LOG_LEVEL, then INFO.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_ROOT_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        logging.Formatter(fmt or "%(asctime)s %(name)s %(levelname)s %(message)s")
    )
    logger.setLevel(_parse_level(level))
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a child of the application logger, e.g. financial_calendar.services.balance."""
    root = logging.getLogger(_ROOT_LOGGER_NAME)
    if not _CONFIGURED and not root.handlers:
        root.addHandler(logging.NullHandler())
    if name == _ROOT_LOGGER_NAME or name.startswith(_ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT_LOGGER_NAME}.{name}")
