"""Logging configuration for binstore."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from binstore.core.config import get_settings

if TYPE_CHECKING:
    from binstore.core.config import Settings

# httpx logs every request at INFO; resolvers already log their own calls.
HTTP_CLIENT_LOGGERS = ("httpx", "httpcore")


def setup_logging(settings: "Settings | None" = None) -> None:
    """Configure process-wide logging for binstore.

    Level is DEBUG when settings.debug is True, otherwise settings.log_level.
    The HTTP client libraries are held at WARNING unless debugging. Output
    goes to stdout.
    """
    s = settings or get_settings()
    log_level = logging.DEBUG if s.debug else s.log_level.upper()
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger("binstore").setLevel(log_level)
    for name in HTTP_CLIENT_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if s.debug else logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name.

    Args:
        name: Usually __name__ of the calling module.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)
