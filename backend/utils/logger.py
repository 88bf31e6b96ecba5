"""
Logging for the interview backend.

LOG_FORMAT=console (default) renders through rich; LOG_FORMAT=json emits one
JSON object per record with time, level and logger name.
"""

from __future__ import annotations

import logging
import sys
from functools import lru_cache

from pythonjsonlogger import jsonlogger
from rich.console import Console
from rich.logging import RichHandler

from config import get_settings


def _console_handler() -> logging.Handler:
    return RichHandler(
        console=Console(stderr=True),
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )


def _json_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    return handler


def setup_logging(force: bool = False) -> None:
    """Install the root handler once; `force` replaces whatever is already attached."""
    root = logging.getLogger()

    if root.handlers and not force:
        return

    for h in list(root.handlers):
        root.removeHandler(h)

    settings = get_settings()
    log_level = (settings.log_level or "INFO").upper()
    root.setLevel(log_level)

    handler = _json_handler() if settings.log_format.lower() == "json" else _console_handler()
    root.addHandler(handler)

    # uvicorn installs its own handlers; route them through ours
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logger = logging.getLogger(name)
        logger.handlers = [handler]
        logger.setLevel(log_level)


@lru_cache()
def get_logger(name: str | None = None) -> logging.Logger:
    setup_logging()
    return logging.getLogger(name or "interview-backend")
