"""Application logging setup.

A single console handler on the ``company_board`` logger with UTC timestamps.
Modules use ``logging.getLogger(__name__)``; call ``configure_logging`` once at
startup (repeated calls are no-ops).
"""
from __future__ import annotations

import logging
import time

_APP_LOGGER_NAME = "company_board"


class _UTCFormatter(logging.Formatter):
    converter = staticmethod(time.gmtime)


def configure_logging(level_name: str = "INFO") -> logging.Logger:
    level = getattr(logging, (level_name or "INFO").upper(), logging.INFO)
    app_logger = logging.getLogger(_APP_LOGGER_NAME)
    app_logger.setLevel(level)

    # Avoid duplicate handlers (uvicorn --reload, test collection).
    if getattr(app_logger, "_configured", False):
        return app_logger

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(
        _UTCFormatter(
            fmt="%(asctime)sZ %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    app_logger.addHandler(handler)
    app_logger.propagate = False
    app_logger._configured = True  # type: ignore[attr-defined]
    return app_logger
