"""Centralized logging configuration for CLI and web entry points."""

from __future__ import annotations

import logging
import os

LOG_FORMAT: str = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_MODULE_LOGGERS: dict[str, str] = {
    "DATA": "Restaurant_Guide.data",
    "WEB": "Restaurant_Guide.web",
    "CLI": "Restaurant_Guide.cli",
}


def configure_logging(
    *,
    level: str = "",
    verbose: bool = False,
    quiet: bool = False,
) -> None:
    """Configure root logger with consistent format across CLI and web.

    Priority: verbose > quiet > level param > LOG_LEVEL env > INFO default.
    Uses force=True to override uvicorn's prior root logger config.
    Reads LOG_LEVEL_{MODULE} env vars for per-module overrides.
    """
    if verbose:
        effective = logging.DEBUG
    elif quiet:
        effective = logging.WARNING
    elif level:
        effective = getattr(logging, level.upper(), logging.INFO)
    else:
        env_level = os.environ.get("LOG_LEVEL", "INFO")
        effective = getattr(logging, env_level.upper(), logging.INFO)

    logging.basicConfig(level=effective, format=LOG_FORMAT, force=True)

    # aiosqlite logs every queued call at DEBUG; SQLAlchemy echoes SQL at INFO
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    for key, logger_name in _MODULE_LOGGERS.items():
        module_level = os.environ.get(f"LOG_LEVEL_{key}")
        if module_level:
            resolved = getattr(logging, module_level.upper(), None)
            if resolved is not None:
                logging.getLogger(logger_name).setLevel(resolved)
