"""Central logging configuration for the ledger dashboard.

Entrypoints call ``configure_logging`` once; library modules only call
``get_logger("ledger.<module>")`` and never attach handlers of their own.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_ROOT_LOGGER_NAME = "ledger"
_CONFIGURED = False


def _level_from_name(text: str) -> int | None:
    name = text.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = getattr(logging, name, None) if name else None
    return numeric if isinstance(numeric, int) and not isinstance(numeric, bool) else None


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        parsed = _level_from_name(level)
    else:
        env_val = os.getenv("LEDGER_LOG_LEVEL")
        parsed = _level_from_name(env_val) if env_val else None
    return logging.INFO if parsed is None else parsed


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Attach a single ``StreamHandler`` to the ``ledger`` logger, once.

    ``level`` falls back to ``LEDGER_LOG_LEVEL`` and then to INFO.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    resolved = _parse_level(level)
    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or "%(asctime)s %(name)s %(levelname)s %(message)s"))

    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger, keeping the package root silent until configured."""
    root = logging.getLogger(_ROOT_LOGGER_NAME)
    if not _CONFIGURED and not root.handlers:
        root.addHandler(logging.NullHandler())
    return logging.getLogger(name)
