"""Logging setup and secret masking helpers."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(level: int | str = logging.INFO, stream: TextIO | None = None) -> logging.Logger:
    """Configure the ``lti-launch`` logger hierarchy.

    Parameters
    ----------
    level:
        Level name (``"DEBUG"``) or number applied to the package loggers.
    stream:
        Destination stream; defaults to ``sys.stderr``.

    Returns
    -------
    logging.Logger
        The ``lti-launch`` root logger.
    """
    if isinstance(level, str):
        level_value = logging.getLevelName(level.strip().upper())
        if not isinstance(level_value, int):
            raise ValueError(f"unknown log level {level!r}")
        level = level_value

    logger = logging.getLogger("lti-launch")
    logger.setLevel(level)
    # Replace handlers so repeated setup (tests, reloads) does not duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def mask_sensitive(value: str | None, keep_chars: int = 4) -> str:
    """Return *value* with all but the first *keep_chars* characters masked."""
    if not value:
        return ""
    if len(value) <= keep_chars:
        return "*" * len(value)
    return value[:keep_chars] + "*" * (len(value) - keep_chars)
