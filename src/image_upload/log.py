"""Logging sink shared by the upload handlers."""

from __future__ import annotations

import logging

_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def log_data(source: str, message: str, level: str = "info") -> None:
    """Emit *message* on the logger named after *source*.

    ``level`` is one of ``debug``, ``info``, ``warning`` or ``error``
    (case-insensitive).
    """
    try:
        levelno = _LEVELS[level.lower()]
    except KeyError:
        raise ValueError(f"Unknown log level '{level}'.") from None
    logging.getLogger(source).log(levelno, message)
