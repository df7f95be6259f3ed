"""Logging helpers.

Modules obtain loggers with ``logging.getLogger(__name__)``; entry points call
:func:`setup_default_logging` to get a sane default when the host application
has not configured logging itself.
"""

from __future__ import annotations

import logging

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_default_logging(level: int | str = "INFO") -> None:
    """Apply a minimal ``basicConfig`` once.

    - No-op if the root logger already has handlers.
    - Unknown level names fall back to INFO.
    """
    if isinstance(level, str):
        lvl = getattr(logging, level.upper(), logging.INFO)
    else:
        lvl = int(level)

    root = logging.getLogger()
    if root.handlers:
        return
    logging.basicConfig(level=lvl, format=DEFAULT_FORMAT)


__all__ = ["setup_default_logging"]
