"""Logging bootstrap for applications embedding switchbox."""

from __future__ import annotations

import logging

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach a single stream handler to the ``switchbox`` logger.

    Calling it again only adjusts the level.
    """
    root = logging.getLogger("switchbox")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)

    if not any(getattr(h, "_switchbox", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._switchbox = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    return root
