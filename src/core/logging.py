"""Logging configuration for the alignment optimizer.

All loggers live under the ``alignment`` namespace so that a single
``configure_logging`` call controls the engine, sessions and drivers.
"""

from __future__ import annotations

import logging

__all__ = ["LOGGER_NAMESPACE", "DEFAULT_FORMAT", "get_logger", "configure_logging"]

LOGGER_NAMESPACE = "alignment"
DEFAULT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_HANDLER_ATTR = "_alignment_handler"


def get_logger(name: str) -> logging.Logger:
    """Return a logger nested under the package namespace.

    Args:
        name: Dotted component name, e.g. ``"optim.variational"``.

    Returns:
        The ``alignment.<name>`` logger.
    """
    if name.startswith(LOGGER_NAMESPACE):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


def configure_logging(level: int | str = logging.INFO, *, fmt: str = DEFAULT_FORMAT) -> logging.Logger:
    """Install a stream handler on the namespace root logger.

    Calling this more than once only updates the level and format.

    Args:
        level: Logging level (int or name such as ``"DEBUG"``).
        fmt: Log record format string.

    Returns:
        The namespace root logger.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level}")

    root = logging.getLogger(LOGGER_NAMESPACE)
    root.setLevel(level)

    handler = next((h for h in root.handlers if getattr(h, _HANDLER_ATTR, False)), None)
    if handler is None:
        handler = logging.StreamHandler()
        setattr(handler, _HANDLER_ATTR, True)
        root.addHandler(handler)
    handler.setFormatter(logging.Formatter(fmt))
    return root
