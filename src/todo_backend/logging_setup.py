from __future__ import annotations

import logging
import sys

PACKAGE_LOGGER = "todo_backend"


def setup_logging(level: str | int = logging.INFO) -> logging.Logger:
    """
    Configure the package logger with a readable stderr handler.

    Safe to call more than once (e.g. one app per test): the handler is only
    attached the first time, later calls just adjust the level. Records still
    propagate to the root logger so host servers and pytest see them.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)

    if not any(getattr(h, "_todo_backend", False) for h in logger.handlers):
        fmt = logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(fmt)
        handler._todo_backend = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger
