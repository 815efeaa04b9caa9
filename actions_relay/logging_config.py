"""Logging setup for the relay."""

from __future__ import annotations

import logging

LOGGER_NAME = "actions_relay"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """
    Attach a single stream handler to the ``actions_relay`` logger.

    Calling it again only updates the level, so the app factory and the
    ``__main__`` entry point can both call it safely.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)

    if not any(getattr(h, "_actions_relay", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._actions_relay = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
