"""Package-wide logger access."""

from __future__ import annotations

import logging

ROOT_LOGGER_NAME = "fieldmap"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the ``fieldmap`` logger, or the child logger called *name*."""

    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(level: int = logging.INFO) -> None:
    """Attach a stream handler to the package logger once."""

    logger = get_logger()
    logger.setLevel(level)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    logger.addHandler(handler)


__all__ = ["configure_logging", "get_logger"]
