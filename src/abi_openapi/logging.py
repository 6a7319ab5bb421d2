"""Logging helpers for abi-openapi."""

from __future__ import annotations

import logging

_LOGGER_NAME = "abi_openapi"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the abi_openapi hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """Configure the abi_openapi logger with a single console handler."""
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations don't duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[abi-openapi] %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    return logger


__all__ = ["configure_logging", "get_logger"]
