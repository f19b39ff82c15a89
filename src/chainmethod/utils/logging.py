"""
Structured logging for the chainmethod SDK.

Thin layer over the standard library ``logging`` module. Every module
obtains its logger through :func:`get_logger` and attaches context with
``extra={...}``. The library itself only installs a ``NullHandler``;
applications opt in with :func:`configure_logging`.
"""

from __future__ import annotations

import logging
from typing import Optional, TextIO, Union

ROOT_LOGGER_NAME = "chainmethod"

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the SDK namespace.

    Args:
        name: Usually ``__name__`` of the calling module

    Returns:
        Logger instance
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    level: Union[int, str] = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Attach a stream handler to the SDK root logger.

    Calling this more than once replaces the previously installed handler.

    Args:
        level: Log level name or number
        fmt: Format string for records
        stream: Target stream (stderr if None)

    Returns:
        The SDK root logger
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        if getattr(handler, "_chainmethod_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt))
    handler._chainmethod_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level)
    return root


def set_level(level: Union[int, str]) -> None:
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)


def disable_logging() -> None:
    """Silence every SDK logger until the next configure_logging() or set_level()."""
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(logging.CRITICAL + 1)


def enable_debug() -> logging.Logger:
    """Shortcut for ``configure_logging(logging.DEBUG)``."""
    return configure_logging(logging.DEBUG)
