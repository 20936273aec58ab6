"""
Structured logging for ethwrap.

Every module logs through a child of the ``ethwrap`` logger obtained with
:func:`get_logger`. The library installs a ``NullHandler`` only;
applications opt in with :func:`configure_logging` or their own handlers.

Example:
    >>> from ethwrap.utils.logging import configure_logging, get_logger
    >>> configure_logging("DEBUG")
    >>> _logger = get_logger(__name__)
    >>> _logger.info("Submitting transaction", extra={"function": "transfer"})
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Dict, MutableMapping, Optional, TextIO, Tuple, Union

ROOT_LOGGER_NAME = "ethwrap"
DEFAULT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_root = logging.getLogger(ROOT_LOGGER_NAME)
_root.addHandler(logging.NullHandler())

# Handler installed by configure_logging, tracked so reconfiguring replaces it
_configured_handler: Optional[logging.Handler] = None


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Return a logger under the ``ethwrap`` namespace.

    Args:
        name: Module name (usually ``__name__``). Names outside the
            package namespace are nested under it.

    Returns:
        Configured ``logging.Logger`` instance
    """
    if not name or name == ROOT_LOGGER_NAME:
        return _root
    if not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    level: Union[int, str] = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    stream: Optional[TextIO] = None,
) -> logging.Handler:
    """
    Attach a stream handler to the package logger.

    Calling this again replaces the previously installed handler.

    Args:
        level: Logging level (name or number)
        fmt: ``logging.Formatter`` format string
        stream: Output stream (defaults to stderr)

    Returns:
        The installed handler
    """
    global _configured_handler

    if _configured_handler is not None:
        _root.removeHandler(_configured_handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))
    _root.addHandler(handler)
    _configured_handler = handler
    set_level(level)
    return handler


def set_level(level: Union[int, str]) -> None:
    """Set the level of the package logger."""
    if isinstance(level, str):
        level = level.upper()
    _root.setLevel(level)


def disable_logging() -> None:
    """Silence every ethwrap logger."""
    _root.disabled = True


def enable_debug() -> None:
    """Re-enable logging and switch the package logger to DEBUG."""
    _root.disabled = False
    set_level(logging.DEBUG)


class LogContext(logging.LoggerAdapter):
    """
    Logger adapter that adds fixed context to every record.

    Context keys are merged into ``extra``; keys passed per call win.

    Example:
        >>> log = LogContext(get_logger(__name__), contract="0xabc...")
        >>> log.info("Calling", extra={"function": "balanceOf"})
    """

    def __init__(self, logger: logging.Logger, **context: Any) -> None:
        super().__init__(logger, context)

    def bind(self, **context: Any) -> "LogContext":
        """Return a new adapter with additional context."""
        return LogContext(self.logger, **{**self.extra, **context})

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        extra: Dict[str, Any] = dict(self.extra)
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs


__all__ = [
    "ROOT_LOGGER_NAME",
    "get_logger",
    "configure_logging",
    "set_level",
    "disable_logging",
    "enable_debug",
    "LogContext",
]
