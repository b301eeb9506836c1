"""Logging configuration shared by the library, the CLI and the server.

Loggers are plain :mod:`logging` loggers. Structured context is passed with
``extra={...}`` and rendered after the message as ``key=value`` pairs.
"""

from __future__ import annotations

import logging
import sys
from typing import Final

from cvcanvas.config import CVCANVAS_LOG_LEVEL

_FORMAT: Final[str] = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
_HANDLER_NAME: Final[str] = "cvcanvas"

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_ATTRS: Final[frozenset[str]] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys() | {"message", "asctime", "taskName"}
)


class ContextFormatter(logging.Formatter):
    """Formatter that appends ``extra`` fields to the rendered message."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if not context:
            return base
        pairs = " ".join(f"{key}={value!r}" for key, value in sorted(context.items()))
        return f"{base} [{pairs}]"


def configure_logging(level: str | int | None = None) -> None:
    """Install the project handler on the root logger.

    Safe to call more than once; the handler is only added the first time.

    Args:
        level: Log level name or number. Defaults to ``CVCANVAS_LOG_LEVEL``.
    """
    root = logging.getLogger()
    root.setLevel(level or CVCANVAS_LOG_LEVEL)
    if any(handler.get_name() == _HANDLER_NAME for handler in root.handlers):
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(ContextFormatter(_FORMAT))
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger."""
    return logging.getLogger(name)
