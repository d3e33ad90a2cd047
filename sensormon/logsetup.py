"""Redirection of the application's log output."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from os import PathLike

DEFAULT_LOG_PATH = "./logging/debug.log"

_LEVEL_NAMES = {
    logging.DEBUG: "DBG",
    logging.INFO: "INF",
    logging.WARNING: "WRN",
    logging.ERROR: "CRT",
    logging.CRITICAL: "FTL",
}


class LogFormatter(logging.Formatter):
    """Formats ``date | level | line | file | function | message``."""

    def __init__(self) -> None:
        super().__init__(datefmt="%d-%m-%Y %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        return " | ".join(
            (
                self.formatTime(record, self.datefmt),
                _LEVEL_NAMES.get(record.levelno, ""),
                str(record.lineno),
                record.filename,
                record.funcName,
                record.getMessage(),
            )
        )


@dataclass
class _LoggerState:
    initialized: bool = False
    handler: logging.Handler | None = None
    saved_handlers: list[logging.Handler] = field(default_factory=list)
    saved_level: int = logging.WARNING


_state = _LoggerState()


def init(
    redirect_index: int = -1,
    log_path: str | PathLike[str] = DEFAULT_LOG_PATH,
) -> None:
    """Redirect logging once: 0 discards all output, 1 writes to ``log_path``.

    A negative index, or a second call before :func:`clean`, does nothing.
    The log file is emptied when it is opened.
    """
    if _state.initialized or redirect_index < 0:
        return

    handler: logging.Handler | None = None
    if redirect_index == 0:
        handler = logging.NullHandler()
    elif redirect_index == 1:
        handler = logging.FileHandler(log_path, mode="w", encoding="utf-8")
        handler.setFormatter(LogFormatter())

    if handler is not None:
        root = logging.getLogger()
        _state.saved_handlers = list(root.handlers)
        _state.saved_level = root.level
        for existing in _state.saved_handlers:
            root.removeHandler(existing)
        root.addHandler(handler)
        root.setLevel(logging.DEBUG)
        _state.handler = handler

    _state.initialized = True


def clean() -> None:
    """Close the log file and restore the previous logging setup."""
    handler = _state.handler
    if handler is not None:
        root = logging.getLogger()
        root.removeHandler(handler)
        handler.close()
        for existing in _state.saved_handlers:
            root.addHandler(existing)
        root.setLevel(_state.saved_level)
    _state.handler = None
    _state.saved_handlers = []
    _state.initialized = False