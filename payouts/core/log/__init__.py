"""Logging for the payout table: rich console output plus a daily log file.

Records are handed to a queue listener so that request threads never block on
file or console I/O. Every record carries the current edit context.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import date, datetime
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path
from queue import SimpleQueue
from threading import RLock

from rich.console import Console
from rich.logging import RichHandler

from .context import EditContextFilter, log_context
from .timing import timeit

__all__ = [
    "init_logging",
    "get_logger",
    "shutdown_logging",
    "log_context",
    "timeit",
]

ROOT_LOGGER_NAME = "payouts"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(context)s%(message)s"


@dataclass(frozen=True)
class _LoggingState:
    level: int
    log_dir: Path | None
    console: bool
    listener: QueueListener


_lock = RLock()
_state: _LoggingState | None = None


def _resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


class DailyFileHandler(logging.FileHandler):
    """Append to ``<log_dir>/payouts_<YYYY-MM-DD>.log``, switching files at midnight."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory
        self.directory.mkdir(parents=True, exist_ok=True)
        self._day: date = datetime.now().date()
        super().__init__(self._path_for(self._day), mode="a", encoding="utf-8")

    def _path_for(self, day: date) -> Path:
        return self.directory / f"{ROOT_LOGGER_NAME}_{day.isoformat()}.log"

    def emit(self, record: logging.LogRecord) -> None:
        record_day = datetime.fromtimestamp(record.created).date()
        if record_day != self._day:
            self._day = record_day
            self.close()
            self.baseFilename = os.fspath(self._path_for(record_day))
        super().emit(record)


def _handlers(level: int, log_dir: Path | None, console: bool) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []
    if console:
        rich_handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            markup=False,
            rich_tracebacks=True,
            log_time_format="%Y-%m-%d %H:%M:%S",
        )
        rich_handler.setFormatter(logging.Formatter("%(context)s%(message)s"))
        handlers.append(rich_handler)
    if log_dir is not None:
        file_handler = DailyFileHandler(log_dir)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)
    for handler in handlers:
        handler.setLevel(level)
    return handlers


def init_logging(
    level: str | int = "INFO",
    log_dir: Path | None = Path("logs"),
    *,
    console: bool = True,
) -> None:
    """Route the ``payouts`` logger through a queue to console and file handlers.

    Calling again with the same arguments is a no-op; different arguments
    replace the previous handlers.
    """

    global _state
    resolved = _resolve_level(level)
    log_dir = Path(log_dir) if log_dir else None
    with _lock:
        if _state is not None:
            if (_state.level, _state.log_dir, _state.console) == (resolved, log_dir, console):
                return
            _stop_locked()

        queue: SimpleQueue = SimpleQueue()
        queue_handler = QueueHandler(queue)
        # the filter runs on the calling thread, where the edit context is bound
        queue_handler.addFilter(EditContextFilter())
        listener = QueueListener(
            queue, *_handlers(resolved, log_dir, console), respect_handler_level=True
        )
        listener.start()

        logger = logging.getLogger(ROOT_LOGGER_NAME)
        logger.setLevel(resolved)
        logger.addHandler(queue_handler)
        logger.propagate = False
        _state = _LoggingState(resolved, log_dir, console, listener)


def _stop_locked() -> None:
    global _state
    if _state is None:
        return
    _state.listener.stop()
    for handler in _state.listener.handlers:
        handler.close()
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    _state = None


def shutdown_logging() -> None:
    """Flush and detach all handlers."""

    with _lock:
        _stop_locked()


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger below ``payouts``, configuring defaults on first use."""

    with _lock:
        if _state is None:
            init_logging()
    return logging.getLogger(name or ROOT_LOGGER_NAME)
