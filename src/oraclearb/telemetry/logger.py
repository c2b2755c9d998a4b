"""
Async queue-based logging system.

Log calls only enqueue records; a listener thread does the formatting
and the console/file I/O, so the producer and detection loops never
block on a write.
"""

import logging
import sys
import time
from collections.abc import Sequence
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path
from queue import Queue

from oraclearb.config.constants import LOG_DATE_FORMAT, LOG_FORMAT, MAX_LOG_QUEUE_SIZE


_NOISY_LOGGERS: tuple[str, ...] = ("aiohttp", "asyncio")


class MicrosecondFormatter(logging.Formatter):
    """Formatter with microsecond precision timestamps."""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        stamp = time.strftime(datefmt or LOG_DATE_FORMAT, time.localtime(record.created))
        micros = int((record.created % 1) * 1_000_000)
        return f"{stamp}.{micros:06d}"


def build_handlers(level: int, log_file: Path | None = None) -> list[logging.Handler]:
    """
    Create the output handlers behind the queue.

    Args:
        level: Console level.
        log_file: Optional file; it always receives DEBUG and above.

    Returns:
        Console handler, followed by the file handler when requested.
    """
    formatter = MicrosecondFormatter(LOG_FORMAT, LOG_DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    handlers: list[logging.Handler] = [console]

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        to_file = logging.FileHandler(log_file, encoding="utf-8")
        to_file.setLevel(logging.DEBUG)
        handlers.append(to_file)

    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


class AsyncLogger:
    """
    Queue-backed logging for one logger hierarchy.

    Module loggers below `name` propagate into the queue; the listener
    thread hands records to the output handlers.
    """

    def __init__(self, name: str, handlers: Sequence[logging.Handler]) -> None:
        """
        Args:
            name: Root of the logger hierarchy (e.g. "oraclearb").
            handlers: Output handlers fed by the listener thread.
        """
        self._logger = logging.getLogger(name)
        self._handlers = list(handlers)
        self._queue: Queue[logging.LogRecord] = Queue(maxsize=MAX_LOG_QUEUE_SIZE)
        self._queue_handler = QueueHandler(self._queue)
        self._listener: QueueListener | None = None

    def start(self) -> None:
        """Attach the queue and start the listener thread."""
        if self._listener is not None:
            return

        # Let every record through that at least one handler wants
        self._logger.setLevel(min(h.level for h in self._handlers))
        self._logger.addHandler(self._queue_handler)

        self._listener = QueueListener(self._queue, *self._handlers, respect_handler_level=True)
        self._listener.start()

    def stop(self) -> None:
        """Drain pending records and detach the queue."""
        if self._listener is None:
            return

        self._listener.stop()
        self._listener = None
        self._logger.removeHandler(self._queue_handler)
        for handler in self._handlers:
            handler.close()

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def is_running(self) -> bool:
        return self._listener is not None

    def __enter__(self) -> "AsyncLogger":
        self.start()
        return self

    def __exit__(self, *args: object) -> None:
        self.stop()


def setup_logging(level: str = "INFO", log_file: Path | None = None) -> AsyncLogger:
    """
    Route the package's logs through a background queue.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR).
        log_file: Optional log file path.

    Returns:
        Started AsyncLogger; call `stop()` on shutdown to flush.
    """
    numeric_level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(numeric_level)

    async_logger = AsyncLogger("oraclearb", build_handlers(numeric_level, log_file))
    async_logger.start()

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return async_logger
