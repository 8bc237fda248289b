"""
Queue-based file logging with rotation.
Handlers run on a listener thread so request handlers never block on disk I/O.
"""

import logging
import os
import queue
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler

from .structured_logger import build_formatter

EXTERNAL_LOGGERS = {
    "sqlalchemy": logging.WARNING,
    "asyncmy": logging.WARNING,
    "aiosqlite": logging.WARNING,
    "uvicorn": logging.INFO,
    "fastapi": logging.INFO,
}


class FileLogger:
    """Queue-based file logger with rotation capabilities."""

    def __init__(
        self,
        log_file_path: str = "logs/app.log",
        max_bytes: int = 50 * 1024 * 1024,
        backup_count: int = 5,
        log_level: str = "INFO",
        use_json_format: bool = True,
    ):
        self.log_file_path = log_file_path
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.level = getattr(logging, log_level.upper())
        self.use_json_format = use_json_format
        self._log_queue: queue.Queue = queue.Queue()
        self._listener: QueueListener | None = None
        self._queue_handler: QueueHandler | None = None

        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

    def build_handlers(self) -> list[logging.Handler]:
        """Console plus rotating file handler, both fed from the queue."""
        file_handler = RotatingFileHandler(
            self.log_file_path, maxBytes=self.max_bytes, backupCount=self.backup_count
        )
        file_handler.setFormatter(build_formatter(self.use_json_format))

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(
            build_formatter(self.use_json_format, colored=True)
        )

        for handler in (file_handler, console_handler):
            handler.setLevel(self.level)
        return [console_handler, file_handler]

    def start(self) -> None:
        self._listener = QueueListener(
            self._log_queue, *self.build_handlers(), respect_handler_level=True
        )
        self._listener.start()

    def get_queue_handler(self) -> QueueHandler:
        """Get the queue handler for adding to loggers."""
        if self._queue_handler is None:
            self._queue_handler = QueueHandler(self._log_queue)
            self._queue_handler.setLevel(self.level)
        return self._queue_handler

    def stop(self) -> None:
        """Flush pending records and stop the listener thread."""
        if self._listener:
            self._listener.stop()
            self._listener = None


def setup_file_logging(
    log_file_path: str = "logs/app.log",
    log_level: str = "INFO",
    use_json_format: bool = True,
    max_bytes: int = 50 * 1024 * 1024,
    backup_count: int = 5,
) -> FileLogger:
    """
    Set up file logging with queue-based writing.

    Args:
        log_file_path: Path to the log file
        log_level: Logging level
        use_json_format: Whether to use JSON formatting
        max_bytes: Maximum file size before rotation
        backup_count: Number of backup files to keep

    Returns:
        Started FileLogger instance
    """
    file_logger = FileLogger(
        log_file_path=log_file_path,
        max_bytes=max_bytes,
        backup_count=backup_count,
        log_level=log_level,
        use_json_format=use_json_format,
    )
    file_logger.start()
    return file_logger


def route_loggers_to_queue(queue_handler: QueueHandler, log_level: str) -> None:
    """Send the application, root and third-party loggers through the queue."""
    app_logger = logging.getLogger("condo_backend")
    app_logger.handlers.clear()
    app_logger.addHandler(queue_handler)
    app_logger.setLevel(getattr(logging, log_level.upper()))
    app_logger.propagate = False

    for logger_name, level in EXTERNAL_LOGGERS.items():
        ext_logger = logging.getLogger(logger_name)
        ext_logger.handlers.clear()
        ext_logger.addHandler(queue_handler)
        ext_logger.propagate = False
        ext_logger.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(queue_handler)
    root_logger.setLevel(logging.INFO)

    logging.captureWarnings(True)
