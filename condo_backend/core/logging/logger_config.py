"""
Central logging configuration.
Provides setup functions and logger management.
"""

import logging

from ...config import settings
from .context import TransactionIdFilter
from .file_logger import FileLogger, route_loggers_to_queue, setup_file_logging
from .structured_logger import setup_structured_logging


class LoggingConfig:
    """Central logging configuration manager."""

    def __init__(self):
        self.file_logger: FileLogger | None = None
        self.transaction_filter = TransactionIdFilter()
        self._is_configured = False

    def setup(
        self,
        log_to_file: bool,
        log_level: str,
        log_file_path: str,
        use_json_format: bool,
        max_bytes: int,
        backup_count: int,
    ) -> logging.Logger:
        """Configure handlers once; later calls return the configured logger."""
        if self._is_configured:
            return get_logger()

        if log_to_file:
            self.file_logger = setup_file_logging(
                log_file_path=log_file_path,
                log_level=log_level,
                use_json_format=use_json_format,
                max_bytes=max_bytes,
                backup_count=backup_count,
            )
            queue_handler = self.file_logger.get_queue_handler()
            queue_handler.addFilter(self.transaction_filter)
            route_loggers_to_queue(queue_handler, log_level)
        else:
            logger = setup_structured_logging(log_level, use_json_format)
            for handler in logger.handlers:
                handler.addFilter(self.transaction_filter)

        self._is_configured = True
        return get_logger()

    def shutdown(self) -> None:
        if self.file_logger:
            self.file_logger.stop()
            self.file_logger = None
        self._is_configured = False


_logging_config = LoggingConfig()


def setup_logging() -> logging.Logger:
    """Set up logging from the loaded application settings."""
    return _logging_config.setup(
        log_to_file=settings.log_to_file,
        log_level=settings.log_level,
        log_file_path=settings.log_file_path,
        use_json_format=settings.log_format.lower() == "json",
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Optional logger name, nested under the application logger

    Returns:
        Logger instance
    """
    if name:
        if name.startswith("condo_backend"):
            return logging.getLogger(name)
        return logging.getLogger(f"condo_backend.{name}")
    return logging.getLogger("condo_backend")


def shutdown_logging() -> None:
    """Shutdown logging gracefully."""
    _logging_config.shutdown()
