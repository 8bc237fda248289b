"""
Structured JSON log formatting.
Every record carries the transaction id and its source location, plus the
import session id when the caller passes one.
"""

import logging
import sys
import traceback
from datetime import datetime
from typing import Any

from pythonjsonlogger.json import JsonFormatter

from .context import get_transaction_id

SERVICE_NAME = "condo-backend"
SERVICE_VERSION = "0.1.0"


class StructuredFormatter(JsonFormatter):
    """JSON formatter that adds standard observability fields."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now().astimezone().isoformat()
        log_record["transaction_id"] = getattr(
            record, "transaction_id", get_transaction_id()
        )
        log_record["level"] = record.levelname
        log_record["logger_name"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName
        log_record["line"] = record.lineno

        session_id = getattr(record, "import_session_id", None)
        if session_id is not None:
            log_record["import_session_id"] = str(session_id)

        log_record["service"] = {"name": SERVICE_NAME, "version": SERVICE_VERSION}

        if record.exc_info:
            log_record["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        for field in ["msg", "args", "created", "msecs", "relativeCreated", "pathname"]:
            log_record.pop(field, None)


def build_formatter(use_json_format: bool, colored: bool = False) -> logging.Formatter:
    """Return the JSON formatter or a plain text one for local development."""
    if use_json_format:
        return StructuredFormatter(
            fmt="%(timestamp)s %(level)s %(transaction_id)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    if colored:
        return logging.Formatter(
            "\033[1;32m%(asctime)s\033[0m | "
            "\033[1;34m%(levelname)s\033[0m | "
            "\033[1;33m%(filename)s:%(lineno)d\033[0m | %(message)s"
        )
    return logging.Formatter(
        "%(asctime)s | %(levelname)s | %(transaction_id)s | "
        "%(filename)s:%(lineno)d | %(message)s"
    )


def setup_structured_logging(
    log_level: str = "INFO", use_json_format: bool = True
) -> logging.Logger:
    """Attach a stdout handler to the application logger.

    Args:
        log_level: The logging level (DEBUG, INFO, WARNING, ERROR)
        use_json_format: Emit JSON instead of human readable lines

    Returns:
        Configured application logger
    """
    level = getattr(logging, log_level.upper())
    logger = logging.getLogger("condo_backend")
    logger.setLevel(level)
    logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(build_formatter(use_json_format, colored=True))
    logger.addHandler(console_handler)

    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("fastapi").setLevel(logging.INFO)

    return logger
