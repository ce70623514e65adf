"""Redisbox Logging Configuration.

Records may carry a ``database`` attribute (the uuid of the Redis database an
operation ran on, see ``Notifier``). Both formats render it.
"""

import json
import logging
import sys
from typing import Literal

DEV_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEV_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Library loggers and the level they are held at outside DEBUG
QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "asyncio": logging.WARNING,
}


class JSONFormatter(logging.Formatter):
    """Structured JSON log formatter.

    Every field goes through json.dumps() so quotes, backslashes and newlines
    in messages (e.g. docker stderr) cannot break the line format.
    """

    def __init__(self):
        super().__init__(datefmt="%Y-%m-%dT%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        database = getattr(record, "database", None)
        if database is not None:
            log_entry["database"] = database
        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


class DevFormatter(logging.Formatter):
    """Readable one-line format, suffixed with ``[db=<uuid>]`` when known."""

    def __init__(self):
        super().__init__(fmt=DEV_FORMAT, datefmt=DEV_DATEFMT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        database = getattr(record, "database", None)
        if database is None:
            return line
        # Keep the suffix on the message line, ahead of any traceback
        first, newline, rest = line.partition("\n")
        return f"{first} [db={database}]{newline}{rest}"


def setup_logging(
    level: str = "INFO",
    format_type: Literal["structured", "dev"] = "dev",
) -> None:
    """
    Configure application logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Log format - 'structured' for JSON, 'dev' for readable
    """
    root_level = getattr(logging, level.upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if format_type == "structured" else DevFormatter())
    logging.root.handlers = [handler]
    logging.root.setLevel(root_level)

    for logger_name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(logger_name).setLevel(
            root_level if root_level == logging.DEBUG else quiet_level
        )

    get_logger("logging").info(f"Logging configured: level={level}, format={format_type}")


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the redisbox prefix."""
    return logging.getLogger(f"redisbox.{name}")
