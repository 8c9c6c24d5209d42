import logging
import json
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from . import config

# logrus-style level names accepted on the command line
LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "panic": logging.CRITICAL,
}


class JsonFormatter(logging.Formatter):
    """Renders each record as a single JSON object per line."""

    def format(self, record):
        log_object = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
        }
        # If the message is a dictionary, merge it into the log object
        if isinstance(record.msg, dict):
            log_object.update(record.msg)
        else:
            log_object["message"] = record.getMessage()
        if record.exc_info:
            log_object["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_object, default=str)


def parse_level(name: str) -> int:
    """
    Maps a level name (debug, info, warn, error, fatal, panic) to a logging level.
    Raises ValueError for unknown names.
    """
    try:
        return LEVELS[name.strip().lower()]
    except KeyError:
        raise ValueError(f"not a valid log level: {name!r}")


def setup_logger(level: int = logging.ERROR, log_file: Optional[str] = None) -> logging.Logger:
    """
    Sets up the check logger to output structured JSON logs.

    Records go to stderr, since stdout carries the status line read by the
    monitoring system. When log_file is given, records are also written to a
    rotating file.
    """
    logger = logging.getLogger("apicheck")
    logger.setLevel(level)
    logger.propagate = False  # Prevent logs from being duplicated by the root logger

    formatter = JsonFormatter()

    # Replace handlers from a previous setup instead of stacking them
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_file:
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=int(config.LOG_FILE_MAX_BYTES),
            backupCount=int(config.LOG_FILE_BACKUP_COUNT),
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


# Shared logger; handlers are attached by setup_logger() at startup
check_logger = logging.getLogger("apicheck")
