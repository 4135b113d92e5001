import logging
from logging import FileHandler, Handler, Logger, StreamHandler
import os
import re
from typing import Any

from hkjobs.main.config import config

LOG_DIR = config.app.LOG_DIR or os.path.join(os.path.dirname(__file__), "..", "logs")
LOG_FILE = os.path.join(LOG_DIR, "hkjobs.log")

logging_format = "%(asctime)s [%(levelname)s]|[%(process)d]| %(name)s: %(message)s"
time_logging_format = "%Y-%m-%d %H:%M:%S"

log_level = getattr(logging, config.app.LOG_LEVEL, logging.INFO)
file_log_level = getattr(logging, config.app.LOG_LEVEL_FILE, logging.WARNING)

_BEARER_PATTERN = re.compile(r"(Bearer\s+)[A-Za-z0-9\-_.=+/]+", re.IGNORECASE)
_JWT_PATTERN = re.compile(r"\beyJ[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]*")


class RedactTokensFilter(logging.Filter):
    """Masks bearer credentials and JWT-shaped strings in rendered messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _JWT_PATTERN.sub("***", _BEARER_PATTERN.sub(r"\1***", message))
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def _configure(handler: Handler, level: int, fmt: str = logging_format) -> Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, time_logging_format))
    handler.addFilter(RedactTokensFilter())
    return handler


def get_file_handler() -> FileHandler:
    os.makedirs(LOG_DIR, exist_ok=True)
    return _configure(FileHandler(LOG_FILE, "a", "utf-8"), file_log_level)  # type: ignore[return-value]


def get_stream_handler() -> StreamHandler:  # type: ignore
    return _configure(StreamHandler(), log_level)


def get_logger(name: Any, *, plain_format: bool = False) -> Logger:
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    logger.setLevel(log_level)

    if plain_format:
        logger.addHandler(
            _configure(StreamHandler(), log_level, "%(asctime)s [%(process)d]| %(message)s")
        )
    else:
        if config.app.LOG_TO_FILE:
            logger.addHandler(get_file_handler())
        logger.addHandler(get_stream_handler())

    logger.propagate = False
    return logger
