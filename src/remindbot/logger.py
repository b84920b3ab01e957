"""Logging setup (loguru).

Levels: TRACE/DEBUG/INFO/WARNING/ERROR/CRITICAL, FATAL is accepted as CRITICAL.

setup_logging() installs three sinks (colored stderr, a rotating log file, and
a separate error file) and routes the standard library's logging into them,
so records from python-telegram-bot and httpx end up in the same files.
"""

from __future__ import annotations

import inspect
import logging
import sys
from pathlib import Path
from typing import Literal, Union

from loguru import logger

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "FATAL"]

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level:<8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | "
    "{name}:{function}:{line} - {message}"
)

_LEVEL_ALIAS = {"FATAL": "CRITICAL"}

# httpx logs every long-poll request at INFO
_NOISY_LOGGERS = {"httpx": logging.WARNING, "httpcore": logging.WARNING}


class InterceptHandler(logging.Handler):
    """Forwards standard library log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk back to the frame that issued the logging call
        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _level(level: Union[str, LogLevel]) -> str:
    name = str(level).upper()
    return _LEVEL_ALIAS.get(name, name)


def setup_logging(
    log_level: LogLevel,
    log_file: Union[str, Path],
    console_level: LogLevel = "INFO",
) -> None:
    log_file = Path(log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    error_log_file = log_file.with_name(f"{log_file.stem}_error{log_file.suffix}")

    # Full log kept for a month, errors alone for three; both rotate at 10 MB
    files = [(log_file, _level(log_level), "30 days"), (error_log_file, "ERROR", "90 days")]
    handlers = [{"sink": sys.stderr, "level": _level(console_level), "format": CONSOLE_FORMAT, "colorize": True}]
    handlers += [
        {
            "sink": path,
            "level": level,
            "format": FILE_FORMAT,
            "rotation": "10 MB",
            "retention": retention,
            "compression": "zip",
            "encoding": "utf-8",
        }
        for path, level, retention in files
    ]
    logger.configure(handlers=handlers)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name, level in _NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


__all__ = ["setup_logging", "logger", "LogLevel", "InterceptHandler"]
