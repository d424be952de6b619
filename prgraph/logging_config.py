# Logging configuration

import logging
import sys
from typing import Optional, TextIO
from pathlib import Path
from logging.handlers import RotatingFileHandler

LOGGER_NAME = "prgraph"
DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


class ColoredFormatter(logging.Formatter):
    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, fmt: Optional[str] = None, use_color: bool = True):
        super().__init__(fmt)
        self.use_color = use_color

    def format(self, record):
        if not self.use_color:
            return super().format(record)
        # Other handlers share the record, so colour a copy
        color = self.COLORS.get(record.levelname, '')
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def _is_terminal(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def _file_handler(
    log_file: str,
    fmt: str,
    max_file_size_mb: int,
    backup_count: int
) -> Optional[logging.Handler]:
    try:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            log_file, maxBytes=max_file_size_mb * 1024 * 1024, backupCount=backup_count
        )
    except OSError as e:
        logging.getLogger(LOGGER_NAME).warning(f"Cannot open log file {log_file}: {e}")
        return None
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure_logging(
    level: str = "WARNING",
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
    max_file_size_mb: int = 10,
    backup_count: int = 3,
    stream: Optional[TextIO] = None
) -> None:
    """
    Route ``prgraph.*`` loggers to stderr and optionally a rotating file.

    Level names are case-insensitive; an unknown name falls back to WARNING.
    A log file that cannot be opened is reported on the console and skipped.
    """
    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(getattr(logging, str(level).upper(), logging.WARNING))

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    fmt = format_string or DEFAULT_FORMAT
    stream = stream or sys.stderr
    console = logging.StreamHandler(stream)
    console.setFormatter(ColoredFormatter(fmt, use_color=_is_terminal(stream)))
    root.addHandler(console)

    if log_file:
        file_handler = _file_handler(log_file, fmt, max_file_size_mb, backup_count)
        if file_handler is not None:
            root.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    if not name.startswith(LOGGER_NAME):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)


configure_logging()
