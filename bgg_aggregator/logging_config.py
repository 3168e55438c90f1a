"""
Logging setup for the aggregator CLI.

Everything goes to stderr so stdout stays clean for table or JSON output.
Each run also gets its own log file when the log directory is writable.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional, Union

from .config import DEFAULT_LOGS_DIR, LOG_DIR_ENV

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Name given to every handler installed here
HANDLER_NAME = "bgg_aggregator"

# Chatty per-request loggers of the HTTP stack
QUIET_LOGGERS = ("httpx", "httpcore")


def get_logs_dir() -> Path:
    """Directory for per-run log files: $BGG_LOG_DIR, else ./bgg_aggregator_logs."""
    return Path(os.environ.get(LOG_DIR_ENV) or DEFAULT_LOGS_DIR).expanduser()


def resolve_log_path(log_file: Union[str, Path]) -> Path:
    """Place a bare file name in the logs directory; absolute paths are kept."""
    log_path = Path(log_file).expanduser()
    if log_path.is_absolute():
        return log_path
    return get_logs_dir() / log_path.name


def _file_handler(log_file: Union[str, Path]) -> Optional[logging.FileHandler]:
    log_path = resolve_log_path(log_file)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(str(log_path))
    except OSError as e:
        print(f"Warning: cannot write log file {log_path} ({e}); logging to stderr only",
              file=sys.stderr)
        return None


def setup_logging(log_file: Optional[Union[str, Path]] = "bgg_aggregator.log",
                  level: int = logging.INFO) -> None:
    """
    Configure the root logger once per process.

    Handlers installed by other code (a host application, pytest) are left
    alone; a second call is a no-op only if ours are already in place.

    Args:
        log_file: File name (placed in the logs directory), absolute path,
            or None for stderr only
        level: Logging level
    """
    root_logger = logging.getLogger()
    if any(h.get_name() == HANDLER_NAME for h in root_logger.handlers):
        return

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        file_handler = _file_handler(log_file)
        if file_handler is not None:
            handlers.append(file_handler)

    root_logger.setLevel(level)
    for handler in handlers:
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(formatter)
        handler.setLevel(level)
        root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
