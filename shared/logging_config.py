"""Logging configuration for the Plugin Release Diff tool."""

import logging
import os
import sys
from typing import Optional


LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for different log levels."""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        if sys.stdout.isatty():  # Only use colors for terminal output
            record = logging.makeLogRecord(record.__dict__)
            log_color = self.COLORS.get(record.levelname, '')
            record.levelname = f"{log_color}{record.levelname}{self.RESET}"
            record.name = f"\033[34m{record.name}{self.RESET}"  # Blue for logger name

        return super().format(record)


def setup_logging(log_level: Optional[str] = None, verbose: bool = False) -> None:
    """Setup centralized logging configuration for all workers.

    Args:
        log_level: Level name; falls back to the LOG_LEVEL environment variable
        verbose: Force DEBUG output regardless of log_level
    """
    if log_level is None:
        log_level = os.getenv("LOG_LEVEL", "INFO")
    if verbose:
        log_level = "DEBUG"

    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout)
        ],
        force=True,
    )

    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        if isinstance(handler, logging.StreamHandler):
            handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    configure_worker_loggers(level)
    configure_external_loggers()


def configure_worker_loggers(level: int = logging.INFO) -> None:
    """Configure logging for worker and tool modules."""
    worker_loggers = [
        'workers.supervisor',
        'workers.snapshot_collector',
        'workers.diff_reporter',
        'shared',
        'tools',
    ]

    for logger_name in worker_loggers:
        logging.getLogger(logger_name).setLevel(level)


def configure_external_loggers() -> None:
    """Configure logging levels for external libraries."""
    external_loggers = {
        'git': logging.WARNING,
        'urllib3': logging.WARNING,
    }

    for logger_name, level in external_loggers.items():
        logging.getLogger(logger_name).setLevel(level)


def get_worker_logger(worker_name: str) -> logging.Logger:
    """Get a properly configured logger for a worker."""
    return logging.getLogger(f"workers.{worker_name}")


def get_tool_logger(tool_name: str) -> logging.Logger:
    """Get a properly configured logger for a tool."""
    return logging.getLogger(f"tools.{tool_name}")
