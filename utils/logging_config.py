"""
Logging configuration for the music organizer.

The per-file report goes to stdout through the reporter; log records go to
stderr and, optionally, to a rotating log file.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
APP_LOGGER_NAME = 'music-organize'


def setup_logging(
    level: str = "WARNING",
    log_file: Optional[Path] = None,
    max_file_size: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
    console_output: bool = True
) -> logging.Logger:
    """
    Set up logging for a run.

    Args:
        level: Logging level ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
        log_file: Path to log file (optional)
        max_file_size: Maximum log file size in bytes before rotation
        backup_count: Number of backup files to keep
        console_output: Whether to output logs to stderr

    Returns:
        Configured application logger
    """
    # Clear any existing handlers
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f'Invalid log level: {level}')

    root_logger.setLevel(numeric_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    # File handler with rotation
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=str(log_file),
            maxBytes=max_file_size,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(numeric_level)

    app_logger.debug(f"Logging initialized - Level: {level}")
    if log_file:
        app_logger.info(f"Log file: {log_file}")

    return app_logger


def configure_library_logging():
    """Reduce noise from third-party libraries."""
    logging.getLogger('mutagen').setLevel(logging.WARNING)
