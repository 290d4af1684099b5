"""Module: logger_setup.py.

Author: Michael Economou
Date: 2026-10-19

ConfigureLogger sets up the root logger once per process: a console handler
(INFO+ by default, dev-only records filtered), a rotating error log, and an
optional rotating debug log. Levels and sizes come from mediabox.config.
"""

import contextlib
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from mediabox.config import (
    LOG_CONSOLE_LEVEL,
    LOG_DATE_FORMAT,
    LOG_DEBUG_FILE_BACKUP_COUNT,
    LOG_DEBUG_FILE_ENABLED,
    LOG_DEBUG_FILE_MAX_BYTES,
    LOG_FILE_BACKUP_COUNT,
    LOG_FILE_LEVEL,
    LOG_FILE_MAX_BYTES,
    LOG_FORMAT,
    LOG_TO_CONSOLE,
    LOG_TO_FILE,
)
from mediabox.utils.logging.logger_helper import DevOnlyFilter


class ConfigureLogger:
    """Configures application-wide logging on the root logger.

    Handlers are only installed when the root logger has none, so creating a
    second ConfigureLogger (tests, embedded use) does not duplicate output.
    """

    def __init__(
        self,
        log_name: str = "mediabox",
        log_dir: str | Path | None = None,
        console_level: str | int = LOG_CONSOLE_LEVEL,
        file_level: str | int = LOG_FILE_LEVEL,
        debug_file: bool = LOG_DEBUG_FILE_ENABLED,
    ):
        """Initialize and configure the root logger.

        Args:
            log_name: Base name for the log files.
            log_dir: Directory for log files (None = AppPaths logs dir).
            console_level: Level name or number for the console handler.
            file_level: Level name or number for the error log.
            debug_file: Whether to add a DEBUG-level rotating file.

        """
        self.logger = logging.getLogger()
        self.logger.setLevel(logging.DEBUG)

        if self.logger.handlers:
            return

        if LOG_TO_CONSOLE:
            self._setup_console_handler(_to_level(console_level))

        if LOG_TO_FILE or debug_file:
            if log_dir is None:
                from mediabox.utils.paths import AppPaths

                log_dir = AppPaths.get_logs_dir()
            log_dir = Path(log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)

            if LOG_TO_FILE:
                self._setup_file_handler(
                    log_dir / f"{log_name}.log",
                    _to_level(file_level),
                    LOG_FILE_MAX_BYTES,
                    LOG_FILE_BACKUP_COUNT,
                )
            if debug_file:
                self._setup_file_handler(
                    log_dir / f"{log_name}_debug.log",
                    logging.DEBUG,
                    LOG_DEBUG_FILE_MAX_BYTES,
                    LOG_DEBUG_FILE_BACKUP_COUNT,
                )

    def _setup_console_handler(self, level: int) -> None:
        """Set up console handler with UTF-8 output and DevOnlyFilter."""
        console_handler = logging.StreamHandler(sys.stdout)

        with contextlib.suppress(Exception):
            console_handler.stream.reconfigure(encoding="utf-8")

        console_handler.setLevel(level)
        console_handler.addFilter(DevOnlyFilter())
        console_handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        self.logger.addHandler(console_handler)

    def _setup_file_handler(
        self, path: Path, level: int, max_bytes: int, backup_count: int
    ) -> None:
        """Set up a rotating file handler."""
        file_handler = RotatingFileHandler(
            path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        self.logger.addHandler(file_handler)


def _to_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.INFO)
