"""Module: logger_factory.py.

Author: Michael Economou
Date: 2026-10-19

Logger factory with caching.
Maintains a single logger instance per module name behind a lock so worker
threads and the request path never race on logger creation.
"""

import inspect
import logging
import threading

from mediabox.utils.logging.logger_helper import get_logger


class LoggerFactory:
    """Thread-safe logger factory with caching."""

    _loggers: dict[str, logging.Logger] = {}
    _lock = threading.Lock()
    _global_level: int | None = None

    @classmethod
    def get_logger(cls, name: str | None = None) -> logging.Logger:
        """Get or create a cached logger for the given name.

        Args:
            name: Logger name, typically __name__ from calling module

        Returns:
            logging.Logger: Cached logger instance

        """
        if name is None:
            frame = inspect.currentframe()
            caller = frame.f_back if frame is not None else None
            # skip get_cached_logger()
            while caller is not None and caller.f_globals.get("__name__") == __name__:
                caller = caller.f_back
            name = caller.f_globals.get("__name__", "unknown") if caller else "unknown"

        with cls._lock:
            if name not in cls._loggers:
                logger = get_logger(name)
                if cls._global_level is not None:
                    logger.setLevel(cls._global_level)
                cls._loggers[name] = logger

            return cls._loggers[name]

    @classmethod
    def set_global_level(cls, level: int) -> None:
        """Set logging level for all cached loggers (and future ones)."""
        with cls._lock:
            cls._global_level = level
            for logger in cls._loggers.values():
                logger.setLevel(level)

    @classmethod
    def get_logger_count(cls) -> int:
        """Get number of cached loggers."""
        with cls._lock:
            return len(cls._loggers)

    @classmethod
    def clear_cache(cls) -> None:
        """Forget all cached loggers (the loggers themselves stay registered)."""
        with cls._lock:
            cls._loggers.clear()


def get_cached_logger(name: str | None = None) -> logging.Logger:
    """Convenience function for getting a cached logger.

    Args:
        name: Logger name

    Returns:
        logging.Logger: Cached logger instance

    """
    return LoggerFactory.get_logger(name)
