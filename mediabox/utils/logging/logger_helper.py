"""Module: logger_helper.py.

Author: Michael Economou
Date: 2026-10-19

Helpers for retrieving loggers that are safe to use from worker threads and
from consoles that cannot encode every character in a file name.

Functions:
    get_logger(name): Returns a patched logger with Unicode-safe methods.
    safe_text(text): Replaces problematic Unicode characters with ASCII.
    safe_log(logger_func, message): Logs, falling back to ASCII if needed.

DevOnlyFilter hides records logged with extra={"dev_only": True} from the
console unless SHOW_DEV_ONLY_IN_CONSOLE is enabled.
"""

import logging
import re
from functools import partial

from mediabox.config import SHOW_DEV_ONLY_IN_CONSOLE

_REPLACEMENTS = {
    "→": "->",
    "—": "--",
    "–": "-",
    "…": "...",
}
_REPLACEMENT_PATTERN = re.compile("|".join(map(re.escape, _REPLACEMENTS.keys())))


def safe_text(text: str) -> str:
    """Replace unsupported Unicode characters with ASCII-safe alternatives."""
    return _REPLACEMENT_PATTERN.sub(lambda m: _REPLACEMENTS[m.group(0)], text)


def safe_log(logger_func, message, *args, **kwargs):
    """Log through logger_func, retrying with ASCII text on UnicodeEncodeError.

    Args:
        logger_func: A bound logger method such as logger.info.
        message: The message (or %-format string) to log.

    """
    try:
        if not isinstance(message, str):
            message = repr(message)
        logger_func(message, *args, **kwargs)
    except UnicodeEncodeError:
        logger_func(safe_text(str(message)), *args, **kwargs)


def patch_logger_safe_methods(logger: logging.Logger) -> None:
    """Replace the logger's level methods with safe_log-wrapped versions."""
    for method_name in ("debug", "info", "warning", "error", "critical", "exception"):
        orig_func = getattr(logger, method_name)
        setattr(logger, method_name, partial(safe_log, orig_func))


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger that propagates to the root logger.

    Handlers are configured once on the root logger (see logger_setup), so
    named loggers carry none of their own.

    Args:
        name: Logger name, usually the calling module's __name__.

    Returns:
        logging.Logger: Patched logger instance.

    """
    logger = logging.getLogger(name or __name__)
    logger.propagate = True

    if logger.handlers:
        logger.handlers.clear()

    if not getattr(logger, "_patched_for_safe_log", False):
        patch_logger_safe_methods(logger)
        logger._patched_for_safe_log = True

    return logger


class DevOnlyFilter(logging.Filter):
    """Drop dev-only records unless SHOW_DEV_ONLY_IN_CONSOLE is set."""

    def filter(self, record: logging.LogRecord) -> bool:
        if SHOW_DEV_ONLY_IN_CONSOLE:
            return True
        return not getattr(record, "dev_only", False)
