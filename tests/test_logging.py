"""
Module: test_logging.py

Author: Michael Economou
Date: 2026-10-19

Tests the logging system setup:
- cached loggers are shared and Unicode-safe
- ConfigureLogger writes errors to <name>.log and, when enabled, everything
  to <name>_debug.log
- dev-only records stay out of the console
"""

import logging

import pytest

from mediabox.utils.logging.logger_factory import LoggerFactory, get_cached_logger
from mediabox.utils.logging.logger_helper import DevOnlyFilter, safe_text
from mediabox.utils.logging.logger_setup import ConfigureLogger


@pytest.fixture
def bare_root_logger():
    """Root logger without handlers; restored afterwards."""
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    root.handlers.clear()
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


class TestLoggerFactory:
    """Cached logger creation."""

    def test_same_instance_per_name(self):
        assert get_cached_logger("mediabox.test.a") is get_cached_logger("mediabox.test.a")
        assert get_cached_logger("mediabox.test.a") is not get_cached_logger("mediabox.test.b")

    def test_name_defaults_to_caller_module(self):
        assert get_cached_logger().name == __name__

    def test_global_level(self):
        logger = get_cached_logger("mediabox.test.level")
        try:
            LoggerFactory.set_global_level(logging.WARNING)
            assert logger.level == logging.WARNING
            assert get_cached_logger("mediabox.test.level.new").level == logging.WARNING
        finally:
            LoggerFactory._global_level = None
            logger.setLevel(logging.NOTSET)
            get_cached_logger("mediabox.test.level.new").setLevel(logging.NOTSET)

    def test_messages_reach_caplog(self, caplog):
        logger = get_cached_logger("mediabox.test.caplog")
        with caplog.at_level(logging.DEBUG, logger="mediabox.test.caplog"):
            logger.debug("[Test] rendered %s", "IMG_0001.jpg")
        assert "[Test] rendered IMG_0001.jpg" in caplog.text


class TestHelpers:
    """Unicode replacement and dev-only filtering."""

    def test_safe_text(self):
        assert safe_text("a → b … c") == "a -> b ... c"

    def test_dev_only_filter(self):
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        assert DevOnlyFilter().filter(record)
        record.dev_only = True
        assert not DevOnlyFilter().filter(record)


class TestConfigureLogger:
    """Handler installation."""

    def test_error_and_debug_files(self, bare_root_logger, tmp_path):
        ConfigureLogger(log_name="mbtest", log_dir=tmp_path, debug_file=True)
        logger = get_cached_logger("mediabox.test.files")
        logger.info("info line")
        logger.error("error line")
        for handler in bare_root_logger.handlers:
            handler.flush()

        errors = (tmp_path / "mbtest.log").read_text(encoding="utf-8")
        debug = (tmp_path / "mbtest_debug.log").read_text(encoding="utf-8")
        assert "error line" in errors
        assert "info line" not in errors
        assert "info line" in debug and "error line" in debug

    def test_does_not_duplicate_handlers(self, bare_root_logger, tmp_path):
        ConfigureLogger(log_name="mbtest", log_dir=tmp_path)
        count = len(bare_root_logger.handlers)
        ConfigureLogger(log_name="mbtest", log_dir=tmp_path)
        assert len(bare_root_logger.handlers) == count

    def test_console_level(self, bare_root_logger, tmp_path):
        ConfigureLogger(log_name="mbtest", log_dir=tmp_path, console_level="WARNING")
        console = [
            h for h in bare_root_logger.handlers if type(h) is logging.StreamHandler
        ]
        assert console and console[0].level == logging.WARNING

    def test_default_log_dir(self, bare_root_logger, isolated_data_dir):
        ConfigureLogger(log_name="mbtest")
        assert (isolated_data_dir / "logs" / "mbtest.log").exists()
