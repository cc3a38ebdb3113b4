# tests/test_logging_config.py

"""Tests for the per-run logging configuration."""

import logging
import unittest

from storefront.config.logging_config import setup_logging


def _reset_logger() -> None:
    root_logger = logging.getLogger("storefront")
    for handler in list(root_logger.handlers):
        handler.close()
        root_logger.removeHandler(handler)


class TestLoggingConfig(unittest.TestCase):
    """Verify logging setup behaviour."""

    def setUp(self) -> None:
        """Clean up the storefront logger before each test."""
        _reset_logger()

    def tearDown(self) -> None:
        _reset_logger()

    def test_setup_creates_log_file(self) -> None:
        """setup_logging returns a path that exists on disk."""
        log_path = setup_logging()
        self.assertTrue(log_path.exists())

    def test_log_file_naming_convention(self) -> None:
        """Log file name matches run_YYYYMMDD_HHMMSS.log format."""
        log_path = setup_logging()
        self.assertRegex(log_path.name, r"^run_\d{8}_\d{6}\.log$")

    def test_file_handler_level_debug(self) -> None:
        """File handler should be set to DEBUG level."""
        setup_logging()
        root_logger = logging.getLogger("storefront")
        file_handlers = [
            h for h in root_logger.handlers if isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(len(file_handlers), 1)
        self.assertEqual(file_handlers[0].level, logging.DEBUG)

    def test_console_handler_level_warning(self) -> None:
        """Console handler should be set to WARNING level."""
        setup_logging()
        root_logger = logging.getLogger("storefront")
        stream_handlers = [
            h
            for h in root_logger.handlers
            if isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(len(stream_handlers), 1)
        self.assertEqual(stream_handlers[0].level, logging.WARNING)

    def test_repeated_calls_no_duplicate_handlers(self) -> None:
        """Calling setup_logging twice does not duplicate handlers."""
        setup_logging()
        root_logger = logging.getLogger("storefront")
        count_before = len(root_logger.handlers)
        setup_logging()
        self.assertEqual(len(root_logger.handlers), count_before)

    def test_root_logger_level_is_debug(self) -> None:
        """The storefront logger is set to DEBUG."""
        setup_logging()
        self.assertEqual(logging.getLogger("storefront").level, logging.DEBUG)

    def test_child_loggers_reach_file(self) -> None:
        """Records from storefront.* modules land in the run's log file."""
        log_path = setup_logging()
        logging.getLogger("storefront.cart").info("cart line added")
        for handler in logging.getLogger("storefront").handlers:
            handler.flush()
        self.assertIn("cart line added", log_path.read_text(encoding="utf-8"))

    def test_log_file_inside_logs_dir(self) -> None:
        """Log file is created inside the logs/ directory."""
        log_path = setup_logging()
        self.assertEqual(log_path.parent.name, "logs")


if __name__ == "__main__":
    unittest.main()
