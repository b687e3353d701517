# tests/test_logging_config.py

"""Tests for the per-run logging configuration."""

import logging
import threading
import unittest

from src.config.logging_config import ROOT_LOGGER_NAME, setup_logging


class TestLoggingConfig(unittest.TestCase):
    """Verify logging setup behaviour."""

    def setUp(self) -> None:
        """Clean up the catalog_browser logger before each test."""
        logging.getLogger(ROOT_LOGGER_NAME).handlers.clear()

    def tearDown(self) -> None:
        """Detach handlers so later tests log nowhere."""
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        for handler in root_logger.handlers:
            handler.close()
        root_logger.handlers.clear()

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
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        file_handlers = [
            h
            for h in root_logger.handlers
            if isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(len(file_handlers), 1)
        self.assertEqual(file_handlers[0].level, logging.DEBUG)

    def test_console_handler_level_warning(self) -> None:
        """Console handler should be set to WARNING level."""
        setup_logging()
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        stream_handlers: list[logging.Handler] = [
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
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        count_before = len(root_logger.handlers)
        setup_logging()
        self.assertEqual(len(root_logger.handlers), count_before)

    def test_module_loggers_are_children(self) -> None:
        """Module loggers propagate into the project logger."""
        setup_logging()
        child = logging.getLogger(f"{ROOT_LOGGER_NAME}.store")
        self.assertTrue(child.propagate)
        self.assertEqual(child.parent, logging.getLogger(ROOT_LOGGER_NAME))

    def test_file_records_name_worker_thread(self) -> None:
        """Records from to_thread workers say which thread wrote them."""
        log_path = setup_logging()
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        worker = threading.Thread(
            target=lambda: logging.getLogger(
                f"{ROOT_LOGGER_NAME}.store"
            ).debug("cached product 7"),
            name="cache-worker",
        )
        worker.start()
        worker.join()
        for handler in root_logger.handlers:
            handler.flush()

        text = log_path.read_text(encoding="utf-8")
        line = next(ln for ln in text.splitlines() if "cached product 7" in ln)
        self.assertIn("cache-worker", line)
        self.assertIn(f"{ROOT_LOGGER_NAME}.store", line)

    def test_log_file_inside_logs_dir(self) -> None:
        """Log file is created inside the logs/ directory."""
        log_path = setup_logging()
        self.assertEqual(log_path.parent.name, "logs")


if __name__ == "__main__":
    unittest.main()
