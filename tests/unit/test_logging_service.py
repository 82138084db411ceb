"""Tests for logging service configuration."""

import logging
import tempfile
from pathlib import Path

from duplex_tracker.services.logging import get_log_level, setup_server_logging


class TestServerLogging:
    """Test server logging configuration."""

    def setup_method(self):
        """Save original handlers before each test."""
        self.root_logger = logging.getLogger()
        self.original_handlers = self.root_logger.handlers.copy()
        self.original_level = self.root_logger.level

    def teardown_method(self):
        """Restore original handlers after each test."""
        for handler in self.root_logger.handlers[:]:
            handler.close()
            self.root_logger.removeHandler(handler)
        for handler in self.original_handlers:
            self.root_logger.addHandler(handler)
        self.root_logger.setLevel(self.original_level)

    def test_creates_log_directory(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            log_file = Path(temp_dir) / "nested" / "server.log"
            assert not log_file.parent.exists()

            setup_server_logging(str(log_file))

            assert log_file.parent.exists()

    def test_creates_stdout_and_file_handlers(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            setup_server_logging(str(Path(temp_dir) / "server.log"))

            assert len(self.root_logger.handlers) == 2
            assert any(isinstance(h, logging.FileHandler) for h in self.root_logger.handlers)

    def test_calling_twice_does_not_duplicate_handlers(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            log_file = str(Path(temp_dir) / "server.log")
            setup_server_logging(log_file)
            setup_server_logging(log_file)

            assert len(self.root_logger.handlers) == 2

    def test_level_name_override(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            setup_server_logging(str(Path(temp_dir) / "server.log"), level_name="WARNING")

            assert self.root_logger.level == logging.WARNING
            for handler in self.root_logger.handlers:
                assert handler.level == logging.WARNING

    def test_writes_formatted_lines_to_file(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            log_file = Path(temp_dir) / "server.log"
            setup_server_logging(str(log_file), level_name="INFO")

            logging.getLogger("duplex_tracker.test").info("Created purchase 1")
            for handler in self.root_logger.handlers:
                handler.flush()

            content = log_file.read_text()
            assert "duplex_tracker.test - INFO - Created purchase 1" in content


class TestGetLogLevel:
    def test_known_levels(self):
        assert get_log_level("debug") == logging.DEBUG
        assert get_log_level("ERROR") == logging.ERROR

    def test_unknown_level_falls_back_to_info(self):
        assert get_log_level("LOUD") == logging.INFO
