"""
Unit tests for ftp_unified.logger module.

Tests cover:
- FileHandler creation when file is specified
- StreamHandler creation when console=True
- Log level setting
- Log format (timestamp, level, thread name)
"""

import logging
import sys
from pathlib import Path

import pytest

from ftp_unified.config import LogConfig
from ftp_unified.logger import LOG_FORMAT, PARAMIKO_LOGGER, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Put the root logger back the way pytest configured it."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    paramiko_level = logging.getLogger(PARAMIKO_LOGGER).level
    level = root_logger.level
    yield
    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    logging.getLogger(PARAMIKO_LOGGER).setLevel(paramiko_level)


def _stream_handlers():
    return [
        h
        for h in logging.getLogger().handlers
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
    ]


def _file_handlers():
    return [h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)]


class TestSetupLoggingFileHandler:
    """Tests for file handler creation."""

    def test_file_handler_created_when_file_specified(self, tmp_path: Path):
        log_file = tmp_path / "test.log"

        setup_logging(LogConfig(level="INFO", file=str(log_file), console=False))

        file_handlers = _file_handlers()
        assert len(file_handlers) == 1
        assert Path(file_handlers[0].baseFilename) == log_file

    def test_file_handler_not_created_when_file_empty(self):
        setup_logging(LogConfig(level="INFO", file="", console=True))

        assert _file_handlers() == []

    def test_file_handler_creates_parent_directories(self, tmp_path: Path):
        nested_log_file = tmp_path / "subdir" / "nested" / "test.log"

        setup_logging(LogConfig(level="INFO", file=str(nested_log_file), console=False))

        assert nested_log_file.parent.exists()


class TestSetupLoggingConsoleHandler:
    """Tests for console handler creation."""

    def test_console_handler_uses_stderr(self, tmp_path: Path):
        setup_logging(LogConfig(level="INFO", file=str(tmp_path / "test.log"), console=True))

        stream_handlers = _stream_handlers()
        assert len(stream_handlers) == 1
        assert stream_handlers[0].stream is sys.stderr

    def test_console_handler_not_created_when_console_false(self, tmp_path: Path):
        setup_logging(LogConfig(level="INFO", file=str(tmp_path / "test.log"), console=False))

        assert _stream_handlers() == []


class TestSetupLoggingLevel:
    """Tests for log level setting."""

    @pytest.mark.parametrize(
        "level_str,expected_level",
        [
            ("DEBUG", logging.DEBUG),
            ("INFO", logging.INFO),
            ("WARNING", logging.WARNING),
            ("ERROR", logging.ERROR),
        ],
    )
    def test_log_level_set_correctly(self, tmp_path: Path, level_str: str, expected_level: int):
        setup_logging(LogConfig(level=level_str, file=str(tmp_path / "test.log"), console=False))

        assert logging.getLogger().level == expected_level

    def test_log_level_case_insensitive(self, tmp_path: Path):
        setup_logging(LogConfig(level="debug", file=str(tmp_path / "test.log"), console=False))

        assert logging.getLogger().level == logging.DEBUG

    def test_invalid_log_level_defaults_to_info(self, tmp_path: Path):
        setup_logging(LogConfig(level="LOUD", file=str(tmp_path / "test.log"), console=False))

        assert logging.getLogger().level == logging.INFO


class TestSetupLoggingFormat:
    """Tests for the log line format."""

    def test_log_format_constant_matches_expected(self):
        assert LOG_FORMAT == "%(asctime)s - %(levelname)s - %(threadName)s - %(message)s"

    def test_written_line_contains_level_thread_and_message(self, tmp_path: Path):
        log_file = tmp_path / "test.log"
        setup_logging(LogConfig(level="INFO", file=str(log_file), console=False))

        logging.getLogger("ftp_unified.test").warning("Upload of %s failed", "report.pdf")
        for handler in _file_handlers():
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert " - WARNING - MainThread - Upload of report.pdf failed" in content

    def test_existing_handlers_cleared(self, tmp_path: Path):
        logging.getLogger().addHandler(logging.NullHandler())

        setup_logging(LogConfig(level="INFO", file=str(tmp_path / "test.log"), console=False))

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.FileHandler)


class TestSetupLoggingParamiko:
    """Tests for how the SSH library's logger is tuned."""

    def test_paramiko_quieted_above_debug(self, tmp_path: Path):
        setup_logging(LogConfig(level="INFO", file=str(tmp_path / "test.log"), console=False))

        assert logging.getLogger(PARAMIKO_LOGGER).level == logging.WARNING

    def test_paramiko_follows_root_at_debug(self, tmp_path: Path):
        setup_logging(LogConfig(level="DEBUG", file=str(tmp_path / "test.log"), console=False))

        paramiko_logger = logging.getLogger(PARAMIKO_LOGGER)
        assert paramiko_logger.level == logging.NOTSET
        assert paramiko_logger.getEffectiveLevel() == logging.DEBUG
