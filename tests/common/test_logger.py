"""Tests for logging utilities."""

import logging

import pytest
from rich.logging import RichHandler

from common.logger import error, get_logger, setup_logging, success, warning


@pytest.fixture
def restore_root_logger():
    """Undo setup_logging changes to the root logger."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestGetLogger:
    """Tests for get_logger function."""

    def test_returns_logger_instance(self):
        """Test that get_logger returns a logger instance."""
        logger = get_logger("sync.test")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "sync.test"

    def test_default_level_is_info(self, monkeypatch):
        """Test that default logging level is INFO."""
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        logger = get_logger("sync.test.default")
        assert logger.level == logging.INFO

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "warning")
        logger = get_logger("sync.test.env_level")
        assert logger.level == logging.WARNING

    def test_custom_level(self):
        """Test that custom logging level can be set."""
        logger = get_logger("sync.test.custom", level="DEBUG")
        assert logger.level == logging.DEBUG

    def test_logger_has_rich_handler(self):
        logger = get_logger("sync.test.handler")
        assert any(isinstance(h, RichHandler) for h in logger.handlers)

    def test_reuses_existing_logger(self):
        """Test that get_logger reuses existing logger instance."""
        logger1 = get_logger("sync.test.reuse")
        logger2 = get_logger("sync.test.reuse")
        assert logger1 is logger2
        # Should not add duplicate handlers
        assert len(logger2.handlers) == 1

    def test_logging_output(self, caplog):
        """Test that logging actually produces output."""
        logger = get_logger("sync.test.output")

        with caplog.at_level(logging.INFO):
            logger.info("Traversing unit octo/hello")

        assert "Traversing unit octo/hello" in caplog.text

    def test_info_level_filters_debug(self, caplog):
        """Test that INFO level filters out DEBUG messages."""
        logger = get_logger("sync.test.filter", level="INFO")

        with caplog.at_level(logging.DEBUG):
            logger.debug("This should not appear")
            logger.info("This should appear")

        assert "This should not appear" not in caplog.text
        assert "This should appear" in caplog.text


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_installs_single_rich_handler(self, restore_root_logger, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        setup_logging(level="DEBUG")
        setup_logging(level="DEBUG")

        rich_handlers = [h for h in restore_root_logger.handlers if isinstance(h, RichHandler)]
        assert len(rich_handlers) == 1
        assert restore_root_logger.level == logging.DEBUG

    def test_records_print_once(self, restore_root_logger, capsys, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        early = get_logger("sync.test.before_setup")
        setup_logging()
        late = get_logger("sync.test.after_setup")

        early.info("Saved checkpoint for sample")
        late.info("Cycle 3 complete")

        out = capsys.readouterr().out
        assert out.count("Saved checkpoint for sample") == 1
        assert out.count("Cycle 3 complete") == 1
        assert early.handlers == []
        assert late.handlers == []

    def test_writes_log_file(self, restore_root_logger, tmp_path, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        log_file = tmp_path / "sync.log"
        setup_logging(level="INFO", log_file=str(log_file))

        logging.getLogger("sync.test.file").info("Poll of sample complete")
        for handler in restore_root_logger.handlers:
            handler.flush()

        content = log_file.read_text()
        assert "sync.test.file - INFO - Poll of sample complete" in content


class TestConsoleHelpers:
    """Tests for status line helpers."""

    def test_success_prints_to_stdout(self, capsys):
        success("Checkpoint cleared for sample")
        assert "Checkpoint cleared for sample" in capsys.readouterr().out

    def test_warning_prints_to_stdout(self, capsys):
        warning("Interrupted")
        assert "Interrupted" in capsys.readouterr().out

    def test_error_prints_to_stderr(self, capsys):
        error("GitHub rejected the credentials")
        captured = capsys.readouterr()
        assert "GitHub rejected the credentials" in captured.err
        assert "GitHub rejected the credentials" not in captured.out
