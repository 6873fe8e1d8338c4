"""
Logging Setup Tests for the Synacor VM: handlers, levels, log files.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging
import pytest
from rich.logging import RichHandler
from synacor_vm.log_setup import LOG_NAME, reset_logging, setup_logging, verbosity_level


@pytest.fixture(autouse=True)
def clean_logger():
    reset_logging()
    yield
    reset_logging()


def _handlers():
    return logging.getLogger(LOG_NAME).handlers


class TestVerbosity:
    def test_levels(self):
        assert verbosity_level(0) == logging.WARNING
        assert verbosity_level(1) == logging.INFO
        assert verbosity_level(2) == logging.DEBUG
        assert verbosity_level(5) == logging.DEBUG


class TestConsoleHandler:
    def test_rich_by_default(self):
        logger = setup_logging()
        assert len(_handlers()) == 1
        assert isinstance(_handlers()[0], RichHandler)
        assert _handlers()[0].level == logging.WARNING
        assert logger.level == logging.WARNING

    def test_plain_stream_handler(self):
        setup_logging(verbose=1, rich_console=False)
        (handler,) = _handlers()
        assert type(handler) is logging.StreamHandler
        assert handler.level == logging.INFO
        assert "%(levelname)-7s" in handler.formatter._fmt


class TestLogFile:
    def test_file_gets_debug_and_banner(self, tmp_path):
        logger = setup_logging(log_dir=tmp_path / "logs")
        assert logger.level == logging.DEBUG
        logging.getLogger(f"{LOG_NAME}.machine").debug("pc: 0 instruction: noop")
        reset_logging()

        (log_file,) = (tmp_path / "logs").iterdir()
        assert log_file.name.startswith(f"{LOG_NAME}_")
        assert log_file.suffix == ".log"
        text = log_file.read_text(encoding="utf-8")
        assert "Logger initialized: synacor_vm" in text
        assert "| DEBUG   | synacor_vm.machine |" in text
        assert "pc: 0 instruction: noop" in text

    def test_second_call_replaces_handlers(self, tmp_path):
        setup_logging(log_dir=tmp_path / "first")
        setup_logging(verbose=2, log_dir=tmp_path / "second")
        assert len(_handlers()) == 2
        assert (tmp_path / "second").is_dir()
        assert any(h.level == logging.DEBUG and not isinstance(h, logging.FileHandler)
                   for h in _handlers())

    def test_reset_closes_file(self, tmp_path):
        setup_logging(log_dir=tmp_path)
        (fh,) = [h for h in _handlers() if isinstance(h, logging.FileHandler)]
        reset_logging()
        assert _handlers() == []
        assert fh.stream is None
