"""
Tests for logging setup — level resolution, handlers, file output.
"""

import logging
from pathlib import Path

import pytest

from nephyra.core.observability.logging_config import resolve_level, setup_logging


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestResolveLevel:

    def test_debug_wins(self):
        assert resolve_level(debug=True, verbose=True, quiet=True) == "DEBUG"

    def test_verbose(self):
        assert resolve_level(verbose=True, quiet=True) == "INFO"

    def test_quiet(self):
        assert resolve_level(quiet=True) == "ERROR"

    def test_env(self, monkeypatch):
        monkeypatch.setenv("NEPHYRA_LOG_LEVEL", "INFO")
        assert resolve_level() == "INFO"

    def test_default(self, monkeypatch):
        monkeypatch.delenv("NEPHYRA_LOG_LEVEL", raising=False)
        assert resolve_level() == "WARNING"


class TestSetupLogging:

    def test_console_handler(self):
        setup_logging("INFO")
        root = logging.getLogger()

        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert root.handlers[0].level == logging.INFO

    def test_unknown_level_falls_back(self):
        setup_logging("LOUD")
        assert logging.getLogger().level == logging.WARNING

    def test_repeat_calls_do_not_stack_handlers(self):
        setup_logging("WARNING")
        setup_logging("DEBUG")
        assert len(logging.getLogger().handlers) == 1

    def test_file_output(self, tmp_path: Path):
        log_file = tmp_path / "nephyra.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2

        logging.getLogger("nephyra.test").debug("file detail")
        for h in root.handlers:
            h.flush()
        assert "file detail" in log_file.read_text()

    def test_unwritable_log_file(self, tmp_path: Path):
        setup_logging("WARNING", log_file=str(tmp_path / "missing" / "dir" / "x.log"))
        assert len(logging.getLogger().handlers) == 1
        assert logging.getLogger().level == logging.WARNING

    def test_console_format_follows_level(self):
        setup_logging("WARNING")
        assert logging.getLogger().handlers[0].formatter._fmt == "%(levelname)s: %(message)s"
        setup_logging("DEBUG")
        assert "%(lineno)d" in logging.getLogger().handlers[0].formatter._fmt

    def test_adapter_logger_level(self):
        setup_logging("DEBUG")
        assert logging.getLogger("nephyra.adapters").level == logging.DEBUG
        setup_logging("WARNING")
        assert logging.getLogger("nephyra.adapters").level == logging.INFO
