"""
Unit tests for LoggerManager
"""
import logging
import shutil
import sys
import tempfile
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from playpro_admin.infra.logging import LoggerManager, get_logger, set_log_level


class TestLoggerManager:

    def setup_method(self):
        self.root = logging.getLogger()
        self.original_level = self.root.level
        self.original_handlers = list(self.root.handlers)
        self.temp_dir = Path(tempfile.mkdtemp())
        LoggerManager.reset()

    def teardown_method(self):
        for handler in list(self.root.handlers):
            if handler not in self.original_handlers:
                self.root.removeHandler(handler)
                handler.close()
        self.root.setLevel(self.original_level)
        LoggerManager.reset()
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_loggers_are_cached(self):
        first = get_logger("playpro_admin.test")
        second = get_logger("playpro_admin.test")
        assert first is second
        assert "playpro_admin.test" in LoggerManager.get_all_loggers()

    def test_set_level_by_name(self):
        set_log_level("debug")
        assert self.root.level == logging.DEBUG
        set_log_level("WARNING")
        assert self.root.level == logging.WARNING

    def test_unknown_level_is_ignored(self):
        set_log_level("ERROR")
        set_log_level("chatty")
        assert self.root.level == logging.ERROR

    def test_configure_writes_log_file(self):
        log_file = self.temp_dir / "logs" / "playpro_admin.log"
        LoggerManager.configure(level="INFO", log_file=log_file)

        get_logger("playpro_admin.test").info("hello from the dashboard")
        for handler in self.root.handlers:
            handler.flush()

        assert log_file.exists()
        assert "hello from the dashboard" in log_file.read_text(encoding="utf-8")

    def test_configure_is_idempotent(self):
        log_file = self.temp_dir / "app.log"
        LoggerManager.configure(log_file=log_file)
        count = len(self.root.handlers)
        LoggerManager.configure(log_file=log_file)
        assert len(self.root.handlers) == count


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
