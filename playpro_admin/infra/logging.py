"""
Infrastructure layer - logging.

One place that configures the root logger for the dashboard, so every page
and service logs with the same format.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Dict

_LEVELS = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL
}

CONSOLE_FORMAT = '%(asctime)s [%(levelname)s] [%(name)s] %(message)s'
FILE_FORMAT = '%(asctime)s [%(levelname)s] [%(name)s:%(lineno)d] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class LoggerManager:
    """Process-wide logger registry."""

    _loggers: Dict[str, logging.Logger] = {}
    _configured: bool = False
    _log_file: Optional[Path] = None
    _level: int = logging.INFO

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        Return a configured logger.

        Args:
            name: logger name, usually ``__name__``

        Returns:
            the cached ``logging.Logger``
        """
        if not cls._configured:
            cls._configure_logging()

        if name not in cls._loggers:
            cls._loggers[name] = logging.getLogger(name)

        return cls._loggers[name]

    @classmethod
    def configure(cls, level: Optional[str] = None, log_file: Optional[Path] = None) -> None:
        """Apply level / file settings read from the app config.

        Safe to call on every Streamlit rerun; handlers are only added once.
        """
        if log_file is not None and log_file != cls._log_file:
            cls.set_log_file(log_file)
        if not cls._configured:
            cls._configure_logging()
        if level:
            cls.set_level(level)

    @classmethod
    def _configure_logging(cls):
        if cls._configured:
            return

        root_logger = logging.getLogger()
        root_logger.setLevel(cls._level)

        # streamlit / pytest may already own a console handler
        if not root_logger.handlers:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
            root_logger.addHandler(console_handler)

        if cls._log_file:
            cls._add_file_handler(cls._log_file, root_logger)

        cls._configured = True

    @classmethod
    def _add_file_handler(cls, log_file: Path, logger: logging.Logger) -> None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning(f"Could not open log file {log_file}: {e}")

    @classmethod
    def set_log_file(cls, log_file: Path) -> None:
        """Set the log file path; attaches a handler right away when already configured."""
        cls._log_file = log_file
        if cls._configured:
            cls._add_file_handler(log_file, logging.getLogger())

    @classmethod
    def set_level(cls, level: str) -> None:
        """Set the global log level by name. Unknown names are ignored."""
        resolved = _LEVELS.get(str(level).upper())
        if resolved is None:
            return
        cls._level = resolved
        logging.getLogger().setLevel(resolved)

    @classmethod
    def get_all_loggers(cls) -> Dict[str, logging.Logger]:
        return cls._loggers.copy()

    @classmethod
    def reset(cls) -> None:
        """Forget all configuration (tests only)."""
        cls._loggers.clear()
        cls._configured = False
        cls._log_file = None
        cls._level = logging.INFO


def get_logger(name: str) -> logging.Logger:
    """Shortcut for ``LoggerManager.get_logger``."""
    return LoggerManager.get_logger(name)


def set_log_level(level: str) -> None:
    """Shortcut for ``LoggerManager.set_level``."""
    LoggerManager.set_level(level)
