"""
Infrastructure layer: logging, configuration, errors and serialization.
"""

from .logging import LoggerManager, get_logger, set_log_level
from .exceptions import (
    PlayproError,
    ConfigError,
    ValidationError,
    NetworkError,
    APIError,
    AuthenticationError,
    UnprocessableEntityError,
    FileOperationError,
    flatten_validation_errors,
    extract_error_message,
    handle_errors,
    handle_async_errors,
    ErrorHandler,
)
from .serialization import Serializer, safe_json_loads
from .config import ConfigManager

__all__ = [
    "LoggerManager",
    "get_logger",
    "set_log_level",
    "PlayproError",
    "ConfigError",
    "ValidationError",
    "NetworkError",
    "APIError",
    "AuthenticationError",
    "UnprocessableEntityError",
    "FileOperationError",
    "flatten_validation_errors",
    "extract_error_message",
    "handle_errors",
    "handle_async_errors",
    "ErrorHandler",
    "Serializer",
    "safe_json_loads",
    "ConfigManager",
]
