"""
Infrastructure layer - exceptions.

Error types raised by the backend client and the form validators, plus the
helpers pages use to turn them into one notification message.
"""

from typing import Any, Dict, Iterable, List, Optional
from functools import wraps


class PlayproError(Exception):
    """Base error for the admin dashboard."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "UNKNOWN_ERROR"
        self.details = details or {}


class ConfigError(PlayproError):
    """Missing or malformed configuration."""
    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs) -> None:
        super().__init__(message, "CONFIG_ERROR", {"config_key": config_key, **kwargs})


class ValidationError(PlayproError):
    """Client-side form validation failure."""
    def __init__(self, message: str, field: Optional[str] = None, value: Any = None, **kwargs) -> None:
        super().__init__(message, "VALIDATION_ERROR", {"field": field, "value": value, **kwargs})
        self.field = field


class NetworkError(PlayproError):
    """The backend could not be reached or returned an unreadable body."""
    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None, **kwargs) -> None:
        super().__init__(message, "NETWORK_ERROR", {"url": url, "status_code": status_code, **kwargs})
        self.url = url
        self.status_code = status_code


class APIError(PlayproError):
    """The backend answered with a non-2xx status."""
    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        status_code: Optional[int] = None,
        response: Any = None,
        **kwargs
    ) -> None:
        super().__init__(message, "API_ERROR", {"endpoint": endpoint, "status_code": status_code, "response": response, **kwargs})
        self.endpoint = endpoint
        self.status_code = status_code
        self.response = response


class AuthenticationError(APIError):
    """401 from the backend: the bearer token is missing or expired."""
    def __init__(self, message: str = "Unauthenticated", **kwargs) -> None:
        super().__init__(message, status_code=401, **kwargs)
        self.error_code = "AUTH_ERROR"


class UnprocessableEntityError(APIError):
    """422 from the backend with a field -> messages mapping."""
    def __init__(self, errors: Optional[Dict[str, Any]] = None, message: Optional[str] = None, **kwargs) -> None:
        self.errors = errors or {}
        self.messages = flatten_validation_errors(self.errors)
        text = ", ".join(self.messages) or message or "The given data was invalid."
        super().__init__(text, status_code=422, **kwargs)
        self.error_code = "UNPROCESSABLE_ENTITY"


class FileOperationError(PlayproError):
    """Upload/download file problems (bad extension, too large)."""
    def __init__(self, message: str, file_path: Optional[str] = None, operation: Optional[str] = None, **kwargs) -> None:
        super().__init__(message, "FILE_ERROR", {"file_path": file_path, "operation": operation, **kwargs})


def flatten_validation_errors(errors: Any) -> List[str]:
    """Flatten a Laravel-style ``errors`` mapping into a list of messages.

    ``{"name": ["required"], "email": ["taken", "invalid"]}`` becomes
    ``["required", "taken", "invalid"]``. Scalars are kept as-is, empty
    values are skipped.
    """
    if not errors:
        return []
    values: Iterable[Any]
    if isinstance(errors, dict):
        values = errors.values()
    elif isinstance(errors, str):
        values = [errors]
    else:
        values = errors
    out: List[str] = []
    for value in values:
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            out.extend(str(v) for v in value if v is not None)
        else:
            out.append(str(value))
    return out


def extract_error_message(payload: Any, fallback: str) -> str:
    """Return ``payload["message"]`` when present, else ``fallback``."""
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return fallback


# =============================================================================
# Error handling decorators
# =============================================================================

def handle_errors(logger=None):
    """
    Log and re-raise errors of a sync call.

    Args:
        logger: logger to use, defaults to this module's logger
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            _logger = logger
            if _logger is None:
                from .logging import get_logger
                _logger = get_logger(__name__)
            try:
                return func(*args, **kwargs)
            except PlayproError as e:
                _logger.error(f"[{e.error_code}] {e.message}")
                raise
            except Exception as e:
                _logger.error(f"Unhandled error in {func.__name__}: {e}", exc_info=True)
                raise PlayproError(f"Unexpected error: {e}") from e
        return wrapper
    return decorator


def handle_async_errors(logger=None):
    """Async variant of ``handle_errors``."""
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            _logger = logger
            if _logger is None:
                from .logging import get_logger
                _logger = get_logger(__name__)
            try:
                return await func(*args, **kwargs)
            except PlayproError as e:
                _logger.error(f"[{e.error_code}] {e.message}")
                raise
            except Exception as e:
                _logger.error(f"Unhandled error in {func.__name__}: {e}", exc_info=True)
                raise PlayproError(f"Unexpected error: {e}") from e
        return wrapper
    return decorator


class ErrorHandler:
    """Turns exceptions into log lines and user-facing messages."""

    def __init__(self, logger=None):
        if logger is None:
            from .logging import get_logger
            logger = get_logger(__name__)
        self.logger = logger

    def handle_and_log(self, error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
        """
        Log an error with optional context.

        Args:
            error: the exception
            context: extra key/values describing what was being done
        """
        context = context or {}

        if isinstance(error, PlayproError):
            self.logger.error(f"[{error.error_code}] {error.message} {context or ''}".rstrip())
        else:
            self.logger.error(f"System error: {error} {context or ''}".rstrip(), exc_info=True)

    def user_message(self, error: Exception, fallback: str) -> str:
        """Message to show in a toast.

        Validation and backend errors carry their own text; anything else
        shows ``fallback``.
        """
        if isinstance(error, (UnprocessableEntityError, ValidationError, FileOperationError)):
            return error.message
        if isinstance(error, APIError):
            return extract_error_message(error.response, fallback)
        return fallback
