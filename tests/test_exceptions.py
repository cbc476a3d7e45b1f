"""
Unit tests for the error hierarchy and the user-facing message helpers
"""
import asyncio
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from playpro_admin.infra.exceptions import (
    APIError,
    AuthenticationError,
    ErrorHandler,
    FileOperationError,
    NetworkError,
    PlayproError,
    UnprocessableEntityError,
    ValidationError,
    extract_error_message,
    flatten_validation_errors,
    handle_async_errors,
    handle_errors,
)


class TestValidationErrors:

    def test_flatten_mapping(self):
        errors = {"name": ["The name field is required."], "email": ["taken", "invalid"]}
        assert flatten_validation_errors(errors) == ["The name field is required.", "taken", "invalid"]

    def test_flatten_scalars_and_empties(self):
        assert flatten_validation_errors({"a": "one", "b": None, "c": []}) == ["one"]
        assert flatten_validation_errors("single") == ["single"]
        assert flatten_validation_errors(None) == []

    def test_unprocessable_entity_message(self):
        error = UnprocessableEntityError({"email": ["The email has already been taken."], "phone": ["Too long."]})
        assert error.status_code == 422
        assert error.messages == ["The email has already been taken.", "Too long."]
        assert error.message == "The email has already been taken., Too long."

    def test_unprocessable_entity_without_errors(self):
        error = UnprocessableEntityError({}, message="Invalid data")
        assert error.message == "Invalid data"

    def test_extract_error_message(self):
        assert extract_error_message({"message": "Nope"}, "fallback") == "Nope"
        assert extract_error_message({"message": "  "}, "fallback") == "fallback"
        assert extract_error_message("<html>", "fallback") == "fallback"


class TestHierarchy:

    def test_everything_is_a_playpro_error(self):
        for error in (ValidationError("x"), NetworkError("x"), APIError("x"), AuthenticationError(),
                      UnprocessableEntityError(), FileOperationError("x")):
            assert isinstance(error, PlayproError)

    def test_authentication_error(self):
        error = AuthenticationError(endpoint="/admin/branch")
        assert error.status_code == 401
        assert error.error_code == "AUTH_ERROR"
        assert isinstance(error, APIError)

    def test_details(self):
        error = ValidationError("Bad value", field="quota", value=-1)
        assert error.error_code == "VALIDATION_ERROR"
        assert error.details["field"] == "quota"


class TestErrorHandler:

    def setup_method(self):
        self.logger = MagicMock()
        self.handler = ErrorHandler(self.logger)

    def test_validation_message_is_shown(self):
        assert self.handler.user_message(ValidationError("End time must be after start time"), "x") == \
            "End time must be after start time"

    def test_api_error_uses_backend_message(self):
        error = APIError("boom", status_code=500, response={"message": "Server exploded"})
        assert self.handler.user_message(error, "Failed to fetch") == "Server exploded"

    def test_other_errors_use_fallback(self):
        assert self.handler.user_message(NetworkError("timeout"), "Failed to fetch") == "Failed to fetch"
        assert self.handler.user_message(RuntimeError("?"), "Failed to fetch") == "Failed to fetch"

    def test_handle_and_log(self):
        self.handler.handle_and_log(APIError("boom"), {"endpoint": "/admin/sport"})
        self.logger.error.assert_called_once()
        assert "API_ERROR" in self.logger.error.call_args[0][0]


class TestDecorator:

    def test_business_errors_pass_through(self):
        logger = MagicMock()

        @handle_errors(logger)
        def fails():
            raise ValidationError("bad")

        with pytest.raises(ValidationError):
            fails()
        logger.error.assert_called_once()

    def test_unknown_errors_are_wrapped(self):
        @handle_errors(MagicMock())
        def fails():
            raise ZeroDivisionError("oops")

        with pytest.raises(PlayproError) as info:
            fails()
        assert isinstance(info.value.__cause__, ZeroDivisionError)

    def test_return_value(self):
        @handle_errors(MagicMock())
        def ok():
            return 42

        assert ok() == 42

    def test_async_unknown_errors_are_wrapped(self):
        @handle_async_errors(MagicMock())
        async def fails():
            raise KeyError("k")

        with pytest.raises(PlayproError):
            asyncio.run(fails())


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
