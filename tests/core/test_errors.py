"""Tests for error types and codes."""

import pytest

from linkcheck.core.errors import (
    ClassFormatError,
    ConfigError,
    ErrorCode,
    InputError,
    InternalError,
    LinkCheckError,
)


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.CONFIG_INVALID_VALUE, 2000),
            (ErrorCode.CLASS_FORMAT_ERROR, 3000),
            (ErrorCode.INPUT_UNRECOGNIZED, 4000),
            (ErrorCode.INPUT_BAD_ARCHIVE, 4000),
            (ErrorCode.INTERNAL_ERROR, 9000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(
        self, code: ErrorCode, expected_range: int
    ) -> None:
        """Error codes fall within their designated numeric range."""
        # Given
        error_code = code

        # When
        value = error_code.value

        # Then
        assert expected_range <= value < expected_range + 1000


class TestLinkCheckError:
    """Base error behavior tests."""

    def test_given_error_when_to_dict_then_serializes_all_fields(self) -> None:
        """Error serializes to dict with all required fields."""
        # Given
        error = InputError(
            code=ErrorCode.INPUT_NOT_FOUND,
            message="Test message",
            details={"key": "value"},
        )

        # When
        result = error.to_dict()

        # Then
        assert result == {
            "code": 4002,
            "error": "INPUT_NOT_FOUND",
            "message": "Test message",
            "details": {"key": "value"},
        }

    def test_given_error_when_str_then_human_readable(self) -> None:
        """Error string representation is human readable."""
        # Given
        error = InternalError(code=ErrorCode.INTERNAL_ERROR, message="Something broke")

        # When
        result = str(error)

        # Then
        assert result == "[9001] INTERNAL_ERROR: Something broke"

    def test_given_subclass_when_raised_then_caught_as_base(self) -> None:
        """All error kinds can be handled through the base class."""
        with pytest.raises(LinkCheckError):
            raise ClassFormatError.malformed("Foo.class", "bad magic")


class TestConfigError:
    """ConfigError factory method tests."""

    @pytest.mark.parametrize(
        ("factory", "kwargs", "expected_code"),
        [
            ("parse_error", {"path": "/foo", "reason": "bad yaml"}, ErrorCode.CONFIG_PARSE_ERROR),
            (
                "invalid_value",
                {"field": "check.java_home", "value": 3, "reason": "not a string"},
                ErrorCode.CONFIG_INVALID_VALUE,
            ),
            ("missing_required", {"field": "artifacts_dir"}, ErrorCode.CONFIG_MISSING_REQUIRED),
            ("file_not_found", {"path": "/missing"}, ErrorCode.CONFIG_FILE_NOT_FOUND),
        ],
    )
    def test_given_factory_when_called_then_correct_code(
        self, factory: str, kwargs: dict[str, object], expected_code: ErrorCode
    ) -> None:
        """Factory methods produce errors with correct error codes."""
        # Given
        factory_method = getattr(ConfigError, factory)

        # When
        error = factory_method(**kwargs)

        # Then
        assert error.code == expected_code


class TestClassFormatError:
    """ClassFormatError tests."""

    def test_given_offset_when_created_then_offset_in_details(self) -> None:
        """Byte offset of the problem is recorded when known."""
        # When
        error = ClassFormatError.malformed("app.jar!/A.class", "truncated", 17)

        # Then
        assert error.details == {"origin": "app.jar!/A.class", "reason": "truncated", "offset": 17}
        assert "app.jar!/A.class" in error.message

    def test_given_no_offset_when_created_then_offset_omitted(self) -> None:
        """Offset is omitted when unknown."""
        error = ClassFormatError.malformed("A.class", "bad index")
        assert "offset" not in error.details


class TestInputError:
    """InputError tests."""

    def test_given_unrecognized_path_when_created_then_message_names_path(self) -> None:
        """Unrecognized inputs are reported with the offending argument."""
        error = InputError.unrecognized_path("notes.txt")
        assert error.code == ErrorCode.INPUT_UNRECOGNIZED
        assert error.message == "Given unintelligible argument: notes.txt"


class TestInternalError:
    """InternalError tests."""

    def test_given_unexpected_error_when_created_then_includes_extras(self) -> None:
        """Unexpected error captures arbitrary extra details."""
        # Given
        message = "boom"
        extras = {"foo": "bar", "count": 42}

        # When
        error = InternalError.unexpected(message, **extras)

        # Then
        assert error.details == extras
        assert error.code == ErrorCode.INTERNAL_ERROR
