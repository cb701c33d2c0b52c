"""Tests for user-facing backend error messages."""

from apps.web.backend import (
    BackendAuthError,
    BackendConflictError,
    BackendError,
    BackendNotFoundError,
    BackendPermissionError,
    BackendServerError,
    BackendUnavailableError,
    BackendValidationError,
    ErrorContext,
    describe_error,
)
from apps.web.backend.errors import translate_message, translate_messages


class TestTranslateMessage:
    """Tests for validator message mapping."""

    def test_register_password_length(self):
        message = "password must be longer than or equal to 8 characters"
        assert translate_message(message, ErrorContext.REGISTER) == "Password must be at least 8 characters"

    def test_login_password_length(self):
        message = "password must be longer than or equal to 6 characters"
        assert translate_message(message, ErrorContext.LOGIN) == "Password must be at least 6 characters"

    def test_unknown_message_is_kept(self):
        assert translate_message("table is on fire", ErrorContext.PROFILE) == "table is on fire"

    def test_duplicates_are_dropped(self):
        messages = [
            "username already exists",
            "user with this username already exists",
        ]
        assert translate_messages(messages, ErrorContext.REGISTER) == [
            "A user with this username already exists"
        ]


class TestDescribeError:
    """Tests for turning exceptions into one display string."""

    def test_network_error(self):
        assert describe_error(BackendUnavailableError("boom")) == "Network error. Check your connection"

    def test_validation_errors_are_joined(self):
        exc = BackendValidationError(
            "bad",
            status_code=400,
            errors=["email must be an email", "phone must match /regex/"],
        )
        assert (
            describe_error(exc, ErrorContext.PROFILE)
            == "email must be an email, Phone must be in international format, e.g. +995555123456"
        )

    def test_validation_without_details(self):
        assert describe_error(BackendValidationError("bad", status_code=400)) == "Invalid data"

    def test_auth_error_depends_on_form(self):
        exc = BackendAuthError("Unauthorized", status_code=401)
        assert describe_error(exc, ErrorContext.LOGIN) == "Invalid username or password"
        assert describe_error(exc, ErrorContext.PASSWORD) == "Current password is incorrect"
        assert describe_error(exc) == "Your session has expired. Please sign in again"

    def test_permission_error(self):
        assert describe_error(BackendPermissionError("Forbidden", status_code=403)) == "Access denied"

    def test_conflict_on_register(self):
        exc = BackendConflictError("User exists", status_code=409)
        assert describe_error(exc, ErrorContext.REGISTER) == "A user with these details already exists"
        assert describe_error(exc) == "User exists"

    def test_server_error_hides_details(self):
        exc = BackendServerError("stack trace", status_code=500)
        assert describe_error(exc) == "Internal server error. Please try again later"

    def test_not_found_uses_message_then_default(self):
        assert describe_error(BackendNotFoundError("Review not found")) == "Review not found"
        assert describe_error(BackendNotFoundError(""), default="Gone") == "Gone"

    def test_unknown_error_falls_back(self):
        assert describe_error(BackendError("")) == "An unknown error occurred"
