"""
User-facing error messages for backend failures.

The backend answers 400s with raw validator messages such as
"password must be longer than or equal to 8 characters". These are mapped
to short localized strings per form; anything unrecognised is shown as-is.
"""

from enum import Enum

from django.utils.translation import gettext as _

from apps.web.backend.exceptions import (
    BackendAuthError,
    BackendConflictError,
    BackendError,
    BackendNotFoundError,
    BackendPermissionError,
    BackendServerError,
    BackendUnavailableError,
    BackendValidationError,
)


class ErrorContext(str, Enum):
    """The form or action an error came from."""

    GENERAL = "general"
    LOGIN = "login"
    REGISTER = "register"
    PROFILE = "profile"
    PASSWORD = "password"


# (substrings that must all appear, message) - first match wins
_RULES: dict[ErrorContext, list[tuple[tuple[str, ...], str]]] = {
    ErrorContext.LOGIN: [
        (("password must be longer than or equal to",), "Password must be at least 6 characters"),
        (("username must be longer than or equal to",), "Username must be at least 3 characters"),
        (("email must be an email",), "Enter a valid email address"),
        (("username should not be empty",), "Enter your username"),
        (("password should not be empty",), "Enter your password"),
    ],
    ErrorContext.REGISTER: [
        (("password must be longer than or equal to",), "Password must be at least 8 characters"),
        (("username must be longer than or equal to",), "Username must be at least 3 characters"),
        (("email must be an email",), "Enter a valid email address"),
        (("first_name must be longer than or equal to",), "First name must be at least 2 characters"),
        (("last_name must be longer than or equal to",), "Last name must be at least 2 characters"),
        (("already exists", "username"), "A user with this username already exists"),
        (("already exists", "email"), "A user with this email already exists"),
        (("username", "should not be empty"), "Enter a username"),
        (("password", "should not be empty"), "Enter a password"),
        (("email", "should not be empty"), "Enter an email"),
        (("first_name", "should not be empty"), "Enter your first name"),
        (("last_name", "should not be empty"), "Enter your last name"),
    ],
    ErrorContext.PROFILE: [
        (("first_name must be longer than or equal to",), "First name must be at least 2 characters"),
        (("last_name must be longer than or equal to",), "Last name must be at least 2 characters"),
        (("phone must match",), "Phone must be in international format, e.g. +995555123456"),
        (("country must be longer than or equal to",), "Country must be between 2 and 100 characters"),
        (("city must be longer than or equal to",), "City must be between 2 and 100 characters"),
        (("street_address must be longer than or equal to",), "Address must be between 5 and 500 characters"),
        (("first_name", "should not be empty"), "Enter your first name"),
        (("last_name", "should not be empty"), "Enter your last name"),
        (("phone", "should not be empty"), "Enter your phone number"),
        (("country", "should not be empty"), "Enter your country"),
        (("city", "should not be empty"), "Enter your city"),
        (("street_address", "should not be empty"), "Enter your address"),
    ],
    ErrorContext.PASSWORD: [
        (("password must be longer than or equal to",), "New password must be at least 8 characters"),
        (("current_password is incorrect",), "Current password is incorrect"),
        (("current_password", "should not be empty"), "Enter your current password"),
        (("new_password", "should not be empty"), "Enter a new password"),
    ],
}


def translate_message(message: str, context: ErrorContext = ErrorContext.GENERAL) -> str:
    """Map one raw backend validation message to a display string."""
    for needles, text in _RULES.get(context, []):
        if all(needle in message for needle in needles):
            return _(text)
    return message


def translate_messages(
    messages: list[str], context: ErrorContext = ErrorContext.GENERAL
) -> list[str]:
    """Map raw backend validation messages, dropping duplicates."""
    translated: list[str] = []
    for message in messages:
        text = translate_message(message, context)
        if text not in translated:
            translated.append(text)
    return translated


def describe_error(
    exc: BackendError,
    context: ErrorContext = ErrorContext.GENERAL,
    default: str | None = None,
) -> str:
    """
    Turn a backend failure into one display string.

    Args:
        exc: The error raised by BackendClient.
        context: Which form the call came from (selects message rules).
        default: Fallback when the backend gave no usable message.
    """
    if isinstance(exc, BackendUnavailableError):
        return _("Network error. Check your connection")

    if isinstance(exc, BackendValidationError):
        if exc.errors:
            return ", ".join(translate_messages(exc.errors, context))
        return _("Invalid data")

    if isinstance(exc, BackendAuthError):
        if context == ErrorContext.LOGIN:
            return _("Invalid username or password")
        if context == ErrorContext.PASSWORD:
            return _("Current password is incorrect")
        return _("Your session has expired. Please sign in again")

    if isinstance(exc, BackendPermissionError):
        return _("Access denied")

    if isinstance(exc, BackendConflictError):
        if context == ErrorContext.REGISTER:
            return _("A user with these details already exists")
        return exc.message or default or _("Conflict with the current state")

    if isinstance(exc, BackendServerError):
        return _("Internal server error. Please try again later")

    if isinstance(exc, BackendNotFoundError):
        return exc.message or default or _("Not found")

    return exc.message or default or _("An unknown error occurred")
