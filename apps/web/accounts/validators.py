"""Local checks run before account forms reach the backend."""

from django.utils.translation import gettext as _

from apps.web.core.validation import (
    REGISTER_PHONE_RE,
    FormErrors,
    is_valid_contact_phone,
    is_valid_email,
    password_problem,
    require_length,
)

MIN_LOGIN_PASSWORD_LENGTH = 6


def validate_login(username_or_email: str, password: str) -> FormErrors:
    errors: FormErrors = {}
    if not username_or_email:
        errors["username_or_email"] = _("Enter your username or email")
    if not password:
        errors["password"] = _("Enter your password")
    elif len(password) < MIN_LOGIN_PASSWORD_LENGTH:
        errors["password"] = _("Password must be at least 6 characters")
    return errors


def validate_registration(data: dict[str, str]) -> FormErrors:
    """
    Check a registration form.

    Expects stripped values for username, email, password,
    password_confirm, first_name, last_name and phone.
    """
    errors: FormErrors = {}

    require_length(errors, "username", data["username"], 3, label=_("Username"))

    if not data["email"]:
        errors["email"] = _("Enter an email")
    elif not is_valid_email(data["email"]):
        errors["email"] = _("Enter a valid email address")

    if not data["password"]:
        errors["password"] = _("Enter a password")
    else:
        problem = password_problem(data["password"])
        if problem:
            errors["password"] = problem

    if data["password"] != data["password_confirm"]:
        errors["password_confirm"] = _("Passwords do not match")

    require_length(errors, "first_name", data["first_name"], 2, label=_("First name"))
    require_length(errors, "last_name", data["last_name"], 2, label=_("Last name"))

    if data["phone"] and not REGISTER_PHONE_RE.match(data["phone"]):
        errors["phone"] = _("Phone must be in international format, e.g. +995555123456")

    return errors


def validate_profile(data: dict[str, str]) -> FormErrors:
    """Names are required; phone and address parts are checked when given."""
    errors: FormErrors = {}

    require_length(errors, "first_name", data["first_name"], 2, 50, label=_("First name"))
    require_length(errors, "last_name", data["last_name"], 2, 50, label=_("Last name"))

    if data["phone"] and not is_valid_contact_phone(data["phone"]):
        errors["phone"] = _("Phone must be in international format, e.g. +995555123456")
    if data["country"] and len(data["country"]) < 2:
        errors["country"] = _("Country must be at least 2 characters")
    if data["city"] and len(data["city"]) < 2:
        errors["city"] = _("City must be at least 2 characters")
    if data["street_address"] and len(data["street_address"]) < 5:
        errors["street_address"] = _("Address must be at least 5 characters")

    return errors


def validate_password_change(current: str, new: str, confirm: str) -> FormErrors:
    errors: FormErrors = {}
    if not current:
        errors["current_password"] = _("Enter your current password")

    if not new:
        errors["new_password"] = _("Enter a new password")
    else:
        problem = password_problem(new)
        if problem:
            errors["new_password"] = problem

    if new != confirm:
        errors["confirm_password"] = _("Passwords do not match")
    elif current and new == current:
        errors["new_password"] = _("New password must differ from the current one")

    return errors
