"""Field rules shared by the account, checkout and reservation forms."""

import re

from django.utils.translation import gettext as _

from pydantic import EmailStr, TypeAdapter, ValidationError

# Contact phone for deliveries and reservations: 9 to 15 digits
CONTACT_PHONE_RE = re.compile(r"^\+?[1-9]\d{8,14}$")
# Phone given at registration: any E.164-ish number
REGISTER_PHONE_RE = re.compile(r"^\+?[1-9]\d{1,14}$")

PASSWORD_SPECIALS = "@$!%*?&"
MIN_PASSWORD_LENGTH = 8
MAX_PHONE_LENGTH = 15

FormErrors = dict[str, str]

_email_adapter = TypeAdapter(EmailStr)


def normalize_phone(raw: str) -> str:
    """Keep digits and one leading +, capped at 15 characters."""
    raw = (raw or "").strip()
    digits = re.sub(r"\D", "", raw)
    value = f"+{digits}" if raw.startswith("+") else digits
    return value[:MAX_PHONE_LENGTH]


def is_valid_contact_phone(phone: str) -> bool:
    return bool(CONTACT_PHONE_RE.match(phone or ""))


def is_valid_email(value: str) -> bool:
    """Check an address with the rules the backend request models apply."""
    try:
        _email_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def password_problem(password: str) -> str | None:
    """Return why a new password is too weak, or None if it is acceptable."""
    if len(password) < MIN_PASSWORD_LENGTH:
        return _("Password must be at least 8 characters")
    if not (
        re.search(r"[a-z]", password)
        and re.search(r"[A-Z]", password)
        and re.search(r"\d", password)
        and any(ch in PASSWORD_SPECIALS for ch in password)
    ):
        return _(
            "Password must contain a lowercase letter, an uppercase letter, "
            "a digit and a special character (@$!%*?&)"
        )
    return None


def require_length(
    errors: FormErrors,
    field: str,
    value: str,
    minimum: int,
    maximum: int | None = None,
    label: str = "",
) -> None:
    """Record a length error for a required text field."""
    label = label or field.replace("_", " ").capitalize()
    if not value:
        errors[field] = _("%(label)s is required") % {"label": label}
    elif len(value) < minimum:
        errors[field] = _("%(label)s must be at least %(count)d characters") % {
            "label": label,
            "count": minimum,
        }
    elif maximum is not None and len(value) > maximum:
        errors[field] = _("%(label)s must be at most %(count)d characters") % {
            "label": label,
            "count": maximum,
        }
