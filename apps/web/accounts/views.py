"""
Accounts views - sign in, registration and the profile page.
"""

import logging

from django.contrib import messages
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils.translation import gettext as _
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from supra_schemas import ProfileUpdate, RegisterRequest, Role, SessionUser

from apps.web.backend import (
    BackendAuthError,
    BackendError,
    ErrorContext,
    describe_error,
)
from apps.web.core.auth import (
    clear_login,
    replace_session_user,
    safe_next_url,
    store_login,
    update_session_user,
)
from apps.web.core.decorators import login_required

from . import services
from .countries import (
    OTHER_COUNTRY_CODE,
    get_cities,
    get_countries,
    get_country_by_code,
    get_country_by_name,
)
from .validators import (
    validate_login,
    validate_password_change,
    validate_profile,
    validate_registration,
)

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("first_name", "last_name", "phone", "country", "city", "street_address")
REGISTER_FIELDS = (
    "username",
    "email",
    "password",
    "password_confirm",
    "first_name",
    "last_name",
    "phone",
)


def landing_url(user: SessionUser) -> str:
    """Where a user goes after signing in."""
    if user.role == Role.MANAGER:
        return reverse("manager:dashboard")
    if user.role == Role.ADMIN:
        return reverse("administration:dashboard")
    return reverse("catalog:home")


def _backend_errors(exc: BackendError, context: ErrorContext) -> list[str]:
    return [describe_error(exc, context)]


@require_http_methods(["GET", "POST"])
def login_view(request: HttpRequest) -> HttpResponse:
    """
    GET/POST /auth/login/

    Login page with username-or-email/password form.
    """
    if request.backend_user is not None:  # type: ignore[attr-defined]
        return redirect(landing_url(request.backend_user))  # type: ignore[attr-defined]

    errors: list[str] = []
    field_errors: dict[str, str] = {}
    username_or_email = ""

    if request.method == "POST":
        username_or_email = request.POST.get("username_or_email", "").strip()
        password = request.POST.get("password", "")

        field_errors = validate_login(username_or_email, password)
        if not field_errors:
            try:
                auth = services.login(request.backend, username_or_email, password)  # type: ignore[attr-defined]
            except BackendError as e:
                logger.info("Login rejected for %s: %s", username_or_email, e.message)
                errors = _backend_errors(e, ErrorContext.LOGIN)
            else:
                store_login(request, auth.access_token, auth.user)
                # Prevent open redirect
                next_url = safe_next_url(request.GET.get("next"), landing_url(auth.user))
                return redirect(next_url)

    return render(
        request,
        "accounts/login.html",
        {
            "errors": errors,
            "field_errors": field_errors,
            "username_or_email": username_or_email,
        },
    )


@require_http_methods(["GET", "POST"])
def register_view(request: HttpRequest) -> HttpResponse:
    """
    GET/POST /auth/register/

    Registration form. Success sends the user to the login page.
    """
    if request.backend_user is not None:  # type: ignore[attr-defined]
        return redirect("catalog:home")

    errors: list[str] = []
    field_errors: dict[str, str] = {}
    data = {name: "" for name in REGISTER_FIELDS}

    if request.method == "POST":
        data = {name: request.POST.get(name, "").strip() for name in REGISTER_FIELDS}
        # Passwords are taken as typed
        data["password"] = request.POST.get("password", "")
        data["password_confirm"] = request.POST.get("password_confirm", "")

        field_errors = validate_registration(data)
        if not field_errors:
            body = RegisterRequest(
                username=data["username"],
                email=data["email"],
                password=data["password"],
                first_name=data["first_name"],
                last_name=data["last_name"],
                phone=data["phone"] or None,
            )
            try:
                services.register(request.backend, body)  # type: ignore[attr-defined]
            except BackendError as e:
                errors = _backend_errors(e, ErrorContext.REGISTER)
            else:
                messages.success(request, _("Registration successful. You can now sign in"))
                return redirect("accounts:login")

    data.pop("password", None)
    data.pop("password_confirm", None)
    return render(
        request,
        "accounts/register.html",
        {"errors": errors, "field_errors": field_errors, "form": data},
    )


@require_POST
def logout_view(request: HttpRequest) -> HttpResponse:
    """
    POST /auth/logout/

    Sign out locally even when the backend call fails.
    """
    user = request.backend_user  # type: ignore[attr-defined]
    services.logout(request.backend)  # type: ignore[attr-defined]
    clear_login(request)
    if user is not None:
        logger.info("User %s signed out", user.username)
    return redirect("catalog:home")


def _country_context(country: str) -> dict:
    known = get_country_by_name(country)
    return {
        "countries": get_countries(),
        "selected_country": known.code if known else (OTHER_COUNTRY_CODE if country else ""),
        "cities": get_cities(known.code) if known else [],
        "other_country_code": OTHER_COUNTRY_CODE,
    }


@login_required
@require_http_methods(["GET", "POST"])
def profile(request: HttpRequest) -> HttpResponse:
    """
    GET/POST /profile/

    Show the profile; POST updates it and refreshes the session copy.
    """
    user: SessionUser = request.backend_user  # type: ignore[attr-defined]
    errors: list[str] = []
    field_errors: dict[str, str] = {}
    data = {name: getattr(user, name) or "" for name in PROFILE_FIELDS}

    if request.method == "POST":
        data = {name: request.POST.get(name, "").strip() for name in PROFILE_FIELDS}
        country_code = request.POST.get("country_code", "")
        if country_code and country_code != OTHER_COUNTRY_CODE:
            known = get_country_by_code(country_code)
            if known:
                data["country"] = known.name

        field_errors = validate_profile(data)
        if not field_errors:
            changes = ProfileUpdate(**{k: v for k, v in data.items() if v})
            try:
                services.update_profile(request.backend, changes)  # type: ignore[attr-defined]
            except BackendAuthError:
                raise
            except BackendError as e:
                errors = _backend_errors(e, ErrorContext.PROFILE)
            else:
                update_session_user(request, **changes.model_dump(exclude_none=True))
                try:
                    replace_session_user(request, services.fetch_profile(request.backend))  # type: ignore[attr-defined]
                except BackendError as e:
                    logger.warning("Profile refresh failed: %s", e.message)
                messages.success(request, _("Profile updated"))
                return redirect("accounts:profile")

    context = {
        "errors": errors,
        "field_errors": field_errors,
        "form": data,
        **_country_context(data["country"]),
    }
    return render(request, "accounts/profile.html", context)


@login_required
@require_POST
def change_password(request: HttpRequest) -> HttpResponse:
    """
    POST /profile/password/

    Change the password, then sign out so the user logs in with it.
    """
    current = request.POST.get("current_password", "")
    new = request.POST.get("new_password", "")
    confirm = request.POST.get("confirm_password", "")

    field_errors = validate_password_change(current, new, confirm)
    errors: list[str] = []
    if not field_errors:
        try:
            services.change_password(request.backend, current, new)  # type: ignore[attr-defined]
        except BackendError as e:
            errors = _backend_errors(e, ErrorContext.PASSWORD)
        else:
            logger.info("User %s changed password", request.backend_user.username)  # type: ignore[attr-defined]
            services.logout(request.backend)  # type: ignore[attr-defined]
            clear_login(request)
            messages.success(request, _("Password changed. Please sign in with the new password"))
            return redirect("accounts:login")

    for message in [*field_errors.values(), *errors]:
        messages.error(request, message)
    return redirect("accounts:profile")


@require_GET
def city_options(request: HttpRequest) -> HttpResponse:
    """
    GET /profile/cities/?country=<code>

    HTMX partial with the <option> list for the chosen country.
    """
    country = request.GET.get("country_code") or request.GET.get("country", "")
    return render(
        request,
        "accounts/partials/city_options.html",
        {
            "cities": get_cities(country),
            "selected_city": request.GET.get("city", ""),
        },
    )
