"""
Backend session middleware - attaches the signed-in user and an API client
to every request.
"""

import logging
from collections.abc import Callable
from urllib.parse import urlsplit

from django.contrib import messages
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils.http import url_has_allowed_host_and_scheme

from apps.web.backend import (
    BackendAuthError,
    BackendClient,
    BackendError,
    BackendNotFoundError,
    BackendUnavailableError,
    describe_error,
)

from .auth import SESSION_TOKEN_KEY, clear_login, current_user, is_token_expired, login_url

logger = logging.getLogger(__name__)


class BackendSessionMiddleware:
    """
    Middleware that attaches backend auth state to the request.

    Sets:
    - request.backend_token: JWT of the signed-in user (or None)
    - request.backend_user: SessionUser (or None for guests)
    - request.backend: BackendClient carrying the token

    Expired tokens are dropped before the view runs. A 401 escaping a view
    means the backend no longer accepts the token: the session is cleared
    and the user is sent to the login page.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        token = request.session.get(SESSION_TOKEN_KEY)
        if token and is_token_expired(token):
            logger.info("Session token expired, signing out")
            clear_login(request)
            token = None

        request.backend_token = token  # type: ignore[attr-defined]
        request.backend_user = current_user(request) if token else None  # type: ignore[attr-defined]
        request.backend = BackendClient(token=token)  # type: ignore[attr-defined]
        return self.get_response(request)

    def process_exception(
        self, request: HttpRequest, exception: Exception
    ) -> HttpResponse | None:
        if not isinstance(exception, BackendError):
            return None

        if isinstance(exception, BackendAuthError):
            # Wrong password on these forms is not a dead session
            if request.path in self._auth_exempt_paths():
                return None
            clear_login(request)
            messages.warning(request, describe_error(exception))
            return redirect(login_url(self._resume_url(request)))

        if isinstance(exception, BackendNotFoundError):
            status = 404
        elif isinstance(exception, BackendUnavailableError):
            status = 503
        else:
            status = 502

        return render(
            request,
            "core/backend_error.html",
            {"error_message": describe_error(exception), "status": status},
            status=status,
        )

    def _auth_exempt_paths(self) -> set[str]:
        return {reverse("accounts:login"), reverse("accounts:change_password")}

    def _resume_url(self, request: HttpRequest) -> str | None:
        """
        Page to return to after signing in again.

        POST-only URLs cannot be revisited with a GET, so form submissions
        go back to the page the form was on.
        """
        if request.method == "GET":
            return request.get_full_path()
        referer = request.headers.get("Referer", "")
        if not url_has_allowed_host_and_scheme(
            referer, allowed_hosts={request.get_host()}, require_https=request.is_secure()
        ):
            return None
        parts = urlsplit(referer)
        return f"{parts.path}?{parts.query}" if parts.query else parts.path or None
