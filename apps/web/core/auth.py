"""
Session-backed sign-in state.

The backend issues a JWT on login. The token and the user record live in
the server-side session; the browser only holds the session cookie.
"""

import base64
import binascii
import json
import time
from typing import Any
from urllib.parse import urlencode

from django.http import HttpRequest
from django.urls import reverse

from pydantic import ValidationError
from supra_schemas import SessionUser

SESSION_TOKEN_KEY = "backend_token"
SESSION_USER_KEY = "backend_user"


def store_login(request: HttpRequest, token: str, user: SessionUser) -> None:
    """Remember a successful login (rotates the session key)."""
    request.session.cycle_key()
    request.session[SESSION_TOKEN_KEY] = token
    request.session[SESSION_USER_KEY] = user.model_dump(mode="json")


def clear_login(request: HttpRequest) -> None:
    """Forget the token, the user and everything else in the session."""
    request.session.flush()


def current_user(request: HttpRequest) -> SessionUser | None:
    """The signed-in user from the session, or None."""
    data = request.session.get(SESSION_USER_KEY)
    if not data:
        return None
    try:
        return SessionUser.model_validate(data)
    except ValidationError:
        return None


def update_session_user(request: HttpRequest, **changes: Any) -> SessionUser | None:
    """Merge profile changes into the stored user record."""
    user = current_user(request)
    if user is None:
        return None
    updated = user.model_copy(update=changes)
    request.session[SESSION_USER_KEY] = updated.model_dump(mode="json")
    return updated


def replace_session_user(request: HttpRequest, user: SessionUser) -> None:
    request.session[SESSION_USER_KEY] = user.model_dump(mode="json")


def _decode_segment(segment: str) -> dict[str, Any]:
    padded = segment + "=" * (-len(segment) % 4)
    return json.loads(base64.urlsafe_b64decode(padded))


def is_token_expired(token: str | None, now: float | None = None) -> bool:
    """
    Check a JWT's exp claim without verifying the signature.

    Tokens that cannot be decoded count as expired. Tokens without an exp
    claim never expire here; the backend still has the final word.
    """
    if not token:
        return True
    parts = token.split(".")
    if len(parts) < 2:
        return True
    try:
        payload = _decode_segment(parts[1])
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return True
    if not isinstance(payload, dict):
        return True

    exp = payload.get("exp")
    if exp is None:
        return False
    try:
        return (now if now is not None else time.time()) >= float(exp)
    except (TypeError, ValueError):
        return True


def login_url(next_url: str | None = None) -> str:
    """Login page URL, optionally carrying where to go afterwards."""
    url = reverse("accounts:login")
    if next_url:
        url = f"{url}?{urlencode({'next': next_url})}"
    return url


def safe_next_url(value: str | None, fallback: str) -> str:
    """Only allow same-site relative redirects (no open redirect)."""
    if value and value.startswith("/") and not value.startswith("//"):
        return value
    return fallback
