"""Backend API client - the single HTTP boundary to the restaurant API."""

import logging
from datetime import date
from decimal import Decimal
from enum import Enum
from functools import lru_cache
from typing import Any

from django.conf import settings

import httpx

from apps.web.backend.exceptions import (
    BackendError,
    BackendUnavailableError,
    error_class_for_status,
)

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def shared_http_client() -> httpx.Client:
    """Process-wide pooled HTTP client used when none is injected."""
    return httpx.Client(
        timeout=settings.BACKEND_API_TIMEOUT,
        headers={"Content-Type": "application/json"},
    )


def clean_params(params: dict[str, Any] | None) -> dict[str, Any]:
    """
    Drop unset query parameters and render booleans the way the API expects.

    None and "" mean "no filter" and are not sent at all.
    """
    cleaned: dict[str, Any] = {}
    for key, value in (params or {}).items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        elif isinstance(value, Enum):
            value = value.value
        elif isinstance(value, date):
            value = value.isoformat()
        elif isinstance(value, Decimal):
            value = str(value)
        cleaned[key] = value
    return cleaned


def error_from_response(response: httpx.Response) -> BackendError:
    """
    Build a typed error from a non-2xx response.

    The backend reports problems as {"message": str | [str], "error": str}.
    Array messages are validation errors, one per rejected field rule.
    """
    try:
        payload = response.json()
    except ValueError:
        payload = None

    errors: list[str] = []
    message = ""
    if isinstance(payload, dict):
        raw = payload.get("message")
        if isinstance(raw, list):
            errors = [str(item) for item in raw]
            message = ", ".join(errors)
        elif raw:
            message = str(raw)
            errors = [message]
        if not message and payload.get("error"):
            message = str(payload["error"])

    if not message:
        message = response.reason_phrase or f"HTTP {response.status_code}"

    error_class = error_class_for_status(response.status_code)
    return error_class(message, status_code=response.status_code, errors=errors)


class BackendClient:
    """
    Thin JSON client for the restaurant backend API.

    Usage in views (the middleware attaches a client per request):
        menu = request.backend.get("/menu", params={"search": "khinkali"})

    Every non-2xx response raises a BackendError subclass; network failures
    raise BackendUnavailableError. Nothing is retried.
    """

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        """
        Args:
            token: Bearer token of the signed-in user, if any.
            base_url: Backend root URL. Defaults to settings.BACKEND_API_URL.
            http_client: Optional HTTP client for dependency injection (testing).
        """
        self.base_url = (base_url or settings.BACKEND_API_URL).rstrip("/")
        self.token = token
        self._client = http_client or shared_http_client()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    # =========================================================================
    # HTTP Helpers
    # =========================================================================

    def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """
        Send a request and raise on any error status.

        Raises:
            BackendError: Subclass matching the HTTP status.
            BackendUnavailableError: If the backend cannot be reached.
        """
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            response = self._client.request(
                method,
                self.url(path),
                json=json,
                params=clean_params(params),
                headers=headers,
            )
        except httpx.RequestError as e:
            logger.exception("Backend %s %s unreachable", method, path)
            raise BackendUnavailableError(f"Backend request failed: {e}") from e

        if response.is_error:
            error = error_from_response(response)
            logger.warning(
                "Backend %s %s failed with %d (token=%s): %s",
                method,
                path,
                response.status_code,
                bool(self.token),
                error.message,
            )
            raise error

        return response

    def _json(self, response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self._json(self.request("GET", path, params=params))

    def post(
        self, path: str, json: Any = None, params: dict[str, Any] | None = None
    ) -> Any:
        return self._json(self.request("POST", path, json=json, params=params))

    def put(self, path: str, json: Any = None) -> Any:
        return self._json(self.request("PUT", path, json=json))

    def patch(self, path: str, json: Any = None) -> Any:
        return self._json(self.request("PATCH", path, json=json))

    def delete(self, path: str) -> Any:
        return self._json(self.request("DELETE", path))

    def get_bytes(self, path: str, params: dict[str, Any] | None = None) -> bytes:
        """GET a non-JSON body (CSV exports)."""
        return self.request("GET", path, params=params).content


def client_for_request(request: Any) -> BackendClient:
    """Client carrying the session token of the request's user."""
    client = getattr(request, "backend", None)
    if isinstance(client, BackendClient):
        return client
    return BackendClient(token=getattr(request, "backend_token", None))


def unwrap_list(payload: Any) -> list[Any]:
    """Accept a bare list or an {items|data: [...]} envelope."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ("items", "data"):
            if isinstance(payload.get(key), list):
                return payload[key]
    return []
