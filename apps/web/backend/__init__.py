"""Backend API access - HTTP client, typed errors and error messages."""

from apps.web.backend.client import BackendClient, client_for_request, unwrap_list
from apps.web.backend.errors import ErrorContext, describe_error
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

__all__ = [
    "BackendAuthError",
    "BackendClient",
    "BackendConflictError",
    "BackendError",
    "BackendNotFoundError",
    "BackendPermissionError",
    "BackendServerError",
    "BackendUnavailableError",
    "BackendValidationError",
    "ErrorContext",
    "client_for_request",
    "describe_error",
    "unwrap_list",
]
