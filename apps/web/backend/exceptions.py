"""Backend API exceptions."""


class BackendError(Exception):
    """Base exception for failed calls to the backend API."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        errors: list[str] | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.errors = errors or []
        super().__init__(message)


class BackendValidationError(BackendError):
    """Backend rejected the request body (400)."""


class BackendAuthError(BackendError):
    """Missing, invalid or expired token, or bad credentials (401)."""


class BackendPermissionError(BackendError):
    """Authenticated but not allowed (403)."""


class BackendNotFoundError(BackendError):
    """Resource does not exist (404)."""


class BackendConflictError(BackendError):
    """Resource already exists or state conflict (409)."""


class BackendServerError(BackendError):
    """Backend failed internally (5xx)."""


class BackendUnavailableError(BackendError):
    """Backend could not be reached (connection error or timeout)."""


STATUS_ERRORS: dict[int, type[BackendError]] = {
    400: BackendValidationError,
    401: BackendAuthError,
    403: BackendPermissionError,
    404: BackendNotFoundError,
    409: BackendConflictError,
}


def error_class_for_status(status_code: int) -> type[BackendError]:
    """Pick the exception type for an HTTP error status."""
    if status_code >= 500:
        return BackendServerError
    return STATUS_ERRORS.get(status_code, BackendError)
