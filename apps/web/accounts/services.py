"""
Accounts services - login, registration and profile calls to the backend.
"""

import logging

from supra_schemas import (
    AuthResponse,
    LoginRequest,
    PasswordChange,
    ProfileUpdate,
    RegisterRequest,
    RegisterResponse,
    SessionUser,
)

from apps.web.backend import BackendClient, BackendError

logger = logging.getLogger(__name__)


def login(client: BackendClient, username_or_email: str, password: str) -> AuthResponse:
    """
    Exchange credentials for a token.

    Raises:
        BackendAuthError: Wrong username/email or password.
        BackendValidationError: Backend rejected the credentials format.
    """
    body = LoginRequest(usernameOrEmail=username_or_email, password=password)
    payload = client.post("/auth/login", json=body.model_dump())
    auth = AuthResponse.model_validate(payload)
    logger.info("User %s signed in as %s", auth.user.username, auth.user.role.value)
    return auth


def register(client: BackendClient, data: RegisterRequest) -> RegisterResponse:
    payload = client.post("/auth/register", json=data.model_dump(mode="json", exclude_none=True))
    logger.info("Registered user %s", data.username)
    return RegisterResponse.model_validate(payload or {})


def logout(client: BackendClient) -> None:
    """
    Tell the backend the token is done with.

    The local session is cleared regardless, so backend failures are only
    logged.
    """
    if not client.is_authenticated:
        return
    try:
        client.post("/auth/logout")
    except BackendError as e:
        logger.warning("Backend logout failed: %s", e.message)


def fetch_profile(client: BackendClient) -> SessionUser:
    return SessionUser.model_validate(client.get("/auth/profile"))


def update_profile(client: BackendClient, data: ProfileUpdate) -> None:
    """PUT only the fields that were filled in."""
    client.put("/auth/profile", json=data.model_dump(exclude_none=True))


def change_password(client: BackendClient, current_password: str, new_password: str) -> None:
    body = PasswordChange(current_password=current_password, new_password=new_password)
    client.post("/auth/profile/password", json=body.model_dump())
