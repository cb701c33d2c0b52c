"""Authentication and user schemas - data contracts for /auth endpoints."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, EmailStr, Field

# =============================================================================
# Enums
# =============================================================================


class Role(str, Enum):
    """User roles known to the backend."""

    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"
    GUEST = "guest"


# Backend role ids (users.role_id)
ROLE_IDS: dict[Role, int] = {
    Role.ADMIN: 1,
    Role.MANAGER: 2,
    Role.USER: 3,
}

DEFAULT_ROLE_ID = ROLE_IDS[Role.USER]


# =============================================================================
# Users
# =============================================================================


class SessionUser(BaseModel):
    """The signed-in user as returned by /auth/login and /auth/profile."""

    user_id: str
    username: str
    email: str
    first_name: str = ""
    last_name: str = ""
    phone: str | None = None
    country: str | None = None
    city: str | None = None
    street_address: str | None = None
    role: Role = Role.USER
    role_id: int = DEFAULT_ROLE_ID
    created_at: datetime | None = None
    last_login: datetime | None = None

    @property
    def full_name(self) -> str:
        """First and last name, falling back to the username."""
        name = f"{self.first_name} {self.last_name}".strip()
        return name or self.username


class UserSummary(BaseModel):
    """A user row as listed by /auth/users (managers and admins)."""

    user_id: str
    username: str
    email: str
    first_name: str = ""
    last_name: str = ""
    phone: str | None = None
    role: Role = Role.USER
    role_id: int = DEFAULT_ROLE_ID
    created_at: datetime | None = None
    last_login: datetime | None = None


# =============================================================================
# Requests
# =============================================================================


class LoginRequest(BaseModel):
    """Credentials posted to /auth/login."""

    usernameOrEmail: str = Field(min_length=1)
    password: str = Field(min_length=1)


class RegisterRequest(BaseModel):
    """New account posted to /auth/register."""

    username: str = Field(min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(min_length=8)
    first_name: str = Field(min_length=2, max_length=50)
    last_name: str = Field(min_length=2, max_length=50)
    phone: str | None = None


class ProfileUpdate(BaseModel):
    """Profile fields sent to PUT /auth/profile."""

    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    country: str | None = None
    city: str | None = None
    street_address: str | None = None


class PasswordChange(BaseModel):
    """Body of POST /auth/profile/password."""

    current_password: str
    new_password: str


class UserCreate(BaseModel):
    """Admin-created account (POST /auth/users)."""

    username: str
    email: EmailStr
    password: str
    first_name: str
    last_name: str
    phone: str | None = None
    role_id: int = DEFAULT_ROLE_ID


class UserUpdate(BaseModel):
    """Admin edit of an account. Unset fields are left unchanged."""

    username: str | None = None
    email: EmailStr | None = None
    password: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    role_id: int | None = None


# =============================================================================
# Responses
# =============================================================================


class AuthResponse(BaseModel):
    """Successful login."""

    access_token: str
    user: SessionUser


class RegisterResponse(BaseModel):
    """Successful registration."""

    status: str = ""
    message: str = ""
    user: SessionUser | None = None
