"""Role groups used to gate pages and actions."""

from supra_schemas import Role, SessionUser

STAFF_ROLES = frozenset({Role.MANAGER, Role.ADMIN})
ADMIN_ROLES = frozenset({Role.ADMIN})
CUSTOMER_ROLES = frozenset({Role.USER})

ROLE_LABELS = {
    Role.ADMIN: "Administrator",
    Role.MANAGER: "Manager",
    Role.USER: "Customer",
    Role.GUEST: "Guest",
}


def has_role(user: SessionUser | None, *roles: Role) -> bool:
    """True when a signed-in user holds one of the given roles."""
    return user is not None and user.role in roles
