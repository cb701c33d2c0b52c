"""Template context shared by every page."""

from typing import Any

from django.http import HttpRequest

from .roles import ADMIN_ROLES, CUSTOMER_ROLES, STAFF_ROLES, has_role

CART_COUNT_SESSION_KEY = "cart_count"


def session_user(request: HttpRequest) -> dict[str, Any]:
    user = getattr(request, "backend_user", None)
    is_customer = has_role(user, *CUSTOMER_ROLES)
    return {
        "current_user": user,
        "is_customer": is_customer,
        "is_manager": has_role(user, *STAFF_ROLES),
        "is_admin": has_role(user, *ADMIN_ROLES),
        "cart_count": request.session.get(CART_COUNT_SESSION_KEY, 0) if is_customer else 0,
    }
