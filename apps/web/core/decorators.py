"""
Decorators for request handling and validation.
"""

from collections.abc import Callable
from functools import wraps
from typing import Any

from django.contrib import messages
from django.core.cache import cache
from django.http import HttpRequest, HttpResponse, HttpResponseRedirect
from django.shortcuts import redirect
from django.utils.translation import gettext as _

from supra_schemas import Role

from .auth import login_url


def login_required(view_func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator that requires a signed-in backend user.

    Anonymous visitors are sent to the login page with ?next= set to the
    page they asked for.
    """

    @wraps(view_func)
    def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> Any:
        if getattr(request, "backend_user", None) is None:
            return redirect(login_url(request.get_full_path()))
        return view_func(request, *args, **kwargs)

    return wrapper


def role_required(*roles: Role) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator that requires one of the given roles.

    Usage:
        @role_required(Role.MANAGER, Role.ADMIN)
        def manager_dashboard(request):
            ...
    """

    def decorator(view_func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(view_func)
        def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> Any:
            user = getattr(request, "backend_user", None)
            if user is None:
                return redirect(login_url(request.get_full_path()))
            if user.role not in roles:
                messages.warning(request, _("You do not have access to this page"))
                return redirect("catalog:home")
            return view_func(request, *args, **kwargs)

        return wrapper

    return decorator


def idempotency_key_required(view_func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator that requires an idempotency key on POST form submissions.

    The key comes from the ``idempotency_key`` form field (rendered with the
    form) or the Idempotency-Key header. Submitting the same key twice
    replays the redirect of the first submission instead of calling the
    view again. Replays are kept for 24 hours.

    Usage:
        @idempotency_key_required
        def place_order(request):
            ...
    """

    @wraps(view_func)
    def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> Any:
        if request.method != "POST":
            return view_func(request, *args, **kwargs)

        key = request.POST.get("idempotency_key") or request.headers.get("Idempotency-Key")
        if not key:
            return HttpResponse(_("Idempotency key is required"), status=400)

        cache_key = f"idempotency:{key}"
        cached = cache.get(cache_key)
        if cached:
            return HttpResponseRedirect(cached["location"])

        response = view_func(request, *args, **kwargs)

        # Only completed submissions (redirects) are replayed
        if isinstance(response, HttpResponseRedirect):
            cache.set(cache_key, {"location": response.url}, timeout=86400)

        return response

    return wrapper
