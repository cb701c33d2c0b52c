"""
Cart views - the customer's basket.

HTMX requests get the cart partial back; plain form posts redirect to the
cart page.
"""

from django.contrib import messages
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils.translation import gettext as _
from django.views.decorators.http import require_GET, require_POST

from supra_schemas import Cart, Role

from apps.web.backend import BackendAuthError, BackendError, describe_error
from apps.web.core.auth import safe_next_url
from apps.web.core.decorators import role_required
from apps.web.core.query import query_int

from . import services


def _mirror(request: HttpRequest) -> services.CartMirror:
    return services.CartMirror(request.session)


def _cart_response(
    request: HttpRequest, cart: Cart | None, error: str | None = None
) -> HttpResponse:
    if request.headers.get("HX-Request"):
        response = render(
            request,
            "cart/partials/cart_body.html",
            {
                "cart": cart,
                "error": error,
                "cart_count": cart.total_items if cart else 0,
                "is_htmx": True,
            },
        )
        response["HX-Trigger"] = "cartChanged"
        return response

    if error:
        messages.error(request, error)
    return redirect("cart:detail")


@role_required(Role.USER)
@require_GET
def cart_detail(request: HttpRequest) -> HttpResponse:
    """
    GET /cart/

    The cart with quantity controls and the checkout button.
    """
    cart = services.fetch_cart(request.backend, _mirror(request))  # type: ignore[attr-defined]
    return render(request, "cart/cart.html", {"cart": cart})


@role_required(Role.USER)
@require_POST
def add(request: HttpRequest) -> HttpResponse:
    """
    POST /cart/add/

    Add a dish (quantity defaults to 1).
    """
    item_id = query_int(request.POST, "item_id", minimum=1)
    quantity = query_int(request.POST, "quantity", minimum=1) or 1
    if item_id is None:
        return HttpResponse(_("Dish is required"), status=400)

    error = None
    try:
        cart = services.add_item(request.backend, _mirror(request), item_id, quantity)  # type: ignore[attr-defined]
    except BackendAuthError:
        raise
    except BackendError as e:
        error = describe_error(e, default=_("Could not add the dish to the cart"))
        cart = None

    if request.headers.get("HX-Request"):
        return render(
            request,
            "cart/partials/added.html",
            {"error": error, "cart_count": cart.total_items if cart else None},
        )

    if error:
        messages.error(request, error)
    else:
        messages.success(request, _("Added to cart"))
    return redirect(safe_next_url(request.POST.get("next"), reverse("catalog:menu")))


@role_required(Role.USER)
@require_POST
def update_item(request: HttpRequest, item_id: int) -> HttpResponse:
    """
    POST /cart/item/{item_id}/

    Set a line's quantity; 0 removes the line.
    """
    quantity = query_int(request.POST, "quantity", minimum=0)
    if quantity is None:
        return HttpResponse(_("Quantity must be a whole number"), status=400)

    mirror = _mirror(request)
    try:
        cart = services.update_quantity(request.backend, mirror, item_id, quantity)  # type: ignore[attr-defined]
    except BackendAuthError:
        raise
    except BackendError as e:
        return _cart_response(request, mirror.load(), describe_error(e))
    return _cart_response(request, cart)


@role_required(Role.USER)
@require_POST
def remove_item(request: HttpRequest, item_id: int) -> HttpResponse:
    """
    POST /cart/item/{item_id}/remove/
    """
    mirror = _mirror(request)
    try:
        cart = services.remove_item(request.backend, mirror, item_id)  # type: ignore[attr-defined]
    except BackendAuthError:
        raise
    except BackendError as e:
        return _cart_response(request, mirror.load(), describe_error(e))
    return _cart_response(request, cart)


@role_required(Role.USER)
@require_POST
def clear(request: HttpRequest) -> HttpResponse:
    """
    POST /cart/clear/
    """
    mirror = _mirror(request)
    try:
        services.clear_cart(request.backend, mirror)  # type: ignore[attr-defined]
    except BackendAuthError:
        raise
    except BackendError as e:
        return _cart_response(request, mirror.load(), describe_error(e))
    return _cart_response(request, None)
