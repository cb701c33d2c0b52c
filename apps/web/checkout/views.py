"""
Checkout views - the three-step order wizard and order history.

Each step redirects to the next on a valid POST. Opening a step whose
predecessors are not done sends the customer back to the first open one.
"""

import uuid

from django.contrib import messages
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.utils.translation import gettext as _
from django.views.decorators.http import require_GET, require_http_methods

from supra_schemas import OrderType, Role

from apps.web.backend import BackendAuthError, BackendError, describe_error
from apps.web.cart.services import CartMirror, fetch_cart
from apps.web.core.decorators import idempotency_key_required, role_required
from apps.web.core.validation import normalize_phone
from apps.web.reservations.services import started_reservations

from . import services
from .services import STEP_CONFIRM, STEP_DETAILS, STEP_TYPE, CheckoutState, CheckoutWizard

STEP_URLS = {
    STEP_TYPE: "checkout:start",
    STEP_DETAILS: "checkout:details",
    STEP_CONFIRM: "checkout:confirm",
}


def _load_cart(request: HttpRequest):
    return fetch_cart(request.backend, CartMirror(request.session))  # type: ignore[attr-defined]


def _empty_cart_redirect(request: HttpRequest) -> HttpResponse:
    messages.info(request, _("Your cart is empty"))
    return redirect("cart:detail")


def _step_context(state: CheckoutState, cart, step: int) -> dict:
    return {
        "state": state,
        "cart": cart,
        "step": step,
        "steps": [(STEP_TYPE, _("Order type")), (STEP_DETAILS, _("Details")), (STEP_CONFIRM, _("Confirm"))],
        **services.order_totals(cart.total_amount, state.order_type),
    }


@role_required(Role.USER)
@require_http_methods(["GET", "POST"])
def start(request: HttpRequest) -> HttpResponse:
    """
    GET/POST /checkout/

    Step 1: delivery or dine-in.
    """
    cart = _load_cart(request)
    if cart is None or cart.is_empty:
        return _empty_cart_redirect(request)

    wizard = CheckoutWizard(request.session)
    state = wizard.load()
    errors: list[str] = []

    if request.method == "POST":
        try:
            order_type = OrderType(request.POST.get("order_type", ""))
        except ValueError:
            errors.append(_("Choose delivery or dine-in"))
        else:
            if order_type != state.order_type:
                state = state.model_copy(update={"order_type": order_type, "reservation_id": None})
            wizard.save(state.model_copy(update={"step": STEP_DETAILS}))
            return redirect("checkout:details")

    context = _step_context(state, cart, STEP_TYPE)
    context.update({"errors": errors, "order_types": list(OrderType)})
    return render(request, "checkout/step_type.html", context)


@role_required(Role.USER)
@require_http_methods(["GET", "POST"])
def details(request: HttpRequest) -> HttpResponse:
    """
    GET/POST /checkout/details/

    Step 2: delivery address, or the reservation a dine-in order belongs to.
    """
    cart = _load_cart(request)
    if cart is None or cart.is_empty:
        return _empty_cart_redirect(request)

    wizard = CheckoutWizard(request.session)
    state = wizard.load()
    if state.order_type is None:
        return redirect("checkout:start")

    client = request.backend  # type: ignore[attr-defined]
    errors: list[str] = []
    field_errors: dict[str, str] = {}
    reservations = []

    if state.is_delivery:
        if request.method == "POST":
            state = state.model_copy(
                update={
                    "delivery_country": request.POST.get("delivery_country", "").strip(),
                    "delivery_city": request.POST.get("delivery_city", "").strip(),
                    "delivery_street_address": request.POST.get("delivery_street_address", "").strip(),
                    "delivery_phone": normalize_phone(request.POST.get("delivery_phone", "")),
                    "save_address": bool(request.POST.get("save_address")),
                }
            )
            field_errors = services.validate_delivery(state)
            if not field_errors:
                wizard.save(state.model_copy(update={"step": STEP_CONFIRM}))
                return redirect("checkout:confirm")
        elif not state.delivery_street_address:
            address = services.fetch_address(client)
            user = request.backend_user  # type: ignore[attr-defined]
            state = state.model_copy(
                update={
                    "delivery_country": address.country or user.country or "",
                    "delivery_city": address.city or user.city or "",
                    "delivery_street_address": address.street_address or user.street_address or "",
                    "delivery_phone": normalize_phone(user.phone or ""),
                }
            )
    else:
        reservations = started_reservations(client)
        if request.method == "POST":
            if reservations:
                wizard.save(
                    state.model_copy(
                        update={"step": STEP_CONFIRM, "reservation_id": reservations[0].reservation_id}
                    )
                )
                return redirect("checkout:confirm")
            errors.append(_("Dine-in orders need a reservation you are seated at"))

    context = _step_context(state, cart, STEP_DETAILS)
    context.update(
        {
            "errors": errors,
            "field_errors": field_errors,
            "reservation": reservations[0] if reservations else None,
        }
    )
    return render(request, "checkout/step_details.html", context)


@role_required(Role.USER)
@require_http_methods(["GET", "POST"])
@idempotency_key_required
def confirm(request: HttpRequest) -> HttpResponse:
    """
    GET/POST /checkout/confirm/

    Step 3: order summary with the estimated fee; POST places the order.
    """
    cart = _load_cart(request)
    if cart is None or cart.is_empty:
        return _empty_cart_redirect(request)

    wizard = CheckoutWizard(request.session)
    state = wizard.load()
    if state.step < STEP_CONFIRM:
        return redirect(STEP_URLS[state.step if state.order_type else STEP_TYPE])

    errors: list[str] = []
    if request.method == "POST":
        try:
            order = services.place_order(request.backend, state.to_order())  # type: ignore[attr-defined]
        except BackendAuthError:
            raise
        except BackendError as e:
            errors.append(describe_error(e, default=_("Could not place the order")))
        else:
            CartMirror(request.session).clear()
            wizard.clear()
            return redirect("checkout:success", order_id=order.order_id)

    context = _step_context(state, cart, STEP_CONFIRM)
    context.update({"errors": errors, "idempotency_key": uuid.uuid4().hex})
    return render(request, "checkout/step_confirm.html", context)


@role_required(Role.USER)
@require_GET
def success(request: HttpRequest, order_id: str) -> HttpResponse:
    """
    GET /checkout/success/{order_id}/
    """
    order = services.get_order(request.backend, order_id)  # type: ignore[attr-defined]
    return render(request, "checkout/success.html", {"order": order})


@role_required(Role.USER)
@require_GET
def order_list(request: HttpRequest) -> HttpResponse:
    """
    GET /profile/orders/

    The customer's orders, newest first, with their items.
    """
    orders = services.my_orders(request.backend)  # type: ignore[attr-defined]
    return render(request, "checkout/orders.html", {"orders": orders})
