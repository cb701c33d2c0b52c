"""
Checkout services - the order wizard state, fees and /orders calls.

The wizard state lives in the session between the three steps:
1. order type, 2. delivery address or dine-in reservation, 3. confirm.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.contrib.sessions.backends.base import SessionBase
from django.utils.translation import gettext as _

from pydantic import BaseModel
from supra_schemas import Order, OrderCreate, OrderType, UserAddress

from apps.web.backend import BackendClient, BackendNotFoundError, unwrap_list
from apps.web.core.validation import FormErrors, is_valid_contact_phone, require_length

logger = logging.getLogger(__name__)

CHECKOUT_SESSION_KEY = "checkout"

STEP_TYPE = 1
STEP_DETAILS = 2
STEP_CONFIRM = 3

CENTS = Decimal("0.01")


class CheckoutState(BaseModel):
    """What the customer has filled in so far."""

    step: int = STEP_TYPE
    order_type: OrderType | None = None
    delivery_country: str = ""
    delivery_city: str = ""
    delivery_street_address: str = ""
    delivery_phone: str = ""
    save_address: bool = False
    reservation_id: str | None = None

    @property
    def is_delivery(self) -> bool:
        return self.order_type == OrderType.DELIVERY

    def to_order(self) -> OrderCreate:
        """Body of POST /orders for the collected answers."""
        if self.is_delivery:
            return OrderCreate(
                order_type=OrderType.DELIVERY,
                delivery_country=self.delivery_country,
                delivery_city=self.delivery_city,
                delivery_street_address=self.delivery_street_address,
                delivery_phone=self.delivery_phone,
                should_update_user_address=self.save_address,
            )
        return OrderCreate(order_type=OrderType.DINE_IN, reservation_id=self.reservation_id)


class CheckoutWizard:
    """Checkout state stored in the session."""

    def __init__(self, session: SessionBase) -> None:
        self.session = session

    def load(self) -> CheckoutState:
        data = self.session.get(CHECKOUT_SESSION_KEY)
        if not data:
            return CheckoutState()
        return CheckoutState.model_validate(data)

    def save(self, state: CheckoutState) -> None:
        self.session[CHECKOUT_SESSION_KEY] = state.model_dump(mode="json")

    def clear(self) -> None:
        self.session.pop(CHECKOUT_SESSION_KEY, None)


# =============================================================================
# Totals
# =============================================================================


def delivery_fee(subtotal: Decimal, order_type: OrderType | None) -> Decimal:
    """Estimated fee shown before submit; the backend's figure is final."""
    if order_type != OrderType.DELIVERY:
        return Decimal("0.00")
    rate = Decimal(settings.DELIVERY_FEE_RATE)
    return (subtotal * rate).quantize(CENTS, rounding=ROUND_HALF_UP)


def order_totals(subtotal: Decimal, order_type: OrderType | None) -> dict[str, Decimal]:
    fee = delivery_fee(subtotal, order_type)
    return {"subtotal": subtotal, "delivery_fee": fee, "total": subtotal + fee}


# =============================================================================
# Validation
# =============================================================================


def validate_delivery(state: CheckoutState) -> FormErrors:
    errors: FormErrors = {}
    require_length(errors, "delivery_country", state.delivery_country, 2, 100, label=_("Country"))
    require_length(errors, "delivery_city", state.delivery_city, 2, 100, label=_("City"))
    require_length(
        errors,
        "delivery_street_address",
        state.delivery_street_address,
        5,
        500,
        label=_("Address"),
    )
    if not state.delivery_phone:
        errors["delivery_phone"] = _("Enter a contact phone")
    elif not is_valid_contact_phone(state.delivery_phone):
        errors["delivery_phone"] = _("Phone must be in international format, e.g. +995555123456")
    return errors


# =============================================================================
# Backend operations
# =============================================================================


def fetch_address(client: BackendClient) -> UserAddress:
    """Saved delivery address; an empty one when the user has none."""
    try:
        payload = client.get("/orders/my-address")
    except BackendNotFoundError:
        return UserAddress()
    return UserAddress.model_validate(payload or {})


def place_order(client: BackendClient, data: OrderCreate) -> Order:
    payload = client.post("/orders", json=data.model_dump(mode="json", exclude_none=True))
    order = Order.model_validate(payload)
    logger.info(
        "Placed %s order %s, total %s",
        order.order_type.value,
        order.order_id,
        order.total_amount,
    )
    return order


def my_orders(client: BackendClient) -> list[Order]:
    orders = [Order.model_validate(item) for item in unwrap_list(client.get("/orders/my"))]
    return sorted(
        orders, key=lambda o: o.created_at.timestamp() if o.created_at else 0, reverse=True
    )


def get_order(client: BackendClient, order_id: str) -> Order:
    return Order.model_validate(client.get(f"/orders/{order_id}"))
