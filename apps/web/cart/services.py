"""
Cart services - backend cart calls plus the session mirror.

The session keeps the last known cart. It drives the header count and the
item order shown to the customer: the backend may return items in any
order, so server results are merged into the order the customer already
sees, with new items appended at the end.

Quantity changes and removals are applied to the mirror first and rolled
back to the previous snapshot when the backend rejects them.
"""

import logging
from decimal import Decimal

from django.contrib.sessions.backends.base import SessionBase

from supra_schemas import AddToCartRequest, Cart, CartItem, UpdateCartItemRequest

from apps.web.backend import BackendClient, BackendError, BackendNotFoundError
from apps.web.core.context_processors import CART_COUNT_SESSION_KEY

logger = logging.getLogger(__name__)

CART_SESSION_KEY = "cart"


# =============================================================================
# Pure cart arithmetic
# =============================================================================


def with_items(cart: Cart, items: list[CartItem]) -> Cart:
    """Copy of the cart holding these items, with totals recomputed."""
    return cart.model_copy(
        update={
            "items": items,
            "total_items": sum(item.quantity for item in items),
            "total_amount": sum((item.total_price for item in items), Decimal("0.00")),
        }
    )


def set_quantity(cart: Cart, item_id: int, quantity: int) -> Cart:
    """Optimistic quantity change: line total = unit price * quantity."""
    items = [
        item.model_copy(update={"quantity": quantity, "total_price": item.unit_price * quantity})
        if item.item_id == item_id
        else item
        for item in cart.items
    ]
    return with_items(cart, items)


def drop_item(cart: Cart, item_id: int) -> Cart:
    """Optimistic removal of one dish."""
    return with_items(cart, [item for item in cart.items if item.item_id != item_id])


def merge_preserving_order(previous: Cart | None, server: Cart) -> Cart:
    """
    Take the server cart but keep the customer's item order.

    Items already shown stay where they were (with server values); items
    the customer has not seen yet go to the end in server order.
    """
    if previous is None or not previous.items:
        return server

    by_id = {item.item_id: item for item in server.items}
    known = [by_id[item.item_id] for item in previous.items if item.item_id in by_id]
    seen = {item.item_id for item in previous.items}
    new = [item for item in server.items if item.item_id not in seen]
    return server.model_copy(update={"items": known + new})


# =============================================================================
# Session mirror
# =============================================================================


class CartMirror:
    """The customer's last known cart, stored in the session."""

    def __init__(self, session: SessionBase) -> None:
        self.session = session

    def load(self) -> Cart | None:
        data = self.session.get(CART_SESSION_KEY)
        if not data:
            return None
        return Cart.model_validate(data)

    def save(self, cart: Cart | None) -> None:
        if cart is None:
            self.session.pop(CART_SESSION_KEY, None)
            self.session[CART_COUNT_SESSION_KEY] = 0
            return
        self.session[CART_SESSION_KEY] = cart.model_dump(mode="json")
        self.session[CART_COUNT_SESSION_KEY] = cart.total_items

    def clear(self) -> None:
        self.save(None)


# =============================================================================
# Backend operations
# =============================================================================


def _parse(payload: object) -> Cart | None:
    if not isinstance(payload, dict) or "cart_id" not in payload:
        return None
    return Cart.model_validate(payload)


def fetch_cart(client: BackendClient, mirror: CartMirror) -> Cart | None:
    """
    GET /cart, merged into the mirror's order.

    A 404 means the customer has no cart yet; that is an empty cart, not an
    error.
    """
    try:
        server = _parse(client.get("/cart"))
    except BackendNotFoundError:
        server = None

    if server is None:
        mirror.clear()
        return None

    cart = merge_preserving_order(mirror.load(), server)
    mirror.save(cart)
    return cart


def add_item(client: BackendClient, mirror: CartMirror, item_id: int, quantity: int = 1) -> Cart | None:
    body = AddToCartRequest(item_id=item_id, quantity=quantity)
    server = _parse(client.post("/cart/add", json=body.model_dump()))
    if server is None:
        return fetch_cart(client, mirror)
    cart = merge_preserving_order(mirror.load(), server)
    mirror.save(cart)
    logger.info("Added item %s x%d to cart %s", item_id, quantity, cart.cart_id)
    return cart


def update_quantity(
    client: BackendClient, mirror: CartMirror, item_id: int, quantity: int
) -> Cart | None:
    """
    Change a line's quantity. A quantity below 1 removes the line.

    Raises:
        BackendError: The backend rejected the change (mirror rolled back).
    """
    if quantity < 1:
        return remove_item(client, mirror, item_id)

    previous = mirror.load()
    if previous is not None:
        mirror.save(set_quantity(previous, item_id, quantity))

    body = UpdateCartItemRequest(quantity=quantity)
    try:
        server = _parse(client.put(f"/cart/item/{item_id}", json=body.model_dump()))
    except BackendError:
        mirror.save(previous)
        raise

    if server is None:
        return fetch_cart(client, mirror)
    cart = merge_preserving_order(previous, server)
    mirror.save(cart)
    return cart


def remove_item(client: BackendClient, mirror: CartMirror, item_id: int) -> Cart | None:
    """
    Remove a line.

    Raises:
        BackendError: The backend rejected the removal (mirror rolled back).
    """
    previous = mirror.load()
    if previous is not None:
        mirror.save(drop_item(previous, item_id))

    try:
        server = _parse(client.delete(f"/cart/item/{item_id}"))
    except BackendError:
        mirror.save(previous)
        raise

    if server is None:
        return fetch_cart(client, mirror)
    cart = merge_preserving_order(previous, server)
    mirror.save(cart)
    return cart


def clear_cart(client: BackendClient, mirror: CartMirror) -> None:
    client.delete("/cart/clear")
    mirror.clear()
