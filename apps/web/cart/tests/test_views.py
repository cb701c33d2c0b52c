"""
Tests for cart views.
"""

from django.urls import reverse

import httpx
import pytest
from supra_schemas import Role

from apps.web.cart.services import CART_SESSION_KEY
from apps.web.core.context_processors import CART_COUNT_SESSION_KEY
from apps.web.core.tests.factories import CartFactory, CartItemFactory


@pytest.fixture
def customer(login_as) -> dict:
    return login_as(Role.USER)


class TestCartDetail:
    """Tests for the cart page."""

    def test_shows_items_and_updates_header_count(self, client, backend_api, customer):
        backend_api.get("/cart").mock(
            return_value=httpx.Response(
                200, json=CartFactory(items=[CartItemFactory(item_name="Khachapuri", quantity=2)])
            )
        )

        response = client.get(reverse("cart:detail"))

        assert response.status_code == 200
        assert b"Khachapuri" in response.content
        assert client.session[CART_COUNT_SESSION_KEY] == 2

    def test_no_cart_yet(self, client, backend_api, customer):
        backend_api.get("/cart").mock(return_value=httpx.Response(404, json={"message": "Cart not found"}))

        response = client.get(reverse("cart:detail"))

        assert response.status_code == 200
        assert b"Your cart is empty" in response.content


class TestAddToCart:
    """Tests for adding dishes."""

    def test_htmx_add_returns_badge(self, client, backend_api, customer):
        backend_api.post("/cart/add").mock(
            return_value=httpx.Response(200, json=CartFactory(items=[CartItemFactory(quantity=3)]))
        )

        response = client.post(reverse("cart:add"), {"item_id": "4"}, headers={"HX-Request": "true"})

        assert response.status_code == 200
        assert b"Added" in response.content
        assert b'id="cart-count"' in response.content

    def test_plain_post_redirects_to_next(self, client, backend_api, customer):
        backend_api.post("/cart/add").mock(
            return_value=httpx.Response(200, json=CartFactory(items=[CartItemFactory()]))
        )

        response = client.post(reverse("cart:add"), {"item_id": "4", "next": "/menu/?page=2"})

        assert response.url == "/menu/?page=2"

    def test_missing_item_is_bad_request(self, client, customer):
        response = client.post(reverse("cart:add"), {"item_id": "x"})
        assert response.status_code == 400

    def test_guests_must_sign_in(self, client):
        response = client.post(reverse("cart:add"), {"item_id": "4"})
        assert response.status_code == 302
        assert response.url.startswith(reverse("accounts:login"))


class TestUpdateCart:
    """Tests for quantity changes and removal."""

    @pytest.fixture
    def stored_cart(self, client, customer) -> dict:
        cart = CartFactory(items=[CartItemFactory(item_id=1), CartItemFactory(item_id=2)])
        session = client.session
        session[CART_SESSION_KEY] = cart
        session[CART_COUNT_SESSION_KEY] = 2
        session.save()
        return cart

    def test_rejected_change_shows_error_and_old_cart(self, client, backend_api, stored_cart):
        backend_api.put("/cart/item/1").mock(
            return_value=httpx.Response(404, json={"message": "Item not in cart"})
        )

        response = client.post(
            reverse("cart:update_item", args=[1]), {"quantity": "5"}, headers={"HX-Request": "true"}
        )

        assert response.status_code == 200
        assert b"Item not in cart" in response.content
        assert client.session[CART_SESSION_KEY]["items"][0]["quantity"] == 1

    def test_remove_returns_partial_with_trigger(self, client, backend_api, stored_cart):
        backend_api.delete("/cart/item/2").mock(
            return_value=httpx.Response(200, json=CartFactory(items=[CartItemFactory(item_id=1)]))
        )

        response = client.post(reverse("cart:remove_item", args=[2]), headers={"HX-Request": "true"})

        assert response["HX-Trigger"] == "cartChanged"
        assert client.session[CART_COUNT_SESSION_KEY] == 1

    def test_bad_quantity(self, client, stored_cart):
        response = client.post(reverse("cart:update_item", args=[1]), {"quantity": "-2"})
        assert response.status_code == 400

    def test_clear(self, client, backend_api, stored_cart):
        route = backend_api.delete("/cart/clear").mock(return_value=httpx.Response(200, json={}))

        response = client.post(reverse("cart:clear"))

        assert route.called
        assert response.url == reverse("cart:detail")
        assert client.session[CART_COUNT_SESSION_KEY] == 0
