"""
Tests for the checkout wizard views.
"""

import json

from django.urls import reverse

import httpx
import pytest
from supra_schemas import OrderType, Role

from apps.web.cart.services import CART_SESSION_KEY
from apps.web.checkout.services import CHECKOUT_SESSION_KEY, STEP_CONFIRM, STEP_DETAILS, CheckoutState
from apps.web.core.context_processors import CART_COUNT_SESSION_KEY
from apps.web.core.tests.factories import CartFactory, CartItemFactory, OrderFactory, ReservationFactory


@pytest.fixture
def customer(login_as) -> dict:
    return login_as(Role.USER, phone="+995555123456", street_address="12 Rustaveli Avenue")


@pytest.fixture
def full_cart(backend_api) -> dict:
    cart = CartFactory(items=[CartItemFactory(item_name="Khachapuri", unit_price="20.00", quantity=1)])
    backend_api.get("/cart").mock(return_value=httpx.Response(200, json=cart))
    return cart


def save_state(client, state: CheckoutState) -> None:
    session = client.session
    session[CHECKOUT_SESSION_KEY] = state.model_dump(mode="json")
    session.save()


def confirmed_delivery() -> CheckoutState:
    return CheckoutState(
        step=STEP_CONFIRM,
        order_type=OrderType.DELIVERY,
        delivery_country="Georgia",
        delivery_city="Tbilisi",
        delivery_street_address="12 Rustaveli Avenue",
        delivery_phone="+995555123456",
    )


class TestEmptyCart:
    @pytest.mark.parametrize("url_name", ["checkout:start", "checkout:details", "checkout:confirm"])
    def test_every_step_needs_items(self, client, backend_api, customer, url_name):
        backend_api.get("/cart").mock(return_value=httpx.Response(404, json={"message": "Cart not found"}))

        response = client.get(reverse(url_name))

        assert response.status_code == 302
        assert response.url == reverse("cart:detail")


class TestStart:
    """Tests for step 1, choosing the order type."""

    def test_shows_delivery_fee_estimate(self, client, customer, full_cart):
        save_state(client, CheckoutState(order_type=OrderType.DELIVERY))

        response = client.get(reverse("checkout:start"))

        assert response.status_code == 200
        assert str(response.context["delivery_fee"]) == "1.00"
        assert str(response.context["total"]) == "21.00"

    def test_choice_moves_to_details(self, client, customer, full_cart):
        response = client.post(reverse("checkout:start"), {"order_type": "dine_in"})

        assert response.url == reverse("checkout:details")
        state = client.session[CHECKOUT_SESSION_KEY]
        assert state["order_type"] == "dine_in"
        assert state["step"] == STEP_DETAILS

    def test_unknown_type(self, client, customer, full_cart):
        response = client.post(reverse("checkout:start"), {"order_type": "drone"})

        assert response.status_code == 200
        assert response.context["errors"] == ["Choose delivery or dine-in"]


class TestDetails:
    """Tests for step 2, delivery address or reservation."""

    def test_without_type_goes_back(self, client, customer, full_cart):
        response = client.get(reverse("checkout:details"))
        assert response.url == reverse("checkout:start")

    def test_delivery_prefills_saved_address(self, client, backend_api, customer, full_cart):
        save_state(client, CheckoutState(step=STEP_DETAILS, order_type=OrderType.DELIVERY))
        backend_api.get("/orders/my-address").mock(
            return_value=httpx.Response(200, json={"country": "Georgia", "city": "Batumi", "street_address": "5 Sea Street"})
        )

        response = client.get(reverse("checkout:details"))

        state = response.context["state"]
        assert (state.delivery_city, state.delivery_street_address) == ("Batumi", "5 Sea Street")
        assert state.delivery_phone == "+995555123456"

    def test_valid_delivery_moves_to_confirm(self, client, customer, full_cart):
        save_state(client, CheckoutState(step=STEP_DETAILS, order_type=OrderType.DELIVERY))

        response = client.post(
            reverse("checkout:details"),
            {
                "delivery_country": "Georgia",
                "delivery_city": "Tbilisi",
                "delivery_street_address": "12 Rustaveli Avenue",
                "delivery_phone": "+995 555 123 456",
                "save_address": "on",
            },
        )

        assert response.url == reverse("checkout:confirm")
        state = client.session[CHECKOUT_SESSION_KEY]
        assert state["delivery_phone"] == "+995555123456"
        assert state["save_address"] is True

    def test_invalid_delivery_shows_errors(self, client, customer, full_cart):
        save_state(client, CheckoutState(step=STEP_DETAILS, order_type=OrderType.DELIVERY))

        response = client.post(reverse("checkout:details"), {"delivery_city": "T"})

        assert response.status_code == 200
        assert set(response.context["field_errors"]) == {
            "delivery_country",
            "delivery_city",
            "delivery_street_address",
            "delivery_phone",
        }

    def test_dine_in_uses_started_reservation(self, client, backend_api, customer, full_cart):
        save_state(client, CheckoutState(step=STEP_DETAILS, order_type=OrderType.DINE_IN))
        backend_api.get("/reservations/my/active").mock(
            return_value=httpx.Response(
                200,
                json=[
                    ReservationFactory(reservation_id="r-confirmed", reservation_status="confirmed"),
                    ReservationFactory(reservation_id="r-seated", reservation_status="started"),
                ],
            )
        )

        response = client.post(reverse("checkout:details"))

        assert response.url == reverse("checkout:confirm")
        assert client.session[CHECKOUT_SESSION_KEY]["reservation_id"] == "r-seated"

    def test_dine_in_without_seated_reservation(self, client, backend_api, customer, full_cart):
        save_state(client, CheckoutState(step=STEP_DETAILS, order_type=OrderType.DINE_IN))
        backend_api.get("/reservations/my/active").mock(return_value=httpx.Response(200, json=[]))

        response = client.post(reverse("checkout:details"))

        assert response.status_code == 200
        assert response.context["errors"] == ["Dine-in orders need a reservation you are seated at"]


class TestConfirm:
    """Tests for step 3, placing the order."""

    def test_unfinished_wizard_goes_back(self, client, customer, full_cart):
        save_state(client, CheckoutState(step=STEP_DETAILS, order_type=OrderType.DELIVERY))

        response = client.get(reverse("checkout:confirm"))

        assert response.url == reverse("checkout:details")

    def test_page_carries_idempotency_key(self, client, customer, full_cart):
        save_state(client, confirmed_delivery())

        response = client.get(reverse("checkout:confirm"))

        assert len(response.context["idempotency_key"]) == 32
        assert b'name="idempotency_key"' in response.content

    def test_place_order(self, client, backend_api, customer, full_cart):
        save_state(client, confirmed_delivery())
        route = backend_api.post("/orders").mock(
            return_value=httpx.Response(201, json=OrderFactory(order_id="o-42"))
        )

        response = client.post(reverse("checkout:confirm"), {"idempotency_key": "key-1"})

        assert response.url == reverse("checkout:success", args=["o-42"])
        assert json.loads(route.calls.last.request.content)["delivery_city"] == "Tbilisi"
        session = client.session
        assert CHECKOUT_SESSION_KEY not in session
        assert CART_SESSION_KEY not in session
        assert session[CART_COUNT_SESSION_KEY] == 0

    def test_double_submit_places_one_order(self, client, backend_api, customer, full_cart):
        save_state(client, confirmed_delivery())
        route = backend_api.post("/orders").mock(
            return_value=httpx.Response(201, json=OrderFactory(order_id="o-42"))
        )

        first = client.post(reverse("checkout:confirm"), {"idempotency_key": "key-2"})
        second = client.post(reverse("checkout:confirm"), {"idempotency_key": "key-2"})

        assert route.call_count == 1
        assert second.url == first.url

    def test_missing_key_is_rejected(self, client, backend_api, customer, full_cart):
        save_state(client, confirmed_delivery())
        route = backend_api.post("/orders")

        response = client.post(reverse("checkout:confirm"))

        assert response.status_code == 400
        assert not route.called

    def test_backend_rejection_keeps_wizard(self, client, backend_api, customer, full_cart):
        save_state(client, confirmed_delivery())
        backend_api.post("/orders").mock(
            return_value=httpx.Response(400, json={"message": ["Cart is empty"]})
        )

        response = client.post(reverse("checkout:confirm"), {"idempotency_key": "key-3"})

        assert response.status_code == 200
        assert response.context["errors"] == ["Cart is empty"]
        assert CHECKOUT_SESSION_KEY in client.session


class TestOrders:
    def test_success_page(self, client, backend_api, customer):
        backend_api.get("/orders/o-42").mock(return_value=httpx.Response(200, json=OrderFactory(order_id="o-42")))

        response = client.get(reverse("checkout:success", args=["o-42"]))

        assert response.status_code == 200
        assert response.context["order"].order_id == "o-42"

    def test_order_history(self, client, backend_api, customer):
        backend_api.get("/orders/my").mock(
            return_value=httpx.Response(200, json={"data": [OrderFactory(), OrderFactory()]})
        )

        response = client.get(reverse("checkout:orders"))

        assert len(response.context["orders"]) == 2
