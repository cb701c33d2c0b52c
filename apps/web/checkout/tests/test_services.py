"""Tests for checkout services - fees, wizard state and order calls."""

import json
from decimal import Decimal

from django.contrib.sessions.backends.cache import SessionStore

import httpx
import pytest
from supra_schemas import OrderType

from apps.web.backend import BackendClient
from apps.web.checkout import services
from apps.web.checkout.services import STEP_CONFIRM, CheckoutState, CheckoutWizard
from apps.web.core.tests.factories import OrderFactory


@pytest.fixture
def api() -> BackendClient:
    return BackendClient(token="jwt", base_url="http://backend.test")


def delivery_state(**fields) -> CheckoutState:
    values = {
        "order_type": OrderType.DELIVERY,
        "delivery_country": "Georgia",
        "delivery_city": "Tbilisi",
        "delivery_street_address": "12 Rustaveli Avenue",
        "delivery_phone": "+995555123456",
    }
    values.update(fields)
    return CheckoutState(**values)


class TestDeliveryFee:
    """Tests for the estimated delivery fee."""

    def test_five_percent_of_subtotal(self):
        assert services.delivery_fee(Decimal("40.00"), OrderType.DELIVERY) == Decimal("2.00")

    def test_rounds_half_up_to_cents(self):
        assert services.delivery_fee(Decimal("10.10"), OrderType.DELIVERY) == Decimal("0.51")

    def test_dine_in_is_free(self):
        assert services.delivery_fee(Decimal("40.00"), OrderType.DINE_IN) == Decimal("0.00")

    def test_rate_comes_from_settings(self, settings):
        settings.DELIVERY_FEE_RATE = "0.10"
        assert services.delivery_fee(Decimal("40.00"), OrderType.DELIVERY) == Decimal("4.00")

    def test_order_totals(self):
        totals = services.order_totals(Decimal("20.00"), OrderType.DELIVERY)
        assert totals == {"subtotal": Decimal("20.00"), "delivery_fee": Decimal("1.00"), "total": Decimal("21.00")}


class TestCheckoutState:
    """Tests for turning wizard answers into an order."""

    def test_delivery_order(self):
        order = delivery_state(save_address=True, reservation_id="ignored").to_order()

        assert order.model_dump(mode="json", exclude_none=True) == {
            "order_type": "delivery",
            "delivery_country": "Georgia",
            "delivery_city": "Tbilisi",
            "delivery_street_address": "12 Rustaveli Avenue",
            "delivery_phone": "+995555123456",
            "should_update_user_address": True,
        }

    def test_dine_in_order(self):
        state = CheckoutState(order_type=OrderType.DINE_IN, reservation_id="r-1", delivery_city="Tbilisi")

        assert state.to_order().model_dump(mode="json", exclude_none=True) == {
            "order_type": "dine_in",
            "reservation_id": "r-1",
            "should_update_user_address": False,
        }

    def test_wizard_round_trips_through_session(self):
        wizard = CheckoutWizard(SessionStore())
        assert wizard.load() == CheckoutState()

        wizard.save(delivery_state(step=STEP_CONFIRM))
        assert wizard.load().step == STEP_CONFIRM

        wizard.clear()
        assert wizard.load().order_type is None


class TestValidateDelivery:
    def test_valid(self):
        assert services.validate_delivery(delivery_state()) == {}

    def test_short_fields_and_bad_phone(self):
        errors = services.validate_delivery(
            delivery_state(delivery_country="G", delivery_city="", delivery_street_address="1 A", delivery_phone="555")
        )

        assert errors == {
            "delivery_country": "Country must be at least 2 characters",
            "delivery_city": "City is required",
            "delivery_street_address": "Address must be at least 5 characters",
            "delivery_phone": "Phone must be in international format, e.g. +995555123456",
        }

    def test_long_address(self):
        errors = services.validate_delivery(delivery_state(delivery_street_address="x" * 501))
        assert errors == {"delivery_street_address": "Address must be at most 500 characters"}


class TestOrderCalls:
    """Tests for order endpoints."""

    def test_no_saved_address(self, api, backend_api):
        backend_api.get("/orders/my-address").mock(return_value=httpx.Response(404, json={"message": "No address"}))

        assert services.fetch_address(api).street_address is None

    def test_place_order_omits_unset_fields(self, api, backend_api):
        route = backend_api.post("/orders").mock(
            return_value=httpx.Response(
                201, json=OrderFactory(order_id="o-1", order_type="dine_in", reservation_id="r-1")
            )
        )

        order = services.place_order(api, CheckoutState(order_type=OrderType.DINE_IN, reservation_id="r-1").to_order())

        assert order.order_id == "o-1"
        assert json.loads(route.calls.last.request.content) == {
            "order_type": "dine_in",
            "reservation_id": "r-1",
            "should_update_user_address": False,
        }

    def test_my_orders_newest_first(self, api, backend_api):
        backend_api.get("/orders/my").mock(
            return_value=httpx.Response(
                200,
                json=[
                    OrderFactory(order_id="undated", created_at=None),
                    OrderFactory(order_id="old", created_at="2026-01-01T10:00:00Z"),
                    OrderFactory(order_id="new", created_at="2026-10-01T10:00:00Z"),
                ],
            )
        )

        assert [o.order_id for o in services.my_orders(api)] == ["new", "old", "undated"]
