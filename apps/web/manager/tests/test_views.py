"""
Tests for manager views.
"""

import json
from datetime import timedelta

from django.urls import reverse

import httpx
import pytest
from supra_schemas import Role

from apps.web.core.tests.factories import (
    MenuCategoryFactory,
    MenuItemFactory,
    ReservationFactory,
    RestaurantFactory,
    TableFactory,
)
from apps.web.reservations.services import restaurant_now


@pytest.fixture
def manager(login_as) -> dict:
    return login_as(Role.MANAGER)


@pytest.fixture
def menu_api(backend_api):
    backend_api.get("/menu/all").mock(
        return_value=httpx.Response(
            200,
            json=[
                MenuItemFactory(item_id=7, item_name="Khinkali", price="12.50", calories=450),
                MenuItemFactory(item_id=8, item_name="Lobio", is_deleted=True),
            ],
        )
    )
    backend_api.get("/menu-categories").mock(
        return_value=httpx.Response(200, json=[MenuCategoryFactory(category_id=1, category_name="Mains")])
    )
    return backend_api


class TestAccess:
    @pytest.mark.parametrize("role", [Role.MANAGER, Role.ADMIN])
    def test_staff_see_dashboard(self, client, login_as, backend_api, role):
        login_as(role)
        backend_api.get("/reservations/active").mock(return_value=httpx.Response(200, json=[]))

        response = client.get(reverse("manager:dashboard"))

        assert response.status_code == 200

    def test_customers_are_turned_away(self, client, login_as):
        login_as(Role.USER)

        response = client.get(reverse("manager:menu"))

        assert response.url == reverse("catalog:home")


class TestDashboard:
    def test_counts_todays_active_reservations(self, client, backend_api, manager):
        today = restaurant_now().date()
        backend_api.get("/reservations/active").mock(
            return_value=httpx.Response(
                200,
                json=[
                    ReservationFactory(reservation_date=today.isoformat()),
                    ReservationFactory(reservation_date=today.isoformat()),
                    ReservationFactory(reservation_date=(today + timedelta(days=1)).isoformat()),
                ],
            )
        )

        response = client.get(reverse("manager:dashboard"))

        assert response.context["active_count"] == 2


class TestMenuEditor:
    """Tests for the dish list and editor."""

    def test_list_includes_hidden_dishes(self, client, manager, menu_api):
        response = client.get(reverse("manager:menu"))

        assert [i.item_name for i in response.context["items"]] == ["Khinkali", "Lobio"]
        assert response.context["category_names"] == {1: "Mains"}

    def test_create(self, client, manager, menu_api):
        route = menu_api.post("/menu").mock(
            return_value=httpx.Response(201, json=MenuItemFactory(item_id=9, item_name="Pkhali"))
        )

        response = client.post(
            reverse("manager:menu_create"),
            {"item_name": "Pkhali", "category_id": "1", "price": "9.00", "is_vegetarian": "on"},
        )

        assert response.url == reverse("manager:menu")
        body = json.loads(route.calls.last.request.content)
        assert (body["item_name"], body["price"], body["is_vegetarian"]) == ("Pkhali", "9.00", True)

    def test_create_with_errors(self, client, manager, menu_api):
        route = menu_api.post("/menu")

        response = client.post(reverse("manager:menu_create"), {"item_name": "Pkhali", "price": "0"})

        assert response.status_code == 200
        assert set(response.context["field_errors"]) == {"category_id", "price"}
        assert not route.called

    def test_edit_form_is_prefilled(self, client, manager, menu_api):
        response = client.get(reverse("manager:menu_edit", args=[7]))

        assert response.context["form"]["price"] == "12.50"

    def test_edit_sends_changed_fields_only(self, client, manager, menu_api):
        route = menu_api.patch("/menu/7").mock(return_value=httpx.Response(200, json={}))

        client.post(
            reverse("manager:menu_edit", args=[7]),
            {
                "item_name": "Khinkali",
                "item_description": "Juicy dumplings",
                "category_id": "1",
                "price": "14.00",
                "cooking_time_minutes": "20",
                "calories": "450",
            },
        )

        assert json.loads(route.calls.last.request.content) == {"price": "14.00"}

    def test_unknown_dish(self, client, manager, menu_api):
        response = client.get(reverse("manager:menu_edit", args=[99]))
        assert response.status_code == 404

    def test_hide_and_restore(self, client, manager, backend_api):
        hide = backend_api.patch("/menu/7/soft-delete").mock(return_value=httpx.Response(200, json={}))
        restore = backend_api.patch("/menu/8/restore").mock(return_value=httpx.Response(200, json={}))

        client.post(reverse("manager:menu_delete", args=[7]))
        response = client.post(reverse("manager:menu_restore", args=[8]))

        assert hide.called and restore.called
        assert response.url == reverse("manager:menu")


class TestReservationDesk:
    """Tests for the manager reservation list and actions."""

    @pytest.mark.parametrize(
        "tab, path",
        [("all", "/reservations"), ("active", "/reservations/active"), ("inactive", "/reservations/inactive")],
    )
    def test_tabs(self, client, backend_api, manager, tab, path):
        route = backend_api.get(path).mock(return_value=httpx.Response(200, json=[]))
        backend_api.get("/restaurants").mock(return_value=httpx.Response(200, json=[]))

        response = client.get(reverse("manager:reservations"), {"tab": tab})

        assert route.called
        assert response.context["tab"] == tab

    def test_newest_first(self, client, backend_api, manager):
        backend_api.get("/reservations").mock(
            return_value=httpx.Response(
                200,
                json=[
                    ReservationFactory(reservation_id="early", reservation_time="12:00:00"),
                    ReservationFactory(reservation_id="late", reservation_time="20:00:00"),
                ],
            )
        )
        backend_api.get("/restaurants").mock(return_value=httpx.Response(200, json=[]))

        response = client.get(reverse("manager:reservations"), {"tab": "bogus"})

        assert [r.reservation_id for r in response.context["reservations"]] == ["late", "early"]
        assert response.context["tab"] == "all"

    def test_confirm_keeps_tab(self, client, backend_api, manager):
        route = backend_api.patch("/reservations/manager/r-1/confirm").mock(
            return_value=httpx.Response(200, json={})
        )

        response = client.post(reverse("manager:reservation_confirm", args=["r-1"]), {"tab": "active"})

        assert route.called
        assert response.url == reverse("manager:reservations") + "?tab=active"

    def test_cancel(self, client, backend_api, manager):
        route = backend_api.patch("/reservations/manager/r-1/cancel").mock(
            return_value=httpx.Response(200, json={})
        )

        client.post(reverse("manager:reservation_cancel", args=["r-1"]))

        assert route.called

    def test_pick_lists_active_restaurants(self, client, backend_api, manager):
        backend_api.get("/restaurants").mock(
            return_value=httpx.Response(
                200,
                json=[RestaurantFactory(restaurant_id=1), RestaurantFactory(restaurant_id=2, is_active=False)],
            )
        )

        response = client.get(reverse("manager:reservation_pick"))

        assert [r.restaurant_id for r in response.context["restaurants"]] == [1]

    def test_book_for_customer(self, client, backend_api, manager):
        day = (restaurant_now().date() + timedelta(days=2)).isoformat()
        backend_api.get("/restaurants/1").mock(
            return_value=httpx.Response(200, json=RestaurantFactory(restaurant_id=1))
        )
        backend_api.get("/restaurants/1/tables").mock(
            return_value=httpx.Response(200, json=[TableFactory(table_id=3, seats_count=4)])
        )
        backend_api.get("/reservations/availability/1/3").mock(return_value=httpx.Response(200, json={}))
        backend_api.get("/auth/users").mock(
            return_value=httpx.Response(
                200,
                json=[
                    {"user_id": "u-1", "username": "nino", "email": "nino@example.com", "role": "user"},
                    {"user_id": "u-2", "username": "boss", "email": "boss@example.com", "role": "manager", "role_id": 2},
                ],
            )
        )
        route = backend_api.post("/reservations/for-user").mock(
            return_value=httpx.Response(201, json=ReservationFactory(reservation_id="r-5"))
        )

        response = client.post(
            reverse("manager:reservation_create", args=[1]),
            {
                "user": "u-1",
                "guests": "3",
                "date": day,
                "table": "3",
                "duration": "2",
                "slot": "14:00",
                "contact_phone": "+995555123456",
            },
        )

        assert response.url == reverse("manager:reservations") + "?tab=active"
        body = json.loads(route.calls.last.request.content)
        assert (body["user_id"], body["table_id"], body["guests_count"]) == ("u-1", 3, 3)

    def test_booking_needs_a_customer(self, client, backend_api, manager):
        backend_api.get("/restaurants/1").mock(
            return_value=httpx.Response(200, json=RestaurantFactory(restaurant_id=1))
        )
        backend_api.get("/restaurants/1/tables").mock(return_value=httpx.Response(200, json=[]))
        backend_api.get("/auth/users").mock(return_value=httpx.Response(200, json=[]))

        response = client.post(reverse("manager:reservation_create", args=[1]), {"guests": "2"})

        assert response.context["field_errors"]["user"] == "Choose a customer"


class TestReports:
    @pytest.fixture
    def reports_api(self, backend_api):
        backend_api.get("/reports/sales").mock(
            return_value=httpx.Response(
                200, json=[{"day": "2026-10-01", "total": "100.00"}, {"day": "2026-10-02", "total": "50.50"}]
            )
        )
        backend_api.get("/reports/occupancy").mock(return_value=httpx.Response(200, json=[]))
        backend_api.get("/reports/user-visits").mock(return_value=httpx.Response(200, json=[]))
        backend_api.get("/restaurants").mock(return_value=httpx.Response(200, json=[]))
        return backend_api

    def test_sales_total(self, client, manager, reports_api):
        response = client.get(reverse("manager:reports"))

        assert str(response.context["sales_total"]) == "150.50"

    def test_inverted_range_warns(self, client, manager, reports_api):
        response = client.get(reverse("manager:reports"), {"from": "2026-10-10", "to": "2026-10-01"})

        assert "The start date must not be after the end date" in [str(m) for m in response.context["messages"]]

    def test_csv_download(self, client, backend_api, manager):
        backend_api.get("/reports/export/sales").mock(
            return_value=httpx.Response(200, content=b"day,total\n")
        )

        response = client.get(
            reverse("manager:report_export", args=["sales"]), {"from": "2026-10-01", "to": "2026-10-10"}
        )

        assert response["Content-Type"] == "text/csv; charset=utf-8"
        assert response["Content-Disposition"] == 'attachment; filename="sales-2026-10-01-2026-10-10.csv"'
        assert response.content == b"day,total\n"

    def test_unknown_export(self, client, manager):
        response = client.get(reverse("manager:report_export", args=["payroll"]))
        assert response.status_code == 404
