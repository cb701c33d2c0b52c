"""
Reservation services - bookings, availability and status changes.
"""

import logging
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from django.conf import settings
from django.utils import timezone

from supra_schemas import (
    Reservation,
    ReservationCreate,
    ReservationForUserCreate,
    ReservationStatus,
    Restaurant,
    Table,
    TableAvailability,
)

from apps.web.backend import BackendClient, unwrap_list

from .slots import (
    OpeningHours,
    TimeSlot,
    bookings_from_availability,
    generate_slots,
    opening_hours_for,
)

logger = logging.getLogger(__name__)


class ReservationScope:
    """Which reservations a manager list shows."""

    ALL = "all"
    ACTIVE = "active"
    INACTIVE = "inactive"

    PATHS = {
        ALL: "/reservations",
        ACTIVE: "/reservations/active",
        INACTIVE: "/reservations/inactive",
    }


# =============================================================================
# Time
# =============================================================================


def restaurant_now() -> datetime:
    """Current time in the restaurants' time zone."""
    return timezone.now().astimezone(ZoneInfo(settings.RESTAURANT_TIME_ZONE))


def booking_window(now: datetime | None = None) -> tuple[date, date]:
    """First and last date a reservation can be made for."""
    today = (now or restaurant_now()).date()
    return today, today + timedelta(days=settings.RESERVATION_MAX_DAYS_AHEAD)


def tables_for_guests(tables: list[Table], guests: int) -> list[Table]:
    """Tables with enough seats, smallest first."""
    fitting = [t for t in tables if t.seats_count >= guests]
    return sorted(fitting, key=lambda t: (t.seats_count, t.table_number))


# =============================================================================
# Availability
# =============================================================================


def get_availability(
    client: BackendClient, restaurant_id: int, table_id: int, day: date
) -> TableAvailability:
    payload = client.get(
        f"/reservations/availability/{restaurant_id}/{table_id}",
        params={"date": day},
    )
    return TableAvailability.model_validate(payload or {})


def available_slots(
    client: BackendClient,
    restaurant: Restaurant,
    table_id: int,
    day: date,
    duration_hours: int,
    now: datetime | None = None,
) -> tuple[OpeningHours, list[TimeSlot]]:
    """
    Opening hours of the day and the free slots of one table.

    The backend is only asked for availability when the restaurant is open.
    """
    opening = opening_hours_for(restaurant.working_hours, day)
    if not opening.is_open:
        return opening, []

    availability = get_availability(client, restaurant.restaurant_id, table_id, day)
    bookings = bookings_from_availability(availability, day)
    slots = generate_slots(day, duration_hours, opening, bookings, now or restaurant_now())
    return opening, slots


# =============================================================================
# Customer reservations
# =============================================================================


def _reservations(payload: object) -> list[Reservation]:
    return [Reservation.model_validate(item) for item in unwrap_list(payload)]


def create_reservation(client: BackendClient, data: ReservationCreate) -> Reservation:
    payload = client.post("/reservations", json=data.model_dump(mode="json"))
    reservation = Reservation.model_validate(payload)
    logger.info(
        "Created reservation %s at restaurant %s table %s on %s %s",
        reservation.reservation_id,
        data.restaurant_id,
        data.table_id,
        data.reservation_date,
        data.reservation_time,
    )
    return reservation


def my_reservations(client: BackendClient) -> list[Reservation]:
    return _reservations(client.get("/reservations/my"))


def my_active_reservations(client: BackendClient) -> list[Reservation]:
    return _reservations(client.get("/reservations/my/active"))


def started_reservations(client: BackendClient) -> list[Reservation]:
    """Active reservations the customer is currently seated for."""
    return [
        r
        for r in my_active_reservations(client)
        if r.reservation_status == ReservationStatus.STARTED
    ]


def confirm_reservation(client: BackendClient, reservation_id: str) -> None:
    client.patch(f"/reservations/{reservation_id}/confirm")
    logger.info("Reservation %s confirmed by customer", reservation_id)


def cancel_reservation(client: BackendClient, reservation_id: str) -> None:
    client.patch(f"/reservations/{reservation_id}/cancel")
    logger.info("Reservation %s cancelled by customer", reservation_id)


# =============================================================================
# Manager reservations
# =============================================================================


def list_reservations(client: BackendClient, scope: str = ReservationScope.ALL) -> list[Reservation]:
    path = ReservationScope.PATHS.get(scope, ReservationScope.PATHS[ReservationScope.ALL])
    return _reservations(client.get(path))


def manager_confirm(client: BackendClient, reservation_id: str) -> None:
    client.patch(f"/reservations/manager/{reservation_id}/confirm")
    logger.info("Reservation %s confirmed by manager", reservation_id)


def manager_cancel(client: BackendClient, reservation_id: str) -> None:
    client.patch(f"/reservations/manager/{reservation_id}/cancel")
    logger.info("Reservation %s cancelled by manager", reservation_id)


def create_for_user(client: BackendClient, data: ReservationForUserCreate) -> Reservation:
    payload = client.post("/reservations/for-user", json=data.model_dump(mode="json"))
    reservation = Reservation.model_validate(payload)
    logger.info(
        "Manager created reservation %s for user %s",
        reservation.reservation_id,
        data.user_id,
    )
    return reservation
