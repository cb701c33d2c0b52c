"""
Booking form state shared by the customer and manager reservation pages.

The page is driven by plain GET parameters (guests, date, table, duration)
so every step can be bookmarked and re-rendered; the final POST carries the
chosen slot and contact phone.
"""

from datetime import date, datetime
from typing import Any

from django.http import QueryDict
from django.utils.translation import gettext as _

from pydantic import BaseModel
from supra_schemas import Restaurant, Table

from apps.web.backend import BackendClient
from apps.web.core.query import query_int
from apps.web.core.validation import FormErrors, is_valid_contact_phone, normalize_phone

from . import services
from .slots import (
    DEFAULT_DURATION,
    DEFAULT_GUESTS,
    DURATION_CHOICES,
    GUEST_CHOICES,
    OpeningHours,
    TimeSlot,
    find_slot,
)


class BookingForm(BaseModel):
    """What the visitor has picked so far."""

    guests: int = DEFAULT_GUESTS
    day: date | None = None
    table_id: int | None = None
    duration: int = DEFAULT_DURATION
    slot: str = ""
    phone: str = ""


def parse_booking(data: QueryDict) -> BookingForm:
    """Read the booking fields, falling back to defaults on bad input."""
    guests = query_int(data, "guests")
    duration = query_int(data, "duration")
    try:
        day = date.fromisoformat(data.get("date", ""))
    except ValueError:
        day = None

    return BookingForm(
        guests=guests if guests in GUEST_CHOICES else DEFAULT_GUESTS,
        day=day,
        table_id=query_int(data, "table", minimum=1),
        duration=duration if duration in DURATION_CHOICES else DEFAULT_DURATION,
        slot=data.get("slot", "").strip(),
        phone=normalize_phone(data.get("contact_phone", "")),
    )


def selected_table(form: BookingForm, tables: list[Table]) -> Table | None:
    """The chosen table, if it still seats the party."""
    if form.table_id is None:
        return None
    return next((t for t in tables if t.table_id == form.table_id), None)


def load_slots(
    client: BackendClient,
    restaurant: Restaurant,
    form: BookingForm,
    tables: list[Table],
    now: datetime,
) -> tuple[OpeningHours | None, list[TimeSlot]]:
    """Opening hours and free slots for the current picks (None until a date is chosen)."""
    table = selected_table(form, tables)
    if form.day is None or table is None:
        return None, []
    return services.available_slots(
        client, restaurant, table.table_id, form.day, form.duration, now=now
    )


def validate_booking(
    form: BookingForm,
    tables: list[Table],
    slots: list[TimeSlot],
    window: tuple[date, date],
) -> FormErrors:
    """Checks run before the reservation is sent to the backend."""
    errors: FormErrors = {}
    first_day, last_day = window

    if form.day is None:
        errors["date"] = _("Choose a date")
    elif not first_day <= form.day <= last_day:
        errors["date"] = _("Choose a date between %(first)s and %(last)s") % {
            "first": first_day.isoformat(),
            "last": last_day.isoformat(),
        }

    if selected_table(form, tables) is None:
        errors["table"] = _("Choose a table for %(guests)d guests") % {"guests": form.guests}

    if not form.slot:
        errors["slot"] = _("Choose a time")
    elif "date" not in errors and "table" not in errors and find_slot(slots, form.slot) is None:
        errors["slot"] = _("This time is no longer available. Choose another slot")

    if not form.phone:
        errors["contact_phone"] = _("Enter a contact phone")
    elif not is_valid_contact_phone(form.phone):
        errors["contact_phone"] = _("Phone must be in international format, e.g. +995555123456")

    return errors


def booking_context(
    form: BookingForm,
    restaurant: Restaurant,
    all_tables: list[Table],
    opening: OpeningHours | None,
    slots: list[TimeSlot],
    window: tuple[date, date],
) -> dict[str, Any]:
    """Template context for the booking form and its slot partial."""
    return {
        "restaurant": restaurant,
        "form": form,
        "tables": services.tables_for_guests(all_tables, form.guests),
        "opening": opening,
        "slots": slots,
        "selected_slot": find_slot(slots, form.slot),
        "min_date": window[0],
        "max_date": window[1],
        "guest_choices": GUEST_CHOICES,
        "duration_choices": DURATION_CHOICES,
    }
