"""
Reservation time slots.

Slots start on the hour and last a whole number of hours. A slot is
offered when it fits inside the restaurant's opening hours for that day,
starts far enough from now, and does not overlap an existing booking of
the table. Intervals are half-open: a booking ending at 18:00 does not
block a slot starting at 18:00.
"""

import re
from datetime import date, datetime, time, timedelta

from django.utils.translation import gettext as _

from pydantic import BaseModel, ConfigDict
from supra_schemas import WEEKDAYS, ReservationStatus, TableAvailability

DURATION_CHOICES = (1, 2, 3, 4, 5, 6)
DEFAULT_DURATION = 2
GUEST_CHOICES = tuple(range(1, 11))
DEFAULT_GUESTS = 2

HOUR_RE = re.compile(r"^(\d{1,2}):\d{2}$")


class OpeningHours(BaseModel):
    """Opening hours of a restaurant on one day."""

    model_config = ConfigDict(frozen=True)

    is_open: bool
    open_time: str = ""
    close_time: str = ""
    message: str = ""

    @property
    def open_hour(self) -> int:
        return int(self.open_time.split(":")[0])

    @property
    def close_hour(self) -> int:
        return int(self.close_time.split(":")[0])


class Interval(BaseModel):
    """A half-open [start, end) span of time."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    def overlaps(self, other: "Interval") -> bool:
        return self.start < other.end and self.end > other.start


class TimeSlot(BaseModel):
    """A bookable slot, as wall-clock "HH:00" strings."""

    model_config = ConfigDict(frozen=True)

    start: str
    end: str

    @property
    def label(self) -> str:
        return f"{self.start} - {self.end}"


def _closed(message: str) -> OpeningHours:
    return OpeningHours(is_open=False, message=message)


def _hour(value: str) -> int | None:
    match = HOUR_RE.match(value)
    return int(match.group(1)) if match else None


def opening_hours_for(working_hours: dict[str, str] | None, day: date) -> OpeningHours:
    """
    Look up a day in a restaurant's {"monday": "10:00-22:00", ...} map.

    Missing map, missing day, "closed" and unparseable entries all mean
    closed; the message says which.
    """
    if not working_hours:
        return _closed(_("Working hours are not available"))

    weekday = WEEKDAYS[day.weekday()]
    entry = (working_hours.get(weekday) or "").strip()
    if not entry or entry.lower() == "closed":
        return _closed(
            _("The restaurant is closed on %(weekday)s") % {"weekday": weekday.capitalize()}
        )

    open_time, sep, close_time = (part.strip() for part in entry.partition("-"))
    if not sep or _hour(open_time) is None or _hour(close_time) is None:
        return _closed(_("Working hours are not available"))
    return OpeningHours(is_open=True, open_time=open_time, close_time=close_time)


def earliest_start_hour(day: date, opening: OpeningHours, now: datetime) -> int:
    """
    First hour a slot may start at.

    For today, a booking needs at least a full hour of notice: at 14:00
    sharp the first slot is 15:00, at 14:05 it is 16:00.
    """
    start = opening.open_hour
    if day == now.date():
        minimum = now.hour + 1 if now.minute == 0 else now.hour + 2
        start = max(start, minimum)
    return start


def bookings_from_availability(availability: TableAvailability, day: date) -> list[Interval]:
    """
    Busy intervals of a table, from either availability shape.

    Cancelled bookings do not block. Pre-computed windows whose end is not
    after their start are taken to run past midnight.
    """
    busy: list[Interval] = []

    for booking in availability.reservations:
        if booking.reservation_status == ReservationStatus.CANCELLED:
            continue
        start = datetime.combine(booking.reservation_date, booking.reservation_time)
        busy.append(Interval(start=start, end=start + timedelta(hours=booking.duration_hours)))

    for window in availability.occupied_slots:
        start = datetime.combine(day, window.start_time)
        end = datetime.combine(day, window.end_time)
        if end <= start:
            end += timedelta(days=1)
        busy.append(Interval(start=start, end=end))

    return busy


def generate_slots(
    day: date,
    duration_hours: int,
    opening: OpeningHours,
    bookings: list[Interval],
    now: datetime,
) -> list[TimeSlot]:
    """
    Hourly slots of ``duration_hours`` that fit the day and the table.

    Args:
        day: Date of the reservation.
        duration_hours: Length of the booking in whole hours.
        opening: The restaurant's hours on ``day``.
        bookings: Busy intervals of the table (naive, restaurant local time).
        now: Current time in the restaurant's time zone.
    """
    if not opening.is_open or duration_hours < 1:
        return []

    midnight = datetime.combine(day, time())
    slots: list[TimeSlot] = []
    hour = earliest_start_hour(day, opening, now)

    while hour + duration_hours <= opening.close_hour:
        candidate = Interval(
            start=midnight + timedelta(hours=hour),
            end=midnight + timedelta(hours=hour + duration_hours),
        )
        if not any(candidate.overlaps(busy) for busy in bookings):
            slots.append(
                TimeSlot(start=f"{hour:02d}:00", end=f"{hour + duration_hours:02d}:00")
            )
        hour += 1

    return slots


def find_slot(slots: list[TimeSlot], start: str) -> TimeSlot | None:
    return next((slot for slot in slots if slot.start == start), None)
