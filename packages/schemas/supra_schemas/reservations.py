"""Reservation schemas - table bookings and their availability."""

from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator

# =============================================================================
# Enums
# =============================================================================


class ReservationStatus(str, Enum):
    """
    Reservation lifecycle status (owned by the backend).

    unconfirmed -> confirmed -> started -> completed
    unconfirmed | confirmed -> cancelled
    """

    UNCONFIRMED = "unconfirmed"
    CONFIRMED = "confirmed"
    STARTED = "started"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


ACTIVE_STATUSES = frozenset(
    {
        ReservationStatus.UNCONFIRMED,
        ReservationStatus.CONFIRMED,
        ReservationStatus.STARTED,
    }
)

MIN_DURATION_HOURS = 1
MAX_DURATION_HOURS = 8


def _date_part(value: Any) -> Any:
    """Accept both "2025-03-01" and "2025-03-01T00:00:00.000Z"."""
    if isinstance(value, str) and len(value) > 10:
        return value[:10]
    return value


def _time_part(value: Any) -> Any:
    """Accept both "18:00[:00]" and full ISO timestamps."""
    if isinstance(value, str) and "T" in value:
        value = value.split("T", 1)[1]
        return value[:8]
    return value


# =============================================================================
# Reservations
# =============================================================================


class Reservation(BaseModel):
    """A table booking."""

    reservation_id: str
    user_id: str | None = None
    restaurant_id: int
    restaurant_name: str = ""
    table_id: int
    table_number: int | None = None
    seats_count: int | None = None
    reservation_date: date
    reservation_time: time
    duration_hours: int = Field(default=2, ge=MIN_DURATION_HOURS, le=MAX_DURATION_HOURS)
    guests_count: int = Field(ge=1)
    reservation_status: ReservationStatus = ReservationStatus.UNCONFIRMED
    contact_phone: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    confirmed_at: datetime | None = None

    @field_validator("reservation_date", mode="before")
    @classmethod
    def normalize_date(cls, value: Any) -> Any:
        return _date_part(value)

    @field_validator("reservation_time", mode="before")
    @classmethod
    def normalize_time(cls, value: Any) -> Any:
        return _time_part(value)

    @property
    def is_active(self) -> bool:
        return self.reservation_status in ACTIVE_STATUSES

    @property
    def can_confirm(self) -> bool:
        return self.reservation_status == ReservationStatus.UNCONFIRMED

    @property
    def can_cancel(self) -> bool:
        return self.reservation_status in (
            ReservationStatus.UNCONFIRMED,
            ReservationStatus.CONFIRMED,
        )

    @property
    def end_time(self) -> time:
        """Clock time the booking ends (wraps past midnight)."""
        start = datetime.combine(self.reservation_date, self.reservation_time)
        return (start + timedelta(hours=self.duration_hours)).time()


class ReservationCreate(BaseModel):
    """Body of POST /reservations."""

    restaurant_id: int
    table_id: int
    reservation_date: date
    reservation_time: str = Field(pattern=r"^\d{2}:\d{2}$")
    duration_hours: int = Field(ge=MIN_DURATION_HOURS, le=MAX_DURATION_HOURS)
    guests_count: int = Field(ge=1)
    contact_phone: str


class ReservationForUserCreate(ReservationCreate):
    """Body of POST /reservations/for-user (managers book on behalf of a user)."""

    user_id: str


# =============================================================================
# Availability
# =============================================================================


class BookedReservation(BaseModel):
    """Minimal reservation record used for availability checks."""

    reservation_id: str = ""
    reservation_date: date
    reservation_time: time
    duration_hours: int = 2
    reservation_status: ReservationStatus | None = None

    @field_validator("reservation_date", mode="before")
    @classmethod
    def normalize_date(cls, value: Any) -> Any:
        return _date_part(value)

    @field_validator("reservation_time", mode="before")
    @classmethod
    def normalize_time(cls, value: Any) -> Any:
        return _time_part(value)


class OccupiedSlot(BaseModel):
    """An occupied [start, end) window on a table."""

    start_time: time = Field(validation_alias=AliasChoices("start_time", "start"))
    end_time: time = Field(validation_alias=AliasChoices("end_time", "end"))
    reservation_id: str = ""

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def normalize_times(cls, value: Any) -> Any:
        return _time_part(value)


class TableAvailability(BaseModel):
    """
    Availability of one table on one date.

    The backend has answered with two shapes over time: a list of bookings
    (``reservations``) or pre-computed windows (``occupied_slots`` /
    ``occupiedTimeSlots``). Either or both may be present.
    """

    restaurant_id: int | None = None
    restaurant_name: str = ""
    table_id: int | None = None
    table_number: int | None = None
    seats_count: int | None = None
    on_date: str | None = Field(default=None, validation_alias="date")
    reservations: list[BookedReservation] = Field(default_factory=list)
    occupied_slots: list[OccupiedSlot] = Field(
        default_factory=list,
        validation_alias=AliasChoices("occupied_slots", "occupiedTimeSlots"),
    )
