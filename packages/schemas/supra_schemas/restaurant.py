"""Restaurant and table schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


class Restaurant(BaseModel):
    """A restaurant location."""

    restaurant_id: int
    restaurant_name: str
    restaurant_description: str | None = None
    country: str = ""
    city: str = ""
    street_address: str = ""
    # {"monday": "10:00-22:00", "sunday": "closed", ...}
    working_hours: dict[str, str] | None = None
    is_active: bool = True
    rating: Decimal = Decimal("0.00")
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def address(self) -> str:
        """Single-line postal address."""
        parts = [self.street_address, self.city, self.country]
        return ", ".join(part for part in parts if part)

    def weekly_hours(self) -> list[tuple[str, str]]:
        """(weekday, hours) pairs in calendar order, for display."""
        hours = self.working_hours or {}
        return [(day, hours.get(day, "closed")) for day in WEEKDAYS]


class RestaurantFilter(BaseModel):
    """Query parameters for GET /restaurants."""

    search: str | None = None
    city: str | None = None
    country: str | None = None
    is_active: bool | None = True
    min_rating: Decimal | None = Field(default=None, ge=0, le=5)


class Table(BaseModel):
    """A table in a restaurant."""

    table_id: int
    restaurant_id: int
    table_number: int
    seats_count: int = Field(ge=1, le=20)
    is_available: bool = True
