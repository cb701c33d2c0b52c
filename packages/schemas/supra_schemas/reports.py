"""Report schemas - manager analytics rows."""

from datetime import date
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, model_validator


class ReportKind(str, Enum):
    """CSV exports offered by /reports/export/{kind}."""

    SALES = "sales"
    OCCUPANCY = "occupancy"
    USER_VISITS = "user-visits"
    ALL = "all"


class ReportRange(BaseModel):
    """Inclusive date range with an optional restaurant scope."""

    date_from: date
    date_to: date
    restaurant_id: int | None = None

    @model_validator(mode="after")
    def check_order(self) -> "ReportRange":
        if self.date_from > self.date_to:
            raise ValueError("'from' date must not be after 'to' date")
        return self

    def as_params(self, scoped: bool = True) -> dict[str, str | int | None]:
        params: dict[str, str | int | None] = {
            "from": self.date_from.isoformat(),
            "to": self.date_to.isoformat(),
        }
        if scoped:
            params["restaurantId"] = self.restaurant_id
        return params


class SalesByDay(BaseModel):
    day: date
    total: Decimal


class OccupancyRow(BaseModel):
    table_id: int
    table_number: int | None = None
    reservations_count: int


class UserVisitsRow(BaseModel):
    day: date
    total_visits: int
