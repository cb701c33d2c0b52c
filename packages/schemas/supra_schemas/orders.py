"""Order schemas - placed purchases derived from a cart."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class OrderType(str, Enum):
    """Order fulfillment type."""

    DELIVERY = "delivery"
    DINE_IN = "dine_in"


class OrderCreate(BaseModel):
    """Body of POST /orders."""

    order_type: OrderType

    # Delivery only
    delivery_country: str | None = None
    delivery_city: str | None = None
    delivery_street_address: str | None = None
    delivery_phone: str | None = None

    # Dine-in only
    reservation_id: str | None = None

    should_update_user_address: bool = False


class OrderItem(BaseModel):
    """Line item of a placed order (price fixed at order time)."""

    order_item_id: int
    item_id: int
    item_name: str = ""
    quantity: int = Field(ge=1)
    unit_price: Decimal
    total_price: Decimal


class Order(BaseModel):
    """A placed order."""

    order_id: str
    user_id: str
    order_type: OrderType
    delivery_country: str | None = None
    delivery_city: str | None = None
    delivery_street_address: str | None = None
    delivery_phone: str | None = None
    reservation_id: str | None = None
    subtotal: Decimal
    delivery_fee: Decimal = Decimal("0.00")
    total_amount: Decimal
    created_at: datetime | None = None
    updated_at: datetime | None = None
    order_items: list[OrderItem] = Field(default_factory=list)

    @property
    def delivery_address(self) -> str:
        parts = [
            self.delivery_street_address,
            self.delivery_city,
            self.delivery_country,
        ]
        return ", ".join(part for part in parts if part)


class UserAddress(BaseModel):
    """Saved delivery address used to pre-fill checkout."""

    country: str | None = None
    city: str | None = None
    street_address: str | None = None
