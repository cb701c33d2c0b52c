"""Cart schemas - the server-tracked basket of a customer."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class CartItem(BaseModel):
    """A line in the cart."""

    cart_item_id: int
    item_id: int
    item_name: str
    item_description: str | None = None
    unit_price: Decimal
    quantity: int = Field(ge=1)
    total_price: Decimal
    added_at: datetime | None = None
    image_url: str | None = None
    category_name: str | None = None
    is_vegetarian: bool = False
    is_spicy: bool = False


class Cart(BaseModel):
    """A customer's cart."""

    cart_id: str
    user_id: str
    items: list[CartItem] = Field(default_factory=list)
    total_items: int = 0
    total_amount: Decimal = Decimal("0.00")
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_empty(self) -> bool:
        return not self.items


class AddToCartRequest(BaseModel):
    """Body of POST /cart/add."""

    item_id: int
    quantity: int = Field(default=1, ge=1)


class UpdateCartItemRequest(BaseModel):
    """Body of PUT /cart/item/{item_id}."""

    quantity: int = Field(ge=1)
