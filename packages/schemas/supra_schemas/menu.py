"""Menu schemas - categories, items, filters and manager edits."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

# =============================================================================
# Enums
# =============================================================================


class MenuSortField(str, Enum):
    """Columns the backend can sort menu items by."""

    PRICE = "price"
    COOKING_TIME = "cooking_time_minutes"
    CALORIES = "calories"
    NAME = "item_name"
    CREATED_AT = "created_at"


class SortOrder(str, Enum):
    """Sort direction."""

    ASC = "ASC"
    DESC = "DESC"


# =============================================================================
# Menu Data
# =============================================================================


class MenuCategory(BaseModel):
    """A menu category (e.g., Khachapuri, Soups)."""

    category_id: int
    category_name: str
    category_description: str | None = None


class MenuItem(BaseModel):
    """A dish on the menu."""

    item_id: int
    item_name: str
    item_description: str | None = None
    category_id: int
    price: Decimal
    cooking_time_minutes: int = 0
    calories: int | None = None
    is_vegetarian: bool = False
    is_spicy: bool = False
    is_deleted: bool = False
    image_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    category: MenuCategory | None = None


class MenuPage(BaseModel):
    """One page of menu items."""

    items: list[MenuItem] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int | None = None
    total_pages: int = 1

    @classmethod
    def from_payload(cls, payload: Any) -> "MenuPage":
        """
        Build a page from either response shape the backend uses.

        The backend returns a bare list for unpaginated queries and an
        envelope ({items|data, total, page, limit, totalPages}) otherwise.
        """
        if isinstance(payload, list):
            return cls(items=payload, total=len(payload))

        payload = payload or {}
        items = payload.get("items")
        if items is None:
            items = payload.get("data", [])
        return cls(
            items=items,
            total=payload.get("total", len(items)),
            page=payload.get("page", 1),
            limit=payload.get("limit"),
            total_pages=payload.get("totalPages") or payload.get("pages") or 1,
        )

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1


# =============================================================================
# Filters
# =============================================================================


class MenuFilter(BaseModel):
    """Query parameters for GET /menu and GET /menu/all."""

    search: str | None = None
    category_id: int | None = None
    is_vegetarian: bool | None = None
    is_spicy: bool | None = None
    min_price: Decimal | None = Field(default=None, ge=0)
    max_price: Decimal | None = Field(default=None, ge=0)
    max_cooking_time: int | None = Field(default=None, ge=0)
    max_calories: int | None = Field(default=None, ge=0)
    sort_by: MenuSortField | None = None
    sort_order: SortOrder | None = None
    page: int | None = Field(default=None, ge=1)
    limit: int | None = Field(default=None, ge=1, le=100)

    def with_default_ordering(self) -> "MenuFilter":
        """
        Fill in the implied parts of a sort.

        No sort at all means newest first. A direction without a column sorts
        by creation date. A column without a direction sorts newest-first for
        dates and ascending otherwise.
        """
        sort_by = self.sort_by
        sort_order = self.sort_order
        if not sort_by and not sort_order:
            sort_by, sort_order = MenuSortField.CREATED_AT, SortOrder.DESC
        elif sort_order and not sort_by:
            sort_by = MenuSortField.CREATED_AT
        if sort_by and not sort_order:
            if sort_by == MenuSortField.CREATED_AT:
                sort_order = SortOrder.DESC
            else:
                sort_order = SortOrder.ASC
        return self.model_copy(update={"sort_by": sort_by, "sort_order": sort_order})

    @property
    def active_count(self) -> int:
        """Number of user-facing filters in effect (shown as a badge)."""
        return sum(
            bool(value)
            for value in (
                self.search,
                self.category_id,
                self.is_vegetarian,
                self.is_spicy,
            )
        )


# =============================================================================
# Manager edits
# =============================================================================


class MenuItemCreate(BaseModel):
    """Body of POST /menu."""

    item_name: str = Field(min_length=1, max_length=150)
    item_description: str | None = None
    category_id: int
    price: Decimal = Field(gt=0)
    cooking_time_minutes: int = Field(default=0, ge=0)
    calories: int | None = Field(default=None, ge=0)
    is_vegetarian: bool = False
    is_spicy: bool = False
    image_url: str | None = None


class MenuItemUpdate(BaseModel):
    """Body of PATCH /menu/{id}. Only set fields are sent."""

    item_name: str | None = Field(default=None, min_length=1, max_length=150)
    item_description: str | None = None
    category_id: int | None = None
    price: Decimal | None = Field(default=None, gt=0)
    cooking_time_minutes: int | None = Field(default=None, ge=0)
    calories: int | None = Field(default=None, ge=0)
    is_vegetarian: bool | None = None
    is_spicy: bool | None = None
    image_url: str | None = None
