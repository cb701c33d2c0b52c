"""Review schemas - restaurant ratings written by customers."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, Field

MIN_REVIEW_TEXT_LENGTH = 10


class ReviewSortField(str, Enum):
    CREATED_AT = "created_at"
    RATING = "rating"


class ReviewAuthor(BaseModel):
    """Author fields joined onto a review."""

    user_id: str | None = None
    username: str = ""
    first_name: str = ""
    last_name: str = ""


class ReviewRestaurant(BaseModel):
    """Restaurant fields joined onto a review."""

    restaurant_id: int | None = None
    restaurant_name: str = ""


class Review(BaseModel):
    """A restaurant review."""

    review_id: str
    user_id: str
    restaurant_id: int
    rating: int = Field(ge=1, le=5)
    review_text: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    user: ReviewAuthor | None = None
    restaurant: ReviewRestaurant | None = None

    @property
    def author_name(self) -> str:
        if self.user is None:
            return ""
        name = f"{self.user.first_name} {self.user.last_name}".strip()
        return name or self.user.username


class ReviewFilter(BaseModel):
    """Query parameters for review listings (camelCase on the wire)."""

    restaurantId: int | None = None
    userId: str | None = None
    minRating: int | None = Field(default=None, ge=1, le=5)
    maxRating: int | None = Field(default=None, ge=1, le=5)
    sortBy: ReviewSortField | None = None
    sortOrder: str | None = Field(default=None, pattern="^(ASC|DESC)$")
    page: int | None = Field(default=None, ge=1)
    limit: int | None = Field(default=None, ge=1, le=100)


class ReviewPage(BaseModel):
    """Paginated reviews."""

    reviews: list[Review] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10
    total_pages: int = Field(
        default=1, validation_alias=AliasChoices("totalPages", "total_pages")
    )

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @classmethod
    def from_payload(cls, payload: Any) -> "ReviewPage":
        """Accept a bare list or a {reviews|items|data, total, ...} envelope."""
        if isinstance(payload, list):
            return cls(reviews=payload, total=len(payload))

        payload = payload or {}
        reviews = payload.get("reviews")
        if reviews is None:
            reviews = payload.get("items") or payload.get("data") or []
        return cls(
            reviews=reviews,
            total=payload.get("total", len(reviews)),
            page=payload.get("page", 1),
            limit=payload.get("limit", 10),
            total_pages=payload.get("totalPages") or payload.get("total_pages") or 1,
        )


class ReviewStats(BaseModel):
    """Aggregate rating for a restaurant."""

    restaurant_id: int | None = None
    total_reviews: int = 0
    average_rating: Decimal = Decimal("0")
    # {"1": 3, "2": 0, ..., "5": 12}
    rating_distribution: dict[str, int] = Field(default_factory=dict)


class ReviewCreate(BaseModel):
    """Body of POST /reviews."""

    restaurant_id: int
    rating: int = Field(ge=1, le=5)
    review_text: str | None = Field(default=None, min_length=MIN_REVIEW_TEXT_LENGTH)


class ReviewUpdate(BaseModel):
    """Body of PUT /reviews/{id} (admins)."""

    rating: int | None = Field(default=None, ge=1, le=5)
    review_text: str | None = Field(default=None, min_length=MIN_REVIEW_TEXT_LENGTH)
