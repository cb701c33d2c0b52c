"""
Review services - ratings and comments on restaurants.
"""

import logging

from django.http import QueryDict
from django.utils.translation import gettext as _

from supra_schemas import (
    MIN_REVIEW_TEXT_LENGTH,
    Review,
    ReviewCreate,
    ReviewFilter,
    ReviewPage,
    ReviewSortField,
    ReviewStats,
    ReviewUpdate,
)

from apps.web.backend import BackendClient
from apps.web.core.query import query_choice, query_int
from apps.web.core.validation import FormErrors

logger = logging.getLogger(__name__)

REVIEW_PAGE_SIZE = 5
MY_REVIEWS_PAGE_SIZE = 20
SORT_ORDERS = ("ASC", "DESC")


def review_filter_from_query(data: QueryDict, limit: int = REVIEW_PAGE_SIZE) -> ReviewFilter:
    """Listing filters from the query string; bad values are dropped."""
    min_rating = query_int(data, "min_rating", minimum=1, maximum=5)
    max_rating = query_int(data, "max_rating", minimum=1, maximum=5)
    if min_rating and max_rating and min_rating > max_rating:
        min_rating, max_rating = max_rating, min_rating
    sort_order = data.get("sort_order", "").upper()
    return ReviewFilter(
        minRating=min_rating,
        maxRating=max_rating,
        sortBy=query_choice(data, "sort_by", ReviewSortField),
        sortOrder=sort_order if sort_order in SORT_ORDERS else None,
        page=query_int(data, "page", minimum=1) or 1,
        limit=limit,
    )


def validate_review(rating_raw: str, text: str) -> tuple[int | None, str | None, FormErrors]:
    """
    Check a review form.

    Returns the rating, the trimmed text (None when left blank) and errors.
    """
    errors: FormErrors = {}
    try:
        rating = int(rating_raw)
    except (TypeError, ValueError):
        rating = None
    if rating is None or not 1 <= rating <= 5:
        errors["rating"] = _("Choose a rating from 1 to 5")
        rating = None

    text = (text or "").strip()
    if text and len(text) < MIN_REVIEW_TEXT_LENGTH:
        errors["review_text"] = _("Review must be at least %(count)d characters") % {
            "count": MIN_REVIEW_TEXT_LENGTH
        }
    return rating, text or None, errors


# =============================================================================
# Reading
# =============================================================================


def restaurant_reviews(client: BackendClient, restaurant_id: int, filters: ReviewFilter) -> ReviewPage:
    payload = client.get(
        f"/reviews/restaurant/{restaurant_id}",
        params=filters.model_dump(exclude_none=True, mode="json"),
    )
    return ReviewPage.from_payload(payload)


def restaurant_stats(client: BackendClient, restaurant_id: int) -> ReviewStats:
    return ReviewStats.model_validate(client.get(f"/reviews/restaurant/{restaurant_id}/stats") or {})


def my_reviews(client: BackendClient, filters: ReviewFilter | None = None) -> ReviewPage:
    filters = filters or ReviewFilter(limit=MY_REVIEWS_PAGE_SIZE)
    payload = client.get("/reviews/my", params=filters.model_dump(exclude_none=True, mode="json"))
    return ReviewPage.from_payload(payload)


def my_review_for(client: BackendClient, restaurant_id: int) -> Review | None:
    """The current user's review of a restaurant, if any."""
    page = my_reviews(client, ReviewFilter(limit=100))
    return next((r for r in page.reviews if r.restaurant_id == restaurant_id), None)


def get_review(client: BackendClient, review_id: str) -> Review:
    return Review.model_validate(client.get(f"/reviews/{review_id}"))


# =============================================================================
# Writing
# =============================================================================


def create_review(client: BackendClient, data: ReviewCreate) -> Review:
    review = Review.model_validate(
        client.post("/reviews", json=data.model_dump(mode="json", exclude_none=True))
    )
    logger.info("Review %s created for restaurant %s", review.review_id, data.restaurant_id)
    return review


def update_review(client: BackendClient, review_id: str, data: ReviewUpdate) -> Review:
    review = Review.model_validate(
        client.put(f"/reviews/{review_id}", json=data.model_dump(mode="json", exclude_none=True))
    )
    logger.info("Review %s updated", review_id)
    return review


def delete_review(client: BackendClient, review_id: str) -> None:
    client.delete(f"/reviews/{review_id}")
    logger.info("Review %s deleted", review_id)


def delete_my_review(client: BackendClient, restaurant_id: int) -> None:
    client.delete(f"/reviews/restaurant/{restaurant_id}/my")
    logger.info("Own review for restaurant %s deleted", restaurant_id)
