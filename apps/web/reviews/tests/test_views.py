"""
Tests for review views.
"""

import json

from django.urls import reverse

import httpx
import pytest
from supra_schemas import Role

from apps.web.core.tests.factories import ReviewFactory

HTMX = {"HX-Request": "true"}


@pytest.fixture
def reviews_api(backend_api):
    """Restaurant 1 with one review by someone else."""
    backend_api.get("/reviews/restaurant/1", name="restaurant_reviews").mock(
        return_value=httpx.Response(200, json={"reviews": [ReviewFactory(user_id="user-other")], "total": 1})
    )
    backend_api.get("/reviews/restaurant/1/stats").mock(
        return_value=httpx.Response(
            200, json={"restaurant_id": 1, "total_reviews": 1, "average_rating": "5.0", "rating_distribution": {"5": 1}}
        )
    )
    backend_api.get("/reviews/my", name="my_reviews").mock(return_value=httpx.Response(200, json=[]))
    return backend_api


class TestRestaurantBlock:
    """Tests for the reviews partial on the restaurant page."""

    def test_guest_sees_reviews_without_form(self, client, reviews_api):
        response = client.get(reverse("reviews:for_restaurant", args=[1]), headers=HTMX)

        assert response.status_code == 200
        assert b"Best khachapuri in town" in response.content
        assert response.context["can_review"] is False
        assert not reviews_api["my_reviews"].called

    def test_customer_without_review_can_write_one(self, client, login_as, reviews_api):
        login_as(Role.USER)

        response = client.get(reverse("reviews:for_restaurant", args=[1]), headers=HTMX)

        assert response.context["can_review"] is True
        assert b"Write a review" in response.content

    def test_customer_with_review_sees_it(self, client, login_as, reviews_api):
        login_as(Role.USER)
        reviews_api["my_reviews"].mock(
            return_value=httpx.Response(200, json=[ReviewFactory(review_id="mine", restaurant_id=1, rating=3)])
        )

        response = client.get(reverse("reviews:for_restaurant", args=[1]), headers=HTMX)

        assert response.context["my_review"].review_id == "mine"
        assert response.context["can_review"] is False

    def test_filters_are_forwarded(self, client, reviews_api):
        response = client.get(
            reverse("reviews:for_restaurant", args=[1]),
            {"min_rating": 4, "max_rating": 2, "page": 2},
            headers=HTMX,
        )

        params = reviews_api["restaurant_reviews"].calls.last.request.url.params
        assert response.context["filters"].minRating == 2
        assert "page" not in response.context["query_string"]
        assert (params["minRating"], params["maxRating"], params["page"]) == ("2", "4", "2")


class TestCreateReview:
    def test_htmx_success_returns_fresh_block(self, client, login_as, reviews_api):
        login_as(Role.USER)
        route = reviews_api.post("/reviews").mock(
            return_value=httpx.Response(201, json=ReviewFactory(review_id="new", rating=4))
        )

        response = client.post(
            reverse("reviews:create", args=[1]),
            {"rating": "4", "review_text": "Lovely terrace and great wine"},
            headers=HTMX,
        )

        assert response.status_code == 200
        assert json.loads(route.calls.last.request.content) == {
            "restaurant_id": 1,
            "rating": 4,
            "review_text": "Lovely terrace and great wine",
        }

    def test_plain_post_redirects_to_restaurant(self, client, login_as, reviews_api):
        login_as(Role.USER)
        reviews_api.post("/reviews").mock(return_value=httpx.Response(201, json=ReviewFactory()))

        response = client.post(reverse("reviews:create", args=[1]), {"rating": "5"})

        assert response.status_code == 302
        assert response.url == reverse("catalog:restaurant_detail", args=[1])

    def test_invalid_form_keeps_input(self, client, login_as, reviews_api):
        login_as(Role.USER)
        route = reviews_api.post("/reviews")

        response = client.post(
            reverse("reviews:create", args=[1]), {"rating": "", "review_text": "Nice"}, headers=HTMX
        )

        assert set(response.context["field_errors"]) == {"rating", "review_text"}
        assert response.context["form"]["review_text"] == "Nice"
        assert not route.called

    def test_backend_conflict(self, client, login_as, reviews_api):
        login_as(Role.USER)
        reviews_api.post("/reviews").mock(
            return_value=httpx.Response(409, json={"message": "You have already reviewed this restaurant"})
        )

        response = client.post(reverse("reviews:create", args=[1]), {"rating": "5"}, headers=HTMX)

        assert response.context["errors"] == ["You have already reviewed this restaurant"]

    def test_staff_cannot_review(self, client, login_as):
        login_as(Role.MANAGER)

        response = client.post(reverse("reviews:create", args=[1]), {"rating": "5"})

        assert response.url == reverse("catalog:home")


class TestDeleteReview:
    def test_delete_mine(self, client, login_as, reviews_api):
        login_as(Role.USER)
        route = reviews_api.delete("/reviews/restaurant/1/my").mock(return_value=httpx.Response(204))

        response = client.post(reverse("reviews:delete_mine", args=[1]))

        assert route.called
        assert response.url == reverse("catalog:restaurant_detail", args=[1])

    def test_admin_deletes_any_review(self, client, login_as, backend_api):
        login_as(Role.ADMIN)
        backend_api.get("/reviews/r-9").mock(
            return_value=httpx.Response(200, json=ReviewFactory(review_id="r-9", restaurant_id=4))
        )
        route = backend_api.delete("/reviews/r-9").mock(return_value=httpx.Response(204))

        response = client.post(reverse("reviews:delete", args=["r-9"]))

        assert route.called
        assert response.url == reverse("catalog:restaurant_detail", args=[4])

    def test_delete_from_my_reviews(self, client, login_as, backend_api):
        login_as(Role.USER)
        backend_api.get("/reviews/r-9").mock(return_value=httpx.Response(200, json=ReviewFactory(review_id="r-9")))
        backend_api.delete("/reviews/r-9").mock(return_value=httpx.Response(204))

        response = client.post(reverse("reviews:delete", args=["r-9"]), {"from": "my"})

        assert response.url == reverse("reviews:my")


class TestEditReview:
    """Tests for admin moderation."""

    def test_customers_cannot_edit(self, client, login_as):
        login_as(Role.USER)

        response = client.get(reverse("reviews:edit", args=["r-1"]))

        assert response.url == reverse("catalog:home")

    def test_form_is_prefilled(self, client, login_as, backend_api):
        login_as(Role.ADMIN)
        backend_api.get("/reviews/r-1").mock(
            return_value=httpx.Response(200, json=ReviewFactory(review_id="r-1", rating=2))
        )

        response = client.get(reverse("reviews:edit", args=["r-1"]))

        assert response.context["form"] == {"rating": "2", "review_text": "Best khachapuri in town"}

    def test_update(self, client, login_as, backend_api):
        login_as(Role.ADMIN)
        backend_api.get("/reviews/r-1").mock(
            return_value=httpx.Response(200, json=ReviewFactory(review_id="r-1", restaurant_id=3))
        )
        route = backend_api.put("/reviews/r-1").mock(return_value=httpx.Response(200, json=ReviewFactory()))

        response = client.post(
            reverse("reviews:edit", args=["r-1"]), {"rating": "3", "review_text": "Edited for language"}
        )

        assert json.loads(route.calls.last.request.content) == {"rating": 3, "review_text": "Edited for language"}
        assert response.url == reverse("catalog:restaurant_detail", args=[3])


class TestMyReviews:
    def test_lists_own_reviews(self, client, login_as, backend_api):
        login_as(Role.USER)
        route = backend_api.get("/reviews/my").mock(
            return_value=httpx.Response(200, json={"reviews": [ReviewFactory(), ReviewFactory()], "total": 2})
        )

        response = client.get(reverse("reviews:my"))

        assert len(response.context["page"].reviews) == 2
        assert route.calls.last.request.url.params["limit"] == "20"
