"""
Review views - the reviews block of a restaurant page and "My reviews".

The restaurant block is an HTMX partial loaded into the restaurant page;
its forms post back and receive the refreshed block.
"""

from typing import Any

from django.contrib import messages
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.utils.translation import gettext as _
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from supra_schemas import ReviewCreate, ReviewSortField, ReviewUpdate, Role

from apps.web.backend import BackendAuthError, BackendError, describe_error
from apps.web.core.decorators import role_required
from apps.web.core.roles import has_role

from . import services


def _restaurant_block(
    request: HttpRequest,
    restaurant_id: int,
    errors: list[str] | None = None,
    field_errors: dict[str, str] | None = None,
    form: dict[str, Any] | None = None,
) -> HttpResponse:
    client = request.backend  # type: ignore[attr-defined]
    user = request.backend_user  # type: ignore[attr-defined]
    filters = services.review_filter_from_query(request.GET)

    my_review = None
    if has_role(user, Role.USER):
        my_review = services.my_review_for(client, restaurant_id)

    query = request.GET.copy()
    query.pop("page", None)

    context = {
        "restaurant_id": restaurant_id,
        "stats": services.restaurant_stats(client, restaurant_id),
        "page": services.restaurant_reviews(client, restaurant_id, filters),
        "filters": filters,
        "sort_fields": list(ReviewSortField),
        "query_string": query.urlencode(),
        "my_review": my_review,
        "can_review": has_role(user, Role.USER) and my_review is None,
        "errors": errors or [],
        "field_errors": field_errors or {},
        "form": form or {},
    }
    return render(request, "reviews/partials/restaurant_reviews.html", context)


def _after_change(request: HttpRequest, restaurant_id: int, message: str) -> HttpResponse:
    if request.headers.get("HX-Request"):
        return _restaurant_block(request, restaurant_id)
    messages.success(request, message)
    return redirect("catalog:restaurant_detail", restaurant_id=restaurant_id)


@require_GET
def for_restaurant(request: HttpRequest, restaurant_id: int) -> HttpResponse:
    """
    GET /restaurants/{restaurant_id}/reviews/

    Rating summary, filtered and paginated reviews, and the review form.
    """
    return _restaurant_block(request, restaurant_id)


@role_required(Role.USER)
@require_POST
def create(request: HttpRequest, restaurant_id: int) -> HttpResponse:
    """
    POST /restaurants/{restaurant_id}/reviews/create/
    """
    rating, text, field_errors = services.validate_review(
        request.POST.get("rating", ""), request.POST.get("review_text", "")
    )
    form = {"rating": request.POST.get("rating", ""), "review_text": request.POST.get("review_text", "")}

    errors: list[str] = []
    if not field_errors:
        try:
            services.create_review(
                request.backend,  # type: ignore[attr-defined]
                ReviewCreate(restaurant_id=restaurant_id, rating=rating, review_text=text),
            )
        except BackendAuthError:
            raise
        except BackendError as e:
            errors.append(describe_error(e, default=_("Could not save the review")))
        else:
            return _after_change(request, restaurant_id, _("Thank you for your review"))

    if request.headers.get("HX-Request"):
        return _restaurant_block(request, restaurant_id, errors, field_errors, form)
    for message in [*errors, *field_errors.values()]:
        messages.error(request, message)
    return redirect("catalog:restaurant_detail", restaurant_id=restaurant_id)


@role_required(Role.USER)
@require_POST
def delete_mine(request: HttpRequest, restaurant_id: int) -> HttpResponse:
    """
    POST /restaurants/{restaurant_id}/reviews/mine/delete/
    """
    try:
        services.delete_my_review(request.backend, restaurant_id)  # type: ignore[attr-defined]
    except BackendAuthError:
        raise
    except BackendError as e:
        messages.error(request, describe_error(e))
        return redirect("catalog:restaurant_detail", restaurant_id=restaurant_id)
    return _after_change(request, restaurant_id, _("Review deleted"))


@role_required(Role.USER, Role.ADMIN)
@require_POST
def delete(request: HttpRequest, review_id: str) -> HttpResponse:
    """
    POST /reviews/{review_id}/delete/

    Customers delete their own reviews; admins may delete any.
    """
    client = request.backend  # type: ignore[attr-defined]
    try:
        review = services.get_review(client, review_id)
        services.delete_review(client, review_id)
    except BackendAuthError:
        raise
    except BackendError as e:
        messages.error(request, describe_error(e))
        user = request.backend_user  # type: ignore[attr-defined]
        return redirect("reviews:my" if has_role(user, Role.USER) else "catalog:home")

    if request.POST.get("from") == "my":
        messages.success(request, _("Review deleted"))
        return redirect("reviews:my")
    return _after_change(request, review.restaurant_id, _("Review deleted"))


@role_required(Role.ADMIN)
@require_http_methods(["GET", "POST"])
def edit(request: HttpRequest, review_id: str) -> HttpResponse:
    """
    GET/POST /reviews/{review_id}/edit/

    Admin moderation: change rating or text of any review.
    """
    client = request.backend  # type: ignore[attr-defined]
    review = services.get_review(client, review_id)
    form = {"rating": str(review.rating), "review_text": review.review_text or ""}
    field_errors: dict[str, str] = {}
    errors: list[str] = []

    if request.method == "POST":
        form = {
            "rating": request.POST.get("rating", ""),
            "review_text": request.POST.get("review_text", ""),
        }
        rating, text, field_errors = services.validate_review(form["rating"], form["review_text"])
        if not field_errors:
            try:
                services.update_review(client, review_id, ReviewUpdate(rating=rating, review_text=text))
            except BackendAuthError:
                raise
            except BackendError as e:
                errors.append(describe_error(e, default=_("Could not save the review")))
            else:
                messages.success(request, _("Review updated"))
                return redirect("catalog:restaurant_detail", restaurant_id=review.restaurant_id)

    return render(
        request,
        "reviews/edit.html",
        {"review": review, "form": form, "errors": errors, "field_errors": field_errors},
    )


@role_required(Role.USER)
@require_GET
def my_reviews(request: HttpRequest) -> HttpResponse:
    """
    GET /profile/reviews/
    """
    filters = services.review_filter_from_query(request.GET, limit=services.MY_REVIEWS_PAGE_SIZE)
    page = services.my_reviews(request.backend, filters)  # type: ignore[attr-defined]
    query = request.GET.copy()
    query.pop("page", None)
    return render(
        request,
        "reviews/my_reviews.html",
        {"page": page, "query_string": query.urlencode()},
    )
