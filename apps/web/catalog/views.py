"""
Catalog views - home page, restaurants and the menu.

Full page views return complete HTML on initial load.
HTMX requests return just the partial fragments.
"""

from decimal import Decimal

from django.http import HttpRequest, HttpResponse, QueryDict
from django.shortcuts import render
from django.views.decorators.http import require_GET

from supra_schemas import MenuFilter, MenuSortField, RestaurantFilter, SortOrder

from apps.web.core.query import (
    query_bool,
    query_choice,
    query_decimal,
    query_int,
    query_str,
)

from . import services

MENU_PAGE_SIZE = 12


def menu_filter_from_query(data: QueryDict) -> MenuFilter:
    """Build menu filters from the query string, ignoring bad values."""
    return MenuFilter(
        search=query_str(data, "search"),
        category_id=query_int(data, "category_id", minimum=1),
        is_vegetarian=query_bool(data, "is_vegetarian"),
        is_spicy=query_bool(data, "is_spicy"),
        min_price=query_decimal(data, "min_price", minimum=Decimal("0")),
        max_price=query_decimal(data, "max_price", minimum=Decimal("0")),
        max_cooking_time=query_int(data, "max_cooking_time", minimum=0),
        max_calories=query_int(data, "max_calories", minimum=0),
        sort_by=query_choice(data, "sort_by", MenuSortField),
        sort_order=query_choice(data, "sort_order", SortOrder),
        page=query_int(data, "page", minimum=1) or 1,
        limit=MENU_PAGE_SIZE,
    ).with_default_ordering()


@require_GET
def home(request: HttpRequest) -> HttpResponse:
    """
    GET /

    Landing page with the best-rated restaurants and menu categories.
    """
    context = {
        "restaurants": services.top_restaurants(request.backend),  # type: ignore[attr-defined]
        "categories": services.list_categories(request.backend),  # type: ignore[attr-defined]
    }
    return render(request, "catalog/home.html", context)


@require_GET
def restaurant_list(request: HttpRequest) -> HttpResponse:
    """
    GET /restaurants/

    Active restaurants with search, city, country and rating filters.
    - Full page on initial load (non-HTMX)
    - Just the card grid on HTMX requests
    """
    min_rating = query_decimal(request.GET, "min_rating", minimum=Decimal("0"))
    if min_rating is not None and min_rating > 5:
        min_rating = None
    filters = RestaurantFilter(
        search=query_str(request.GET, "search"),
        city=query_str(request.GET, "city"),
        country=query_str(request.GET, "country"),
        min_rating=min_rating,
    )

    restaurants = services.filter_restaurants(
        services.list_restaurants(request.backend),  # type: ignore[attr-defined]
        filters,
    )
    context = {"restaurants": restaurants, "filters": filters}

    if request.headers.get("HX-Request"):
        return render(request, "catalog/partials/restaurant_grid.html", context)

    return render(request, "catalog/restaurant_list.html", context)


@require_GET
def restaurant_detail(request: HttpRequest, restaurant_id: int) -> HttpResponse:
    """
    GET /restaurants/{restaurant_id}/

    Restaurant info and weekly hours. Reviews load as an HTMX partial.
    """
    restaurant = services.get_restaurant(request.backend, restaurant_id)  # type: ignore[attr-defined]
    return render(request, "catalog/restaurant_detail.html", {"restaurant": restaurant})


@require_GET
def menu(request: HttpRequest) -> HttpResponse:
    """
    GET /menu/

    Paginated menu with filters and sorting.
    - Full page on initial load (non-HTMX)
    - Just the item grid on HTMX requests
    """
    filters = menu_filter_from_query(request.GET)
    page = services.list_menu(request.backend, filters)  # type: ignore[attr-defined]

    query = request.GET.copy()
    query.pop("page", None)

    context = {
        "page": page,
        "filters": filters,
        "categories": services.list_categories(request.backend),  # type: ignore[attr-defined]
        "sort_fields": list(MenuSortField),
        "query_string": query.urlencode(),
    }

    if request.headers.get("HX-Request"):
        return render(request, "catalog/partials/menu_grid.html", context)

    return render(request, "catalog/menu.html", context)


@require_GET
def menu_item_detail(request: HttpRequest, item_id: int) -> HttpResponse:
    """
    GET /menu/{item_id}/

    Dish details (HTMX dialog body or a full page).
    """
    item = services.get_menu_item(request.backend, item_id)  # type: ignore[attr-defined]
    template = (
        "catalog/partials/menu_item_detail.html"
        if request.headers.get("HX-Request")
        else "catalog/menu_item.html"
    )
    return render(request, template, {"item": item})
