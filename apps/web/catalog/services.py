"""
Catalog services - restaurants, menu categories and menu items.

Restaurant lists and categories change rarely and are cached for
CATALOG_CACHE_SECONDS. Menu queries are not cached (prices and availability
are edited by managers).
"""

import json
import logging
from typing import Any

from django.conf import settings
from django.core.cache import cache

from supra_schemas import (
    MenuCategory,
    MenuFilter,
    MenuItem,
    MenuPage,
    Restaurant,
    RestaurantFilter,
    Table,
)

from apps.web.backend import BackendClient, unwrap_list

logger = logging.getLogger(__name__)

CACHE_PREFIX = "catalog"


def _cache_key(name: str, params: dict[str, Any] | None = None) -> str:
    suffix = json.dumps(params or {}, sort_keys=True, default=str)
    return f"{CACHE_PREFIX}:{name}:{suffix}"


def _cached(key: str, fetch: Any) -> Any:
    payload = cache.get(key)
    if payload is None:
        payload = fetch()
        cache.set(key, payload, timeout=settings.CATALOG_CACHE_SECONDS)
    else:
        logger.debug("Catalog cache hit: %s", key)
    return payload


# =============================================================================
# Restaurants
# =============================================================================


def list_restaurants(client: BackendClient) -> list[Restaurant]:
    """Every restaurant the backend knows (cached)."""
    payload = _cached(_cache_key("restaurants"), lambda: client.get("/restaurants"))
    return [Restaurant.model_validate(item) for item in unwrap_list(payload)]


def filter_restaurants(
    restaurants: list[Restaurant], filters: RestaurantFilter
) -> list[Restaurant]:
    """
    Apply the list page filters locally.

    Name and city match on a case-insensitive substring, country exactly
    (case-insensitive), rating as a lower bound.
    """
    search = (filters.search or "").strip().lower()
    city = (filters.city or "").strip().lower()
    country = (filters.country or "").strip().lower()

    def matches(restaurant: Restaurant) -> bool:
        if search and search not in restaurant.restaurant_name.lower():
            return False
        if city and city not in restaurant.city.lower():
            return False
        if country and country != restaurant.country.lower():
            return False
        if filters.is_active is not None and restaurant.is_active != filters.is_active:
            return False
        if filters.min_rating is not None and restaurant.rating < filters.min_rating:
            return False
        return True

    return [r for r in restaurants if matches(r)]


def top_restaurants(client: BackendClient, count: int = 3) -> list[Restaurant]:
    """Active restaurants with the best rating first."""
    restaurants = filter_restaurants(list_restaurants(client), RestaurantFilter())
    return sorted(restaurants, key=lambda r: r.rating, reverse=True)[:count]


def get_restaurant(client: BackendClient, restaurant_id: int) -> Restaurant:
    return Restaurant.model_validate(client.get(f"/restaurants/{restaurant_id}"))


def list_tables(client: BackendClient, restaurant_id: int) -> list[Table]:
    payload = client.get(f"/restaurants/{restaurant_id}/tables")
    return [Table.model_validate(item) for item in unwrap_list(payload)]


# =============================================================================
# Menu
# =============================================================================


def list_categories(client: BackendClient) -> list[MenuCategory]:
    payload = _cached(_cache_key("categories"), lambda: client.get("/menu-categories"))
    return [MenuCategory.model_validate(item) for item in unwrap_list(payload)]


def get_category(client: BackendClient, category_id: int) -> MenuCategory:
    return MenuCategory.model_validate(client.get(f"/menu-categories/{category_id}"))


def _menu_params(filters: MenuFilter | None) -> dict[str, Any]:
    filters = (filters or MenuFilter()).with_default_ordering()
    return filters.model_dump(mode="json", exclude_none=True)


def list_menu(client: BackendClient, filters: MenuFilter | None = None) -> MenuPage:
    """GET /menu with filters; category filters go to /menu/category/{id}."""
    params = _menu_params(filters)
    category_id = params.pop("category_id", None)
    if category_id:
        return menu_by_category(client, category_id, filters)
    return MenuPage.from_payload(client.get("/menu", params=params))


def menu_by_category(
    client: BackendClient, category_id: int, filters: MenuFilter | None = None
) -> MenuPage:
    params = _menu_params(filters)
    params.pop("category_id", None)
    return MenuPage.from_payload(client.get(f"/menu/category/{category_id}", params=params))


def get_menu_item(client: BackendClient, item_id: int) -> MenuItem:
    return MenuItem.model_validate(client.get(f"/menu/{item_id}"))

