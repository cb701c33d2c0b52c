"""
Manager services - menu maintenance and restaurant reports.

Reservation handling for managers lives in reservations.services; this
module covers the menu editor and the /reports endpoints.
"""

import logging
from datetime import date, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any

from django.http import QueryDict
from django.utils.translation import gettext as _

from supra_schemas import (
    MenuItem,
    MenuItemCreate,
    MenuItemUpdate,
    OccupancyRow,
    ReportKind,
    ReportRange,
    SalesByDay,
    UserVisitsRow,
)

from apps.web.backend import BackendClient, unwrap_list
from apps.web.core.query import query_int
from apps.web.core.validation import FormErrors

logger = logging.getLogger(__name__)

MAX_ITEM_NAME_LENGTH = 150
DEFAULT_REPORT_DAYS = 30

MENU_FORM_FIELDS = (
    "item_name",
    "item_description",
    "category_id",
    "price",
    "cooking_time_minutes",
    "calories",
    "is_vegetarian",
    "is_spicy",
    "image_url",
)


# =============================================================================
# Menu
# =============================================================================


def list_all_menu(client: BackendClient) -> list[MenuItem]:
    """Every dish including soft-deleted ones, by category then name."""
    items = [MenuItem.model_validate(item) for item in unwrap_list(client.get("/menu/all"))]
    return sorted(items, key=lambda i: (i.category_id, i.item_name.lower()))


def menu_form_from_item(item: MenuItem) -> dict[str, Any]:
    """Form values for editing an existing dish."""
    return {
        "item_name": item.item_name,
        "item_description": item.item_description or "",
        "category_id": str(item.category_id),
        "price": str(item.price),
        "cooking_time_minutes": str(item.cooking_time_minutes),
        "calories": "" if item.calories is None else str(item.calories),
        "is_vegetarian": item.is_vegetarian,
        "is_spicy": item.is_spicy,
        "image_url": item.image_url or "",
    }


def menu_form_from_post(data: QueryDict) -> dict[str, Any]:
    form: dict[str, Any] = {
        field: data.get(field, "").strip() for field in MENU_FORM_FIELDS
    }
    form["is_vegetarian"] = bool(data.get("is_vegetarian"))
    form["is_spicy"] = bool(data.get("is_spicy"))
    return form


def validate_menu_form(form: dict[str, Any]) -> tuple[MenuItemCreate | None, FormErrors]:
    """
    Check the dish editor.

    Name required (up to 150 characters), category required, price above
    zero, cooking time and calories not negative.
    """
    errors: FormErrors = {}

    name = form["item_name"]
    if not name:
        errors["item_name"] = _("Enter a name")
    elif len(name) > MAX_ITEM_NAME_LENGTH:
        errors["item_name"] = _("Name must be at most %(count)d characters") % {
            "count": MAX_ITEM_NAME_LENGTH
        }

    category_id = query_int(form, "category_id", minimum=1)
    if category_id is None:
        errors["category_id"] = _("Choose a category")

    try:
        price = Decimal(form["price"].replace(",", "."))
    except InvalidOperation:
        price = None
    if price is None or not price.is_finite() or price <= 0:
        errors["price"] = _("Price must be greater than zero")

    cooking_time = 0
    if form["cooking_time_minutes"]:
        cooking_time = query_int(form, "cooking_time_minutes", minimum=0)
        if cooking_time is None:
            errors["cooking_time_minutes"] = _("Cooking time cannot be negative")

    calories = None
    if form["calories"]:
        calories = query_int(form, "calories", minimum=0)
        if calories is None:
            errors["calories"] = _("Calories cannot be negative")

    if errors:
        return None, errors

    return (
        MenuItemCreate(
            item_name=name,
            item_description=form["item_description"] or None,
            category_id=category_id,
            price=price,
            cooking_time_minutes=cooking_time,
            calories=calories,
            is_vegetarian=form["is_vegetarian"],
            is_spicy=form["is_spicy"],
            image_url=form["image_url"] or None,
        ),
        errors,
    )


def changed_fields(item: MenuItem, edited: MenuItemCreate) -> MenuItemUpdate:
    """Only the fields that differ from the stored dish."""
    changes = {
        field: value
        for field, value in edited.model_dump().items()
        if getattr(item, field) != value
    }
    return MenuItemUpdate(**changes)


def create_menu_item(client: BackendClient, data: MenuItemCreate) -> MenuItem:
    item = MenuItem.model_validate(client.post("/menu", json=data.model_dump(mode="json")))
    logger.info("Menu item %s created: %s", item.item_id, item.item_name)
    return item


def update_menu_item(client: BackendClient, item_id: int, data: MenuItemUpdate) -> None:
    changes = data.model_dump(mode="json", exclude_unset=True)
    if not changes:
        logger.debug("Menu item %s unchanged, nothing sent", item_id)
        return
    client.patch(f"/menu/{item_id}", json=changes)
    logger.info("Menu item %s updated: %s", item_id, ", ".join(sorted(changes)))


def soft_delete_menu_item(client: BackendClient, item_id: int) -> None:
    client.patch(f"/menu/{item_id}/soft-delete")
    logger.info("Menu item %s hidden", item_id)


def restore_menu_item(client: BackendClient, item_id: int) -> None:
    client.patch(f"/menu/{item_id}/restore")
    logger.info("Menu item %s restored", item_id)


# =============================================================================
# Reports
# =============================================================================


def report_range_from_query(data: QueryDict, today: date) -> tuple[ReportRange, str | None]:
    """
    Date range from ?from=&to=&restaurant=, defaulting to the last 30 days.

    An inverted range falls back to the default and returns an error.
    """
    default_from = today - timedelta(days=DEFAULT_REPORT_DAYS)

    def parse(key: str, fallback: date) -> date:
        try:
            return date.fromisoformat(data.get(key, ""))
        except ValueError:
            return fallback

    date_from = parse("from", default_from)
    date_to = parse("to", today)
    restaurant_id = query_int(data, "restaurant", minimum=1)

    if date_from > date_to:
        return (
            ReportRange(date_from=default_from, date_to=today, restaurant_id=restaurant_id),
            _("The start date must not be after the end date"),
        )
    return ReportRange(date_from=date_from, date_to=date_to, restaurant_id=restaurant_id), None


def sales_by_day(client: BackendClient, report: ReportRange) -> list[SalesByDay]:
    payload = client.get("/reports/sales", params=report.as_params())
    return [SalesByDay.model_validate(row) for row in unwrap_list(payload)]


def occupancy_by_table(client: BackendClient, report: ReportRange) -> list[OccupancyRow]:
    payload = client.get("/reports/occupancy", params=report.as_params())
    return [OccupancyRow.model_validate(row) for row in unwrap_list(payload)]


def user_visits(client: BackendClient, report: ReportRange) -> list[UserVisitsRow]:
    payload = client.get("/reports/user-visits", params=report.as_params(scoped=False))
    return [UserVisitsRow.model_validate(row) for row in unwrap_list(payload)]


def export_csv(client: BackendClient, kind: ReportKind, report: ReportRange) -> bytes:
    """Raw CSV body of /reports/export/{kind}."""
    params = report.as_params(scoped=kind != ReportKind.USER_VISITS)
    content = client.get_bytes(f"/reports/export/{kind.value}", params=params)
    logger.info(
        "Exported %s report %s..%s (%d bytes)",
        kind.value,
        report.date_from,
        report.date_to,
        len(content),
    )
    return content


def export_filename(kind: ReportKind, report: ReportRange) -> str:
    return f"{kind.value}-{report.date_from.isoformat()}-{report.date_to.isoformat()}.csv"
