"""
Manager views - menu editor, reservations desk and reports.

All pages are open to managers and admins.
"""

from django.contrib import messages
from django.http import Http404, HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils.translation import gettext as _
from django.utils.translation import gettext_lazy
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from supra_schemas import ReportKind, ReservationForUserCreate, Role

from apps.web.administration.services import list_users
from apps.web.backend import BackendAuthError, BackendError, describe_error
from apps.web.catalog import services as catalog
from apps.web.core.decorators import role_required
from apps.web.core.roles import STAFF_ROLES
from apps.web.core.validation import normalize_phone
from apps.web.reservations import services as reservations
from apps.web.reservations.booking import (
    booking_context,
    load_slots,
    parse_booking,
    validate_booking,
)

from . import services

staff_required = role_required(*STAFF_ROLES)

RESERVATION_TABS = (
    (reservations.ReservationScope.ALL, gettext_lazy("All")),
    (reservations.ReservationScope.ACTIVE, gettext_lazy("Active")),
    (reservations.ReservationScope.INACTIVE, gettext_lazy("Past and cancelled")),
)


@staff_required
@require_GET
def dashboard(request: HttpRequest) -> HttpResponse:
    """
    GET /manager/

    Shortcuts and the number of active reservations for today.
    """
    today = reservations.restaurant_now().date()
    active = reservations.list_reservations(
        request.backend,  # type: ignore[attr-defined]
        reservations.ReservationScope.ACTIVE,
    )
    todays = [r for r in active if r.reservation_date == today]
    return render(
        request,
        "manager/dashboard.html",
        {"today": today, "todays_reservations": todays, "active_count": len(todays)},
    )


# =============================================================================
# Menu
# =============================================================================


def _find_item(request: HttpRequest, item_id: int):
    items = services.list_all_menu(request.backend)  # type: ignore[attr-defined]
    item = next((i for i in items if i.item_id == item_id), None)
    if item is None:
        raise Http404(_("Dish not found"))
    return item


@staff_required
@require_GET
def menu_list(request: HttpRequest) -> HttpResponse:
    """
    GET /manager/menu/

    Every dish, including hidden ones.
    """
    client = request.backend  # type: ignore[attr-defined]
    categories = catalog.list_categories(client)
    return render(
        request,
        "manager/menu_list.html",
        {
            "items": services.list_all_menu(client),
            "category_names": {c.category_id: c.category_name for c in categories},
        },
    )


@staff_required
@require_http_methods(["GET", "POST"])
def menu_create(request: HttpRequest) -> HttpResponse:
    """
    GET/POST /manager/menu/new/
    """
    client = request.backend  # type: ignore[attr-defined]
    form = services.menu_form_from_post(request.POST)
    field_errors: dict[str, str] = {}
    errors: list[str] = []

    if request.method == "POST":
        data, field_errors = services.validate_menu_form(form)
        if data is not None:
            try:
                item = services.create_menu_item(client, data)
            except BackendAuthError:
                raise
            except BackendError as e:
                errors.append(describe_error(e, default=_("Could not save the dish")))
            else:
                messages.success(request, _("%(name)s added to the menu") % {"name": item.item_name})
                return redirect("manager:menu")

    return render(
        request,
        "manager/menu_form.html",
        {
            "form": form,
            "item": None,
            "categories": catalog.list_categories(client),
            "errors": errors,
            "field_errors": field_errors,
        },
    )


@staff_required
@require_http_methods(["GET", "POST"])
def menu_edit(request: HttpRequest, item_id: int) -> HttpResponse:
    """
    GET/POST /manager/menu/{item_id}/edit/

    Only fields that were changed are sent to the backend.
    """
    client = request.backend  # type: ignore[attr-defined]
    item = _find_item(request, item_id)
    form = services.menu_form_from_item(item)
    field_errors: dict[str, str] = {}
    errors: list[str] = []

    if request.method == "POST":
        form = services.menu_form_from_post(request.POST)
        data, field_errors = services.validate_menu_form(form)
        if data is not None:
            try:
                services.update_menu_item(client, item_id, services.changed_fields(item, data))
            except BackendAuthError:
                raise
            except BackendError as e:
                errors.append(describe_error(e, default=_("Could not save the dish")))
            else:
                messages.success(request, _("%(name)s saved") % {"name": data.item_name})
                return redirect("manager:menu")

    return render(
        request,
        "manager/menu_form.html",
        {
            "form": form,
            "item": item,
            "categories": catalog.list_categories(client),
            "errors": errors,
            "field_errors": field_errors,
        },
    )


def _menu_action(request: HttpRequest, item_id: int, action, done: str) -> HttpResponse:
    try:
        action(request.backend, item_id)  # type: ignore[attr-defined]
    except BackendAuthError:
        raise
    except BackendError as e:
        messages.error(request, describe_error(e))
    else:
        messages.info(request, done)
    return redirect("manager:menu")


@staff_required
@require_POST
def menu_delete(request: HttpRequest, item_id: int) -> HttpResponse:
    """
    POST /manager/menu/{item_id}/delete/

    Hides the dish from the public menu; it can be restored.
    """
    return _menu_action(
        request, item_id, services.soft_delete_menu_item, _("Dish hidden from the menu")
    )


@staff_required
@require_POST
def menu_restore(request: HttpRequest, item_id: int) -> HttpResponse:
    """
    POST /manager/menu/{item_id}/restore/
    """
    return _menu_action(
        request, item_id, services.restore_menu_item, _("Dish is back on the menu")
    )


# =============================================================================
# Reservations
# =============================================================================


@staff_required
@require_GET
def reservation_list(request: HttpRequest) -> HttpResponse:
    """
    GET /manager/reservations/?tab=all|active|inactive
    """
    tab = request.GET.get("tab", reservations.ReservationScope.ALL)
    if tab not in reservations.ReservationScope.PATHS:
        tab = reservations.ReservationScope.ALL
    items = reservations.list_reservations(request.backend, tab)  # type: ignore[attr-defined]
    items.sort(key=lambda r: (r.reservation_date, r.reservation_time), reverse=True)
    return render(
        request,
        "manager/reservations.html",
        {
            "reservations": items,
            "tab": tab,
            "tabs": RESERVATION_TABS,
            "restaurants": catalog.list_restaurants(request.backend),  # type: ignore[attr-defined]
        },
    )


def _reservation_action(request: HttpRequest, reservation_id: str, action, done: str) -> HttpResponse:
    try:
        action(request.backend, reservation_id)  # type: ignore[attr-defined]
    except BackendAuthError:
        raise
    except BackendError as e:
        messages.error(request, describe_error(e))
    else:
        messages.success(request, done)
    tab = request.POST.get("tab", reservations.ReservationScope.ALL)
    return redirect(f"{reverse('manager:reservations')}?tab={tab}")


@staff_required
@require_POST
def reservation_confirm(request: HttpRequest, reservation_id: str) -> HttpResponse:
    """
    POST /manager/reservations/{reservation_id}/confirm/
    """
    return _reservation_action(
        request, reservation_id, reservations.manager_confirm, _("Reservation confirmed")
    )


@staff_required
@require_POST
def reservation_cancel(request: HttpRequest, reservation_id: str) -> HttpResponse:
    """
    POST /manager/reservations/{reservation_id}/cancel/
    """
    return _reservation_action(
        request, reservation_id, reservations.manager_cancel, _("Reservation cancelled")
    )


@staff_required
@require_GET
def reservation_pick_restaurant(request: HttpRequest) -> HttpResponse:
    """
    GET /manager/reservations/create/

    Choose the restaurant to book a guest into.
    """
    restaurants = [
        r for r in catalog.list_restaurants(request.backend) if r.is_active  # type: ignore[attr-defined]
    ]
    return render(request, "manager/reservation_pick.html", {"restaurants": restaurants})


@staff_required
@require_http_methods(["GET", "POST"])
def reservation_create(request: HttpRequest, restaurant_id: int) -> HttpResponse:
    """
    GET/POST /manager/reservations/create/{restaurant_id}/

    Book a table on behalf of a customer, with the same slot rules as the
    customer booking page.
    """
    client = request.backend  # type: ignore[attr-defined]
    restaurant = catalog.get_restaurant(client, restaurant_id)
    all_tables = catalog.list_tables(client, restaurant_id)
    customers = list_users(client, role=Role.USER)
    now = reservations.restaurant_now()
    window = reservations.booking_window(now)

    data = request.POST if request.method == "POST" else request.GET
    form = parse_booking(data)
    user_id = data.get("user", "")
    customer = next((u for u in customers if u.user_id == user_id), None)
    if request.method == "GET" and customer and not form.phone and customer.phone:
        form = form.model_copy(update={"phone": normalize_phone(customer.phone)})

    fitting = reservations.tables_for_guests(all_tables, form.guests)
    opening, slots = load_slots(client, restaurant, form, fitting, now)

    field_errors: dict[str, str] = {}
    errors: list[str] = []

    if request.method == "POST":
        field_errors = validate_booking(form, fitting, slots, window)
        if customer is None:
            field_errors["user"] = _("Choose a customer")
        if not field_errors:
            body = ReservationForUserCreate(
                user_id=customer.user_id,
                restaurant_id=restaurant_id,
                table_id=form.table_id,
                reservation_date=form.day,
                reservation_time=form.slot,
                duration_hours=form.duration,
                guests_count=form.guests,
                contact_phone=form.phone,
            )
            try:
                reservations.create_for_user(client, body)
            except BackendAuthError:
                raise
            except BackendError as e:
                errors.append(describe_error(e, default=_("Could not create the reservation")))
            else:
                messages.success(
                    request,
                    _("Table reserved for %(name)s on %(day)s at %(time)s")
                    % {"name": customer.username, "day": form.day.isoformat(), "time": form.slot},
                )
                return redirect(f"{reverse('manager:reservations')}?tab=active")

    context = booking_context(form, restaurant, all_tables, opening, slots, window)
    context.update(
        {
            "customers": customers,
            "selected_user": user_id,
            "errors": errors,
            "field_errors": field_errors,
        }
    )
    return render(request, "manager/reservation_create.html", context)


# =============================================================================
# Reports
# =============================================================================


@staff_required
@require_GET
def reports(request: HttpRequest) -> HttpResponse:
    """
    GET /manager/reports/?from=&to=&restaurant=

    Sales by day, table occupancy and customer visits for a date range.
    """
    client = request.backend  # type: ignore[attr-defined]
    report, range_error = services.report_range_from_query(
        request.GET, reservations.restaurant_now().date()
    )
    if range_error:
        messages.warning(request, range_error)

    sales = services.sales_by_day(client, report)
    context = {
        "report": report,
        "params": request.GET.urlencode(),
        "restaurants": catalog.list_restaurants(client),
        "sales": sales,
        "sales_total": sum((row.total for row in sales), 0),
        "occupancy": services.occupancy_by_table(client, report),
        "visits": services.user_visits(client, report),
        "export_kinds": list(ReportKind),
    }
    return render(request, "manager/reports.html", context)


@staff_required
@require_GET
def report_export(request: HttpRequest, kind: str) -> HttpResponse:
    """
    GET /manager/reports/export/{kind}/

    Stream the backend's CSV back as a download.
    """
    try:
        report_kind = ReportKind(kind)
    except ValueError as e:
        raise Http404(_("Unknown report")) from e

    report, _error = services.report_range_from_query(
        request.GET, reservations.restaurant_now().date()
    )
    content = services.export_csv(request.backend, report_kind, report)  # type: ignore[attr-defined]
    response = HttpResponse(content, content_type="text/csv; charset=utf-8")
    response["Content-Disposition"] = (
        f'attachment; filename="{services.export_filename(report_kind, report)}"'
    )
    return response
