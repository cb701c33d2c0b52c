"""
Reservation views - booking a table and managing one's reservations.
"""

from django.contrib import messages
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.utils.translation import gettext as _
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from supra_schemas import ACTIVE_STATUSES, ReservationCreate, Role

from apps.web.backend import BackendAuthError, BackendError, describe_error
from apps.web.catalog import services as catalog
from apps.web.core.decorators import login_required, role_required
from apps.web.core.query import query_int
from apps.web.core.validation import normalize_phone

from . import services
from .booking import booking_context, load_slots, parse_booking, validate_booking

LAST_RESERVATION_SESSION_KEY = "last_reservation"


@role_required(Role.USER)
@require_http_methods(["GET", "POST"])
def create(request: HttpRequest) -> HttpResponse:
    """
    GET/POST /reservations/create/?restaurant={restaurant_id}

    Pick guests, date, table, duration and a free slot, then book.
    """
    restaurant_id = query_int(request.GET, "restaurant", minimum=1)
    if restaurant_id is None:
        messages.info(request, _("Choose a restaurant to book a table"))
        return redirect("catalog:restaurant_list")

    client = request.backend  # type: ignore[attr-defined]
    restaurant = catalog.get_restaurant(client, restaurant_id)
    all_tables = catalog.list_tables(client, restaurant_id)
    now = services.restaurant_now()
    window = services.booking_window(now)

    data = request.POST if request.method == "POST" else request.GET
    form = parse_booking(data)
    user = request.backend_user  # type: ignore[attr-defined]
    if request.method == "GET" and not form.phone and user.phone:
        form = form.model_copy(update={"phone": normalize_phone(user.phone)})
    fitting = services.tables_for_guests(all_tables, form.guests)
    opening, slots = load_slots(client, restaurant, form, fitting, now)

    field_errors: dict[str, str] = {}
    errors: list[str] = []

    if request.method == "POST":
        field_errors = validate_booking(form, fitting, slots, window)
        if not field_errors:
            body = ReservationCreate(
                restaurant_id=restaurant_id,
                table_id=form.table_id,
                reservation_date=form.day,
                reservation_time=form.slot,
                duration_hours=form.duration,
                guests_count=form.guests,
                contact_phone=form.phone,
            )
            try:
                reservation = services.create_reservation(client, body)
            except BackendAuthError:
                raise
            except BackendError as e:
                errors = [describe_error(e, default=_("Could not create the reservation"))]
            else:
                request.session[LAST_RESERVATION_SESSION_KEY] = {
                    **reservation.model_dump(mode="json"),
                    "restaurant_name": reservation.restaurant_name or restaurant.restaurant_name,
                }
                return redirect("reservations:success")

    context = booking_context(form, restaurant, all_tables, opening, slots, window)
    context.update({"errors": errors, "field_errors": field_errors})
    return render(request, "reservations/create.html", context)


@login_required
@require_GET
def slot_list(request: HttpRequest) -> HttpResponse:
    """
    GET /reservations/slots/?restaurant=&table=&date=&duration=

    HTMX partial with the free slots for the current picks.
    """
    restaurant_id = query_int(request.GET, "restaurant", minimum=1)
    if restaurant_id is None:
        return HttpResponse(_("Restaurant is required"), status=400)

    client = request.backend  # type: ignore[attr-defined]
    restaurant = catalog.get_restaurant(client, restaurant_id)
    all_tables = catalog.list_tables(client, restaurant_id)
    now = services.restaurant_now()

    form = parse_booking(request.GET)
    fitting = services.tables_for_guests(all_tables, form.guests)
    opening, slots = load_slots(client, restaurant, form, fitting, now)

    context = booking_context(
        form, restaurant, all_tables, opening, slots, services.booking_window(now)
    )
    return render(request, "reservations/partials/slot_list.html", context)


@role_required(Role.USER)
@require_GET
def success(request: HttpRequest) -> HttpResponse:
    """
    GET /reservations/success/
    """
    reservation = request.session.get(LAST_RESERVATION_SESSION_KEY)
    if not reservation:
        return redirect("reservations:my")
    return render(request, "reservations/success.html", {"reservation": reservation})


@role_required(Role.USER)
@require_GET
def my_reservations(request: HttpRequest) -> HttpResponse:
    """
    GET /profile/reservations/

    All of the customer's reservations, newest first, with actions.
    """
    reservations = services.my_reservations(request.backend)  # type: ignore[attr-defined]
    reservations.sort(
        key=lambda r: (r.reservation_date, r.reservation_time), reverse=True
    )
    return render(
        request,
        "reservations/my_reservations.html",
        {"reservations": reservations},
    )


def _change_status(request: HttpRequest, reservation_id: str, action: str) -> HttpResponse:
    client = request.backend  # type: ignore[attr-defined]
    try:
        if action == "confirm":
            services.confirm_reservation(client, reservation_id)
            messages.success(request, _("Reservation confirmed"))
        else:
            services.cancel_reservation(client, reservation_id)
            messages.success(request, _("Reservation cancelled"))
    except BackendAuthError:
        raise
    except BackendError as e:
        messages.error(request, describe_error(e))
    return redirect("reservations:my")


@role_required(Role.USER)
@require_POST
def confirm(request: HttpRequest, reservation_id: str) -> HttpResponse:
    """
    POST /profile/reservations/{reservation_id}/confirm/
    """
    return _change_status(request, reservation_id, "confirm")


@role_required(Role.USER)
@require_POST
def cancel(request: HttpRequest, reservation_id: str) -> HttpResponse:
    """
    POST /profile/reservations/{reservation_id}/cancel/
    """
    return _change_status(request, reservation_id, "cancel")


@require_GET
def active_badge(request: HttpRequest) -> HttpResponse:
    """
    GET /reservations/badge/

    Header badge with the number of active reservations (HTMX poll).
    """
    user = request.backend_user  # type: ignore[attr-defined]
    count = 0
    if user is not None and user.role == Role.USER:
        try:
            active = services.my_active_reservations(request.backend)  # type: ignore[attr-defined]
        except BackendError:
            active = []
        count = sum(1 for r in active if r.reservation_status in ACTIVE_STATUSES)
    return render(request, "reservations/partials/badge.html", {"count": count})
