"""
Administration views - system health, user accounts and the audit trail.
"""

from django.contrib import messages
from django.http import Http404, HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.utils.translation import gettext as _
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from supra_schemas import ROLE_IDS, AuditOperation, Role

from apps.web.backend import BackendAuthError, BackendError, ErrorContext, describe_error
from apps.web.core.decorators import role_required
from apps.web.core.query import query_int, query_str
from apps.web.core.roles import ROLE_LABELS

from . import services

admin_required = role_required(Role.ADMIN)

ROLE_CHOICES = [(role_id, ROLE_LABELS[role]) for role, role_id in ROLE_IDS.items()]


@admin_required
@require_GET
def dashboard(request: HttpRequest) -> HttpResponse:
    """
    GET /admin-panel/

    Backend and database health with the dump button.
    """
    checks = services.backend_health(request.backend)  # type: ignore[attr-defined]
    return render(request, "administration/dashboard.html", {"checks": checks})


@admin_required
@require_POST
def database_dump(request: HttpRequest) -> HttpResponse:
    """
    POST /admin-panel/database/dump/
    """
    try:
        dump = services.create_dump(request.backend)  # type: ignore[attr-defined]
    except BackendAuthError:
        raise
    except BackendError as e:
        messages.error(request, describe_error(e, default=_("Database dump failed")))
    else:
        if dump.success:
            messages.success(
                request,
                _("Dump created: %(file)s") % {"file": dump.fileName or dump.filePath or ""},
            )
        else:
            messages.error(request, dump.message or _("Database dump failed"))
    return redirect("administration:dashboard")


# =============================================================================
# Users
# =============================================================================


@admin_required
@require_GET
def user_list(request: HttpRequest) -> HttpResponse:
    """
    GET /admin-panel/users/?q=
    """
    users = services.list_users(request.backend)  # type: ignore[attr-defined]
    search = (query_str(request.GET, "q") or "").lower()
    if search:
        users = [
            u
            for u in users
            if search in u.username.lower()
            or search in u.email.lower()
            or search in f"{u.first_name} {u.last_name}".lower()
        ]
    return render(
        request,
        "administration/users.html",
        {"users": users, "search": search, "role_labels": ROLE_LABELS},
    )


def _user_form_page(request, form, user, errors, field_errors) -> HttpResponse:
    return render(
        request,
        "administration/user_form.html",
        {
            "form": form,
            "user": user,
            "role_choices": ROLE_CHOICES,
            "errors": errors,
            "field_errors": field_errors,
        },
    )


@admin_required
@require_http_methods(["GET", "POST"])
def user_create(request: HttpRequest) -> HttpResponse:
    """
    GET/POST /admin-panel/users/new/
    """
    form = services.user_form_from_post(request.POST)
    errors: list[str] = []
    field_errors: dict[str, str] = {}

    if request.method == "POST":
        field_errors = services.validate_user_form(form, creating=True)
        if not field_errors:
            try:
                user = services.create_user(request.backend, form)  # type: ignore[attr-defined]
            except BackendAuthError:
                raise
            except BackendError as e:
                errors.append(describe_error(e, ErrorContext.REGISTER))
            else:
                messages.success(request, _("User %(name)s created") % {"name": user.username})
                return redirect("administration:users")

    return _user_form_page(request, form, None, errors, field_errors)


@admin_required
@require_http_methods(["GET", "POST"])
def user_edit(request: HttpRequest, user_id: str) -> HttpResponse:
    """
    GET/POST /admin-panel/users/{user_id}/edit/

    Only changed fields are sent; a blank password keeps the current one.
    """
    client = request.backend  # type: ignore[attr-defined]
    user = services.get_user(client, user_id)
    if user is None:
        raise Http404(_("User not found"))

    form = services.user_form_from_user(user)
    errors: list[str] = []
    field_errors: dict[str, str] = {}

    if request.method == "POST":
        form = services.user_form_from_post(request.POST)
        field_errors = services.validate_user_form(form, creating=False)
        if not field_errors:
            try:
                services.update_user(client, user_id, services.user_changes(user, form))
            except BackendAuthError:
                raise
            except BackendError as e:
                errors.append(describe_error(e, ErrorContext.REGISTER))
            else:
                messages.success(request, _("User %(name)s saved") % {"name": form["username"]})
                return redirect("administration:users")

    return _user_form_page(request, form, user, errors, field_errors)


@admin_required
@require_POST
def user_delete(request: HttpRequest, user_id: str) -> HttpResponse:
    """
    POST /admin-panel/users/{user_id}/delete/
    """
    current = request.backend_user  # type: ignore[attr-defined]
    if current.user_id == user_id:
        messages.error(request, _("You cannot delete your own account"))
        return redirect("administration:users")

    try:
        services.delete_user(request.backend, user_id)  # type: ignore[attr-defined]
    except BackendAuthError:
        raise
    except BackendError as e:
        messages.error(request, describe_error(e))
    else:
        messages.success(request, _("User deleted"))
    return redirect("administration:users")


# =============================================================================
# Audit
# =============================================================================


@admin_required
@require_GET
def audit(request: HttpRequest) -> HttpResponse:
    """
    GET /admin-panel/audit/?view=&table=&operation=&user=&record_id=&limit=&days=

    Views: filtered log (default), recent entries, statistics, one record's
    history, recent changes and one user's activity.
    """
    client = request.backend  # type: ignore[attr-defined]
    view = request.GET.get("view", "log")
    filters = services.audit_filter_from_query(request.GET)
    days = query_int(request.GET, "days", minimum=1, maximum=365) or services.DEFAULT_RECENT_CHANGE_DAYS
    statistics = None
    logs = []
    notice = ""

    if view == "recent":
        logs = services.recent_audit_logs(client, filters.limit or services.RECENT_AUDIT_LIMIT)
    elif view == "statistics":
        statistics = services.audit_statistics(client)
    elif view == "history":
        if filters.table and filters.recordId:
            logs = services.record_history(client, filters.table, filters.recordId)
        else:
            notice = _("Enter a table and a record id to see its history")
    elif view == "changes":
        logs = services.recent_changes(client, days)
    elif view == "activity":
        if filters.user:
            logs = services.user_activity(client, filters.user, filters.limit or services.RECENT_AUDIT_LIMIT)
        else:
            notice = _("Enter a username to see their activity")
    else:
        view = "log"
        logs = services.audit_logs(client, filters)

    return render(
        request,
        "administration/audit.html",
        {
            "view": view,
            "filters": filters,
            "days": days,
            "operations": list(AuditOperation),
            "rows": services.audit_rows(logs),
            "statistics": statistics,
            "notice": notice,
        },
    )
