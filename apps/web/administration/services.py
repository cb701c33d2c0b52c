"""
Administration services - backend health, database maintenance, user
accounts and the audit log.
"""

import json
import logging
from typing import Any

from django.http import QueryDict
from django.utils.translation import gettext as _

from supra_schemas import (
    DEFAULT_ROLE_ID,
    ROLE_IDS,
    AuditFilter,
    AuditLog,
    AuditOperation,
    AuditStatistics,
    DatabaseDump,
    DatabaseHealth,
    DatabaseInfo,
    HealthStatus,
    Role,
    UserCreate,
    UserSummary,
    UserUpdate,
)

from apps.web.backend import BackendClient, BackendError, unwrap_list
from apps.web.core.query import query_choice, query_int, query_str
from apps.web.core.validation import (
    REGISTER_PHONE_RE,
    FormErrors,
    is_valid_email,
    password_problem,
    require_length,
)

logger = logging.getLogger(__name__)

RECENT_AUDIT_LIMIT = 50
DEFAULT_RECENT_CHANGE_DAYS = 7

USER_FORM_FIELDS = ("username", "email", "first_name", "last_name", "phone", "password")


# =============================================================================
# Health and database
# =============================================================================


def backend_health(client: BackendClient) -> dict[str, Any]:
    """
    API, database and connection checks for the dashboard.

    Each check fails on its own; a failed one is reported as None with the
    error text alongside.
    """
    checks: dict[str, Any] = {}
    for name, path, schema in (
        ("api", "/health", HealthStatus),
        ("database", "/health/db", DatabaseHealth),
        ("connection", "/health/db/info", DatabaseInfo),
        ("database_info", "/database/info", DatabaseInfo),
    ):
        try:
            checks[name] = schema.model_validate(client.get(path) or {})
            checks[f"{name}_error"] = None
        except BackendError as e:
            logger.warning("Health check %s failed: %s", path, e.message)
            checks[name] = None
            checks[f"{name}_error"] = e.message or _("Unavailable")
    return checks


def create_dump(client: BackendClient) -> DatabaseDump:
    dump = DatabaseDump.model_validate(client.post("/database/dump") or {"success": False})
    logger.info("Database dump requested: success=%s file=%s", dump.success, dump.fileName)
    return dump


# =============================================================================
# Users
# =============================================================================


def role_for_id(role_id: int) -> Role:
    return next((role for role, rid in ROLE_IDS.items() if rid == role_id), Role.USER)


def list_users(client: BackendClient, role: Role | None = None) -> list[UserSummary]:
    users = [UserSummary.model_validate(u) for u in unwrap_list(client.get("/auth/users"))]
    if role is not None:
        users = [u for u in users if u.role == role]
    return sorted(users, key=lambda u: u.username.lower())


def get_user(client: BackendClient, user_id: str) -> UserSummary | None:
    return next((u for u in list_users(client) if u.user_id == user_id), None)


def user_form_from_post(data: QueryDict) -> dict[str, Any]:
    form: dict[str, Any] = {field: data.get(field, "").strip() for field in USER_FORM_FIELDS}
    role_id = query_int(data, "role_id")
    form["role_id"] = role_id if role_id in ROLE_IDS.values() else DEFAULT_ROLE_ID
    return form


def user_form_from_user(user: UserSummary) -> dict[str, Any]:
    return {
        "username": user.username,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "phone": user.phone or "",
        "password": "",
        "role_id": user.role_id,
    }


def validate_user_form(form: dict[str, Any], creating: bool) -> FormErrors:
    """Account editor checks; the password is optional when editing."""
    errors: FormErrors = {}
    require_length(errors, "username", form["username"], 3, 50, label=_("Username"))
    if not form["email"]:
        errors["email"] = _("Enter an email")
    elif not is_valid_email(form["email"]):
        errors["email"] = _("Enter a valid email address")
    require_length(errors, "first_name", form["first_name"], 2, 50, label=_("First name"))
    require_length(errors, "last_name", form["last_name"], 2, 50, label=_("Last name"))
    if form["phone"] and not REGISTER_PHONE_RE.match(form["phone"]):
        errors["phone"] = _("Phone must be in international format, e.g. +995555123456")
    if form["password"] or creating:
        problem = password_problem(form["password"]) if form["password"] else _("Enter a password")
        if problem:
            errors["password"] = problem
    return errors


def user_changes(user: UserSummary, form: dict[str, Any]) -> UserUpdate:
    """Fields that differ from the stored account; a blank password is left as is."""
    current = user_form_from_user(user)
    changes = {
        field: form[field]
        for field in ("username", "email", "first_name", "last_name", "phone", "role_id")
        if form[field] != current[field]
    }
    if form["password"]:
        changes["password"] = form["password"]
    return UserUpdate(**changes)


def create_user(client: BackendClient, form: dict[str, Any]) -> UserSummary:
    body = UserCreate(
        username=form["username"],
        email=form["email"],
        password=form["password"],
        first_name=form["first_name"],
        last_name=form["last_name"],
        phone=form["phone"] or None,
        role_id=form["role_id"],
    )
    payload = client.post("/auth/users", json=body.model_dump(mode="json", exclude_none=True))
    if isinstance(payload, dict) and "user" in payload:
        payload = payload["user"]
    user = UserSummary.model_validate(payload)
    logger.info("User %s created with role %s", user.username, role_for_id(body.role_id).value)
    return user


def update_user(client: BackendClient, user_id: str, data: UserUpdate) -> None:
    changes = data.model_dump(mode="json", exclude_unset=True)
    if not changes:
        return
    client.put(f"/auth/users/{user_id}", json=changes)
    logger.info(
        "User %s updated: %s",
        user_id,
        ", ".join(sorted(key for key in changes if key != "password")) or "password",
    )


def delete_user(client: BackendClient, user_id: str) -> None:
    client.delete(f"/auth/users/{user_id}")
    logger.info("User %s deleted", user_id)


# =============================================================================
# Audit
# =============================================================================


def audit_filter_from_query(data: QueryDict) -> AuditFilter:
    return AuditFilter(
        table=query_str(data, "table"),
        operation=query_choice(data, "operation", AuditOperation),
        user=query_str(data, "user"),
        recordId=query_str(data, "record_id"),
        limit=query_int(data, "limit", minimum=1, maximum=1000) or 100,
    )


def _logs(payload: Any) -> list[AuditLog]:
    return [AuditLog.model_validate(row) for row in unwrap_list(payload)]


def audit_logs(client: BackendClient, filters: AuditFilter) -> list[AuditLog]:
    return _logs(client.get("/audit", params=filters.model_dump(mode="json", exclude_none=True)))


def recent_audit_logs(client: BackendClient, limit: int = RECENT_AUDIT_LIMIT) -> list[AuditLog]:
    return _logs(client.get("/audit/recent", params={"limit": limit}))


def audit_statistics(client: BackendClient) -> AuditStatistics:
    return AuditStatistics.model_validate(client.get("/audit/statistics") or {})


def record_history(client: BackendClient, table: str, record_id: str) -> list[AuditLog]:
    return _logs(client.get("/audit/history", params={"table": table, "recordId": record_id}))


def recent_changes(client: BackendClient, days: int = DEFAULT_RECENT_CHANGE_DAYS) -> list[AuditLog]:
    return _logs(client.get("/audit/recent-changes", params={"days": days}))


def user_activity(client: BackendClient, username: str, limit: int = RECENT_AUDIT_LIMIT) -> list[AuditLog]:
    return _logs(client.get("/audit/user-activity", params={"username": username, "limit": limit}))


def pretty_json(values: dict[str, Any] | None) -> str:
    if values is None:
        return ""
    return json.dumps(values, indent=2, ensure_ascii=False, sort_keys=True, default=str)


def audit_rows(logs: list[AuditLog]) -> list[dict[str, Any]]:
    """Display rows: pretty old/new values and the keys an UPDATE changed."""
    return [
        {
            "log": log,
            "old_json": pretty_json(log.old_values),
            "new_json": pretty_json(log.new_values),
            "changed": log.changed_keys(),
        }
        for log in logs
    ]
