"""Audit log schemas - read-only change history kept by the backend."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, Field


class AuditOperation(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class AuditLog(BaseModel):
    """One row-level change."""

    log_id: int | str = Field(validation_alias=AliasChoices("log_id", "audit_id"))
    table_name: str
    record_id: int | str | None = None
    operation: AuditOperation
    old_values: dict[str, Any] | None = None
    new_values: dict[str, Any] | None = None
    changed_by: str | None = None
    timestamp: datetime | None = Field(
        default=None, validation_alias=AliasChoices("timestamp", "changed_at")
    )

    def changed_keys(self) -> list[str]:
        """Keys whose value differs between old and new (UPDATE rows)."""
        if self.operation != AuditOperation.UPDATE:
            return []
        old = self.old_values or {}
        new = self.new_values or {}
        keys = sorted(set(old) | set(new))
        return [key for key in keys if old.get(key) != new.get(key)]


class AuditFilter(BaseModel):
    """Query parameters for GET /audit."""

    table: str | None = None
    operation: AuditOperation | None = None
    user: str | None = None
    recordId: str | None = None
    limit: int | None = Field(default=100, ge=1, le=1000)


class OperationStat(BaseModel):
    table_name: str
    operation: str
    count: int


class TableStat(BaseModel):
    table_name: str
    total_operations: int
    inserts: int = 0
    updates: int = 0
    deletes: int = 0


class AuditStatistics(BaseModel):
    """Counts per table and operation."""

    operation_stats: list[OperationStat] = Field(
        default_factory=list,
        validation_alias=AliasChoices("operationStats", "operation_stats"),
    )
    table_stats: list[TableStat] = Field(
        default_factory=list,
        validation_alias=AliasChoices("tableStats", "table_stats"),
    )
