"""Backend health and database maintenance schemas."""

from pydantic import BaseModel


class HealthStatus(BaseModel):
    status: str
    timestamp: str | None = None
    service: str | None = None

    @property
    def is_ok(self) -> bool:
        return self.status.lower() in ("ok", "healthy", "up")


class DatabaseHealth(BaseModel):
    status: str
    database: str | None = None
    connected: bool = False


class DatabaseInfo(BaseModel):
    """Connection details as reported by /health/db/info or /database/info."""

    version: str | None = None
    host: str | None = None
    port: str | int | None = None
    database: str | None = None
    user: str | None = None
    connection_status: str | None = None


class DatabaseDump(BaseModel):
    """Result of POST /database/dump."""

    success: bool
    message: str = ""
    filePath: str | None = None
    fileName: str | None = None
