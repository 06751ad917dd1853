"""Health status model for the data layer."""

from pydantic import BaseModel, ConfigDict


class HealthStatus(BaseModel):
    """Snapshot of storage availability."""

    model_config = ConfigDict(frozen=True)

    status: str
    provider: str
    schema_ready: bool
    database_available: bool
