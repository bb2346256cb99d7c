"""Response models for the health and monitoring endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    """Liveness probe body."""

    status: str = Field(..., description="'healthy' once the container is initialized")
    timestamp: str = Field(..., description="Server time, ISO 8601 UTC")
    online_users: int = Field(default=0, description="Distinct authenticated identities")


class MonitoringResponse(BaseModel):
    """Process counters, keyed the way the realtime ``monitoring_data`` event keys them."""

    model_config = ConfigDict(populate_by_name=True)

    active_connections: int = Field(..., alias="activeConnections")
    total_connections: int = Field(..., alias="totalConnections")
    messages_count: int = Field(..., alias="messagesCount")
