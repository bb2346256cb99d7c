"""Health and monitoring endpoints."""

from fastapi import APIRouter, Depends

from ..container import ApplicationContainer
from ..dependencies import MonitoringCountersDep, get_container
from ..realtime.envelope import utc_now_z
from ..realtime.monitoring import MonitoringCounters
from ..schemas.monitoring import HealthResponse, MonitoringResponse

monitoring_router = APIRouter(prefix="/api", tags=["monitoring"])


@monitoring_router.get("/health", response_model=HealthResponse)
async def get_health_status(container: ApplicationContainer = Depends(get_container)) -> HealthResponse:
    """Report whether the server is up and how many identities are online."""
    online = len(container.registry.list_identities()) if container.registry is not None else 0
    return HealthResponse(
        status="healthy" if container.is_initialized else "starting",
        timestamp=utc_now_z(),
        online_users=online,
    )


@monitoring_router.get("/monitoring", response_model=MonitoringResponse)
async def get_monitoring(counters: MonitoringCounters = MonitoringCountersDep) -> MonitoringResponse:
    """Return the same counters the realtime ``get_monitoring`` event returns."""
    return MonitoringResponse.model_validate(counters.snapshot())
