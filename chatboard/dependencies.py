"""
Dependency injection providers for ChatBoard endpoints.

Endpoints reach services through the ApplicationContainer stored on
``app.state`` rather than through module globals.
"""

from fastapi import Depends, Request

from .auth.accounts import AccountService
from .container import ApplicationContainer
from .realtime.monitoring import MonitoringCounters


def get_container(request: Request) -> ApplicationContainer:
    """
    Get the application container from request state.

    Raises:
        RuntimeError: If the lifespan has not installed a container
    """
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise RuntimeError("ApplicationContainer not found in app.state - ensure the lifespan has run")
    return container


def get_account_service(container: ApplicationContainer = Depends(get_container)) -> AccountService:
    if container.accounts is None:
        raise RuntimeError("AccountService not initialized")
    return container.accounts


def get_monitoring_counters(container: ApplicationContainer = Depends(get_container)) -> MonitoringCounters:
    if container.counters is None:
        raise RuntimeError("MonitoringCounters not initialized")
    return container.counters


AccountServiceDep = Depends(get_account_service)
MonitoringCountersDep = Depends(get_monitoring_counters)
