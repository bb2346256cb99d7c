"""
Realtime WebSocket endpoint.

Connections are accepted unauthenticated; the client must send an
``authenticate`` event carrying the token from /api/login before anything else.
"""

from fastapi import APIRouter, WebSocket, status

from ..realtime.websocket_handler import handle_websocket_connection
from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)

realtime_router = APIRouter(tags=["realtime"])


@realtime_router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    """Serve one realtime connection."""
    container = getattr(websocket.app.state, "container", None)
    if container is None or not container.is_initialized:
        logger.warning("WebSocket refused, container not ready")
        await websocket.close(code=status.WS_1013_TRY_AGAIN_LATER)
        return

    await handle_websocket_connection(
        websocket,
        registry=container.registry,
        router=container.router,
        validator=container.validator,
        counters=container.counters,
        store=container.store,
    )
