"""Application lifecycle management for the ChatBoard server."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from ..container import ApplicationContainer
from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Build the ApplicationContainer on startup and tear it down on shutdown.

    A config or store placed on ``app.state`` by create_app() is passed to the
    container, which is how tests swap in a temporary database.
    """
    logger.info("Starting ChatBoard server")

    container = ApplicationContainer(
        config=getattr(app.state, "config", None),
        store=getattr(app.state, "store_override", None),
    )
    await container.initialize()
    app.state.container = container

    try:
        yield
    finally:
        await container.shutdown()
        app.state.container = None
        logger.info("ChatBoard server stopped")
