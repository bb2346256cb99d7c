"""
FastAPI application factory for the ChatBoard server.

This module handles app creation, middleware configuration, error handler
registration and router inclusion.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..api.auth import auth_router
from ..api.monitoring import monitoring_router
from ..api.real_time import realtime_router
from ..config import get_config
from ..config.models import AppConfig
from ..error_handlers import register_error_handlers
from ..persistence.protocols import ChatStoreProtocol
from ..structured_logging.enhanced_logging_config import get_logger, setup_logging
from .lifespan import lifespan

logger = get_logger(__name__)


def create_app(config: AppConfig | None = None, store: ChatStoreProtocol | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Configuration to use instead of the cached environment config
        store: Store to use instead of the SQLAlchemy one built from config

    Returns:
        FastAPI: The configured application
    """
    config = config or get_config()
    setup_logging(config.logging.environment, config.logging.level, config.logging.format)

    app = FastAPI(
        title="ChatBoard API",
        description="Real-time chat and shared kanban board",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.store_override = store

    origins = config.cors.origins or ["*"]
    # Browsers reject credentialed responses with a wildcard origin
    allow_credentials = origins != ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=allow_credentials,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    logger.info("CORS configuration", allow_origins=origins, allow_credentials=allow_credentials)

    register_error_handlers(app)

    app.include_router(auth_router)
    app.include_router(monitoring_router)
    app.include_router(realtime_router)

    return app
