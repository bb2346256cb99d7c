"""
ChatBoard server entry point.

``chatboard.main:app`` is the ASGI application; running this module starts
uvicorn with the configured host and port.
"""

from .app.factory import create_app
from .config import get_config
from .structured_logging.enhanced_logging_config import get_logger

app = create_app()

logger = get_logger(__name__)


def main() -> None:
    """Run the server under uvicorn."""
    import uvicorn

    config = get_config()
    logger.info("Starting uvicorn", host=config.server.host, port=config.server.port)
    uvicorn.run(
        "chatboard.main:app",
        host=config.server.host,
        port=config.server.port,
        reload=False,
        access_log=True,
        use_colors=False,
    )


if __name__ == "__main__":
    main()
