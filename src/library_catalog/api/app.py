"""FastAPI application factory for the Library Catalog service."""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI

from ..config import get_config
from ..database.session import DatabaseManager, get_db_manager
from ..observability import initialize_observability
from .errors import register_exception_handlers
from .routers import build_routers

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Log to stderr at the configured level."""
    logging.basicConfig(
        level=get_config().effective_log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def create_app(db_manager: DatabaseManager | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        db_manager: Database to serve; defaults to the global manager

    The schema is created on startup if it does not exist yet.
    """
    config = get_config()
    db_manager = db_manager or get_db_manager()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        initialize_observability()
        db_manager.init_database()
        logger.info("%s %s started", config.app_name, config.app_version)
        yield
        logger.info("%s shutting down", config.app_name)

    app = FastAPI(
        title="Library Catalog",
        version=config.app_version,
        debug=config.debug,
        lifespan=lifespan,
    )
    app.state.db_manager = db_manager

    register_exception_handlers(app)
    for router in build_routers():
        app.include_router(router, prefix="/api")

    return app
