"""FastAPI application for the ListArr daemon."""

import asyncio
import contextlib
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from listarr import __version__
from listarr.api import routes
from listarr.config import Config
from listarr.core.commands import run_scheduler
from listarr.services import Services, build_services
from listarr.utils.logger import get_logger

logger = get_logger(__name__)


class AppState:
    """Application state container."""

    def __init__(self, config: Config, services: Services):
        self.config = config
        self.services = services
        self.start_time = time.time()
        self.scheduler_task: Optional[asyncio.Task] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the sync scheduler and close services on shutdown."""
    app_state = app.state.listarr
    config = app_state.config

    logger.info("Starting ListArr daemon", version=__version__)

    if config.sync.interval_minutes > 0:
        app_state.scheduler_task = asyncio.create_task(
            run_scheduler(app_state.services.command_queue, config.sync.interval_minutes)
        )
    else:
        logger.info("Scheduled import list sync disabled")

    yield

    logger.info("Shutting down ListArr daemon")

    if app_state.scheduler_task:
        app_state.scheduler_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await app_state.scheduler_task

    await app_state.services.command_queue.wait_idle()
    await app_state.services.close()
    logger.info("Shutdown complete")


def create_app(config: Config, services: Optional[Services] = None) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        config: Application configuration
        services: Pre-built services (built from config if None)

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="ListArr",
        description="Import list sync for a movie library",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.listarr = AppState(config, services or build_services(config))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Catch all unhandled exceptions."""
        logger.error(
            "Unhandled exception in request handler",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            error_type=type(exc).__name__,
            exc_info=True,
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "status": "error",
                "message": "Internal server error",
            },
        )

    app.include_router(routes.router)

    logger.info(
        "FastAPI application created",
        version=__version__,
        api_port=config.api.port,
        import_lists=len(config.import_lists),
    )

    return app
