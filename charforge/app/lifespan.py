"""Application lifecycle management for CharForge.

Startup builds and initializes the ApplicationContainer and attaches it to
app.state; shutdown releases its resources.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from ..container import ApplicationContainer
from ..structured_logging.enhanced_logging_config import get_logger, log_exception_once

logger = get_logger("charforge.lifespan")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    The container is created here rather than at import time so tests can
    build an app without touching the database or the catalog.
    """
    logger.info("Starting CharForge with ApplicationContainer...")

    container = ApplicationContainer()
    try:
        await container.initialize()
    except Exception as error:
        log_exception_once(logger, "error", "CharForge startup failed", exc=error, lifespan_phase="startup")
        await container.shutdown()
        raise

    ApplicationContainer.set_instance(container)
    app.state.container = container
    logger.info("CharForge started successfully")

    try:
        yield
    finally:
        logger.info("Shutting down CharForge...")
        await container.shutdown()
        ApplicationContainer.reset_instance()
        logger.info("CharForge shutdown complete")
