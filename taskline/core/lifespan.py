"""Application lifespan: startup and shutdown wiring only."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from taskline.core.config import get_settings
from taskline.infrastructure.persistence.database import dispose_engine
from taskline.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging on startup; dispose the SQL engine on shutdown."""
    settings = get_settings()
    setup_logging()
    logger.info("%s %s starting", settings.app_name, settings.app_version)

    yield

    await dispose_engine()
    logger.info("%s stopped", settings.app_name)
