"""
Application lifecycle management using the FastAPI lifespan pattern.

Opens the notification backend on startup and releases it, together with
the database engine, on shutdown.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from clinic_booking.config.settings import Settings, get_settings
from clinic_booking.database.async_db import check_database_connection, dispose_engine
from clinic_booking.domains.scheduling.application.ports import INotificationEmitter
from clinic_booking.domains.scheduling.infrastructure.notifications import (
    RedisNotificationEmitter,
    create_notification_emitter,
)

logger = logging.getLogger(__name__)


class LifecycleManager:
    """
    Manages application lifecycle events.

    Handles startup initialization and graceful shutdown.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._emitter: INotificationEmitter | None = None
        self._initialized = False

    async def startup(self, app: FastAPI) -> None:
        """Create the notification emitter and verify the database."""
        if self._initialized:
            logger.warning("Lifecycle already initialized, skipping startup")
            return

        logger.info("Starting application lifecycle...")

        emitter = create_notification_emitter(self._settings)
        if isinstance(emitter, RedisNotificationEmitter):
            await emitter.connect()
        self._emitter = emitter
        app.state.notification_emitter = emitter
        logger.info(f"Notification backend: {self._settings.NOTIFICATIONS_BACKEND}")

        if not await check_database_connection():
            logger.warning("Database not reachable at startup; requests will fail until it is")

        self._initialized = True
        logger.info("Application lifecycle startup completed")

    async def shutdown(self) -> None:
        """Close the notification emitter and dispose the engine."""
        if not self._initialized:
            logger.warning("Lifecycle not initialized, skipping shutdown")
            return

        logger.info("Stopping application lifecycle...")

        if self._emitter is not None:
            await self._emitter.close()
            self._emitter = None
        await dispose_engine()

        self._initialized = False
        logger.info("Application lifecycle shutdown completed")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Usage:
        app = FastAPI(lifespan=lifespan)
    """
    lifecycle = LifecycleManager()

    await lifecycle.startup(app)

    yield

    await lifecycle.shutdown()
