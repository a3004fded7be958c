"""
Redis Notification Emitter

Publishes room events on Redis pub/sub channels named after the room key.
Socket gateways subscribe to ``chat_patient_*`` and relay to clients.
"""

import asyncio
import json
import logging
from typing import Any

import redis.asyncio as aioredis

from clinic_booking.config.settings import Settings, get_settings
from clinic_booking.domains.scheduling.application.ports import INotificationEmitter

logger = logging.getLogger(__name__)


class RedisNotificationEmitter(INotificationEmitter):
    """
    Best-effort publisher on Redis pub/sub.

    Usage:
        emitter = RedisNotificationEmitter()
        await emitter.connect()
        await emitter.publish("chat_patient_1_doctor_2", "appointment_created", {...})
    """

    def __init__(self, settings: Settings | None = None, client: aioredis.Redis | None = None):
        self.settings = settings or get_settings()
        self._redis_client: aioredis.Redis | None = client

    async def connect(self, max_retries: int = 3, retry_delay: float = 1.0) -> None:
        """Initialize the Redis connection with retries. Failure leaves publishing disabled."""
        retries = 0
        last_error: Exception | None = None

        while retries < max_retries:
            try:
                client = aioredis.Redis(
                    host=self.settings.REDIS_HOST,
                    port=self.settings.REDIS_PORT,
                    db=self.settings.REDIS_DB,
                    password=self.settings.REDIS_PASSWORD,
                    decode_responses=True,
                    socket_timeout=5.0,
                    socket_connect_timeout=5.0,
                )
                await client.ping()
                self._redis_client = client
                logger.info(
                    f"Notification Redis connection established: "
                    f"{self.settings.REDIS_HOST}:{self.settings.REDIS_PORT}"
                )
                return
            except (aioredis.ConnectionError, aioredis.TimeoutError) as e:
                retries += 1
                last_error = e
                logger.warning(f"Notification Redis connection attempt {retries}/{max_retries} failed: {e}")
                if retries < max_retries:
                    await asyncio.sleep(retry_delay)

        logger.error(
            f"Could not connect notification Redis after {max_retries} attempts: {last_error}. "
            f"Events will be dropped."
        )

    async def publish(self, room: str, event_name: str, payload: dict[str, Any]) -> None:
        if self._redis_client is None:
            logger.debug(f"Redis not connected, dropping {event_name} for {room}")
            return

        message = json.dumps({"event": event_name, "room": room, "payload": payload}, default=str)
        try:
            receivers = await self._redis_client.publish(room, message)
            logger.debug(f"Published {event_name} to {room} ({receivers} subscribers)")
        except aioredis.RedisError as e:
            logger.error(f"Failed to publish {event_name} to {room}: {e}")

    async def close(self) -> None:
        if self._redis_client is not None:
            await self._redis_client.aclose()
            self._redis_client = None
            logger.info("Notification Redis connection closed")
