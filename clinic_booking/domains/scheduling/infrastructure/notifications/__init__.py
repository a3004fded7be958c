from clinic_booking.config.settings import Settings

from .in_memory_emitter import InMemoryNotificationEmitter, RoomEvent
from .redis_emitter import RedisNotificationEmitter


def create_notification_emitter(settings: Settings) -> RedisNotificationEmitter | InMemoryNotificationEmitter:
    """Pick the fan-out backend configured by NOTIFICATIONS_BACKEND."""
    if settings.NOTIFICATIONS_BACKEND == "memory":
        return InMemoryNotificationEmitter()
    return RedisNotificationEmitter(settings)


__all__ = [
    "InMemoryNotificationEmitter",
    "RedisNotificationEmitter",
    "RoomEvent",
    "create_notification_emitter",
]
