"""
Post-commit event publishing.
"""

import logging
from collections.abc import Iterable

from clinic_booking.core.domain import DomainEvent

from .ports.notification_emitter import INotificationEmitter

logger = logging.getLogger(__name__)


async def publish_events(emitter: INotificationEmitter, room: str, events: Iterable[DomainEvent]) -> None:
    """Publish events to one room in order. Call only after the transaction committed."""
    for event in events:
        logger.debug(f"Publishing {event.event_name} to {room}")
        await emitter.publish(room, event.event_name, event.to_dict())
