"""
In-memory Notification Emitter

Room registry of asyncio queues for single-process deployments and tests.
"""

import asyncio
import logging
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Any

from clinic_booking.domains.scheduling.application.ports import INotificationEmitter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoomEvent:
    room: str
    event_name: str
    payload: dict[str, Any]


class InMemoryNotificationEmitter(INotificationEmitter):
    """
    Publishes to every queue subscribed to a room.

    ``published`` keeps the most recent ``history_size`` events.
    """

    def __init__(self, max_queue_size: int = 100, history_size: int = 1000):
        self.max_queue_size = max_queue_size
        self.published: deque[RoomEvent] = deque(maxlen=history_size)
        self._rooms: dict[str, set[asyncio.Queue[RoomEvent]]] = defaultdict(set)

    def subscribe(self, room: str) -> asyncio.Queue[RoomEvent]:
        queue: asyncio.Queue[RoomEvent] = asyncio.Queue(maxsize=self.max_queue_size)
        self._rooms[room].add(queue)
        return queue

    def unsubscribe(self, room: str, queue: asyncio.Queue[RoomEvent]) -> None:
        subscribers = self._rooms.get(room)
        if subscribers is None:
            return
        subscribers.discard(queue)
        if not subscribers:
            del self._rooms[room]

    async def publish(self, room: str, event_name: str, payload: dict[str, Any]) -> None:
        event = RoomEvent(room=room, event_name=event_name, payload=payload)
        self.published.append(event)
        for queue in list(self._rooms.get(room, ())):
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                logger.warning(f"Subscriber queue full in {room}, dropping {event_name}")

    def events_for(self, room: str) -> list[RoomEvent]:
        return [e for e in self.published if e.room == room]

    async def close(self) -> None:
        self._rooms.clear()
