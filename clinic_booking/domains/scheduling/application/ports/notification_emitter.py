"""
Notification Emitter Port

Fan-out of booking, status and chat events to patient/doctor rooms.
"""

from typing import Any, Protocol, runtime_checkable


def room_key(patient_id: int, doctor_id: int) -> str:
    """Room shared by one patient and one doctor."""
    return f"chat_patient_{patient_id}_doctor_{doctor_id}"


@runtime_checkable
class INotificationEmitter(Protocol):
    """
    Best-effort publisher.

    Having no subscribers is not an error, and implementations log publish
    failures instead of raising them. Events published to one room from one
    task are delivered in call order.
    """

    async def publish(self, room: str, event_name: str, payload: dict[str, Any]) -> None:
        ...

    async def close(self) -> None:
        """Release transport resources."""
        ...
