"""
Base Domain Event Classes

Domain Events represent significant business occurrences. In this service they
are recorded by aggregates and fanned out to notification rooms once the
surrounding unit of work has committed.
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from enum import Enum
from typing import Any, ClassVar
from uuid import UUID, uuid4


@dataclass(frozen=True)
class DomainEvent(ABC):
    """
    Base class for all domain events.

    Domain events are immutable records of something that happened
    in the domain. ``event_name`` is the wire name subscribers listen for.

    Example:
        ```python
        @dataclass(frozen=True)
        class AppointmentCreated(DomainEvent):
            event_name: ClassVar[str] = "appointment_created"
            appointment_id: int = 0
        ```
    """

    event_name: ClassVar[str] = "domain_event"

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def event_type(self) -> str:
        """Get the event type name (class name)."""
        return self.__class__.__name__

    def to_dict(self) -> dict[str, Any]:
        """Convert event to dictionary for serialization."""
        result: dict[str, Any] = {
            "event_id": str(self.event_id),
            "event_type": self.event_type,
            "occurred_at": self.occurred_at.isoformat(),
        }
        for key, value in self.__dict__.items():
            if key in result:
                continue
            if isinstance(value, (datetime, date)):
                result[key] = value.isoformat()
            elif isinstance(value, UUID):
                result[key] = str(value)
            elif isinstance(value, Enum):
                result[key] = value.value
            else:
                result[key] = value
        return result
