"""
Chat Messages Use Case

Messages between a patient and a doctor, pushed to their shared room.
"""

import logging

from clinic_booking.core.domain import ValidationException
from clinic_booking.domains.scheduling.application.events import publish_events
from clinic_booking.domains.scheduling.application.ports import (
    IChatRepository,
    INotificationEmitter,
    IUnitOfWork,
    room_key,
)
from clinic_booking.domains.scheduling.domain.entities import ChatMessage
from clinic_booking.domains.scheduling.domain.events import MessageReceived
from clinic_booking.domains.scheduling.domain.value_objects import MessageSender

logger = logging.getLogger(__name__)


class ChatMessagesUseCase:
    def __init__(
        self,
        unit_of_work: IUnitOfWork,
        chat_repository: IChatRepository,
        notification_emitter: INotificationEmitter,
    ):
        self.uow = unit_of_work
        self.chat_repo = chat_repository
        self.emitter = notification_emitter

    async def send_message(self, patient_id: int, doctor_id: int, sender: str, content: str) -> ChatMessage:
        """
        Store a message and publish ``receive_message`` to the pair's room.

        Raises:
            ValidationException: unknown sender or empty content
        """
        try:
            sender_type = MessageSender.from_string(sender)
        except ValueError as e:
            raise ValidationException("Sender must be DOCTOR or PATIENT", field="sender") from e
        if not content or not content.strip():
            raise ValidationException("Message content is required", field="content")

        async with self.uow.transaction():
            message = await self.chat_repo.add(
                ChatMessage(patient_id=patient_id, doctor_id=doctor_id, sender=sender_type, content=content)
            )

        event = MessageReceived(
            message_id=message.id or 0,
            patient_id=patient_id,
            doctor_id=doctor_id,
            sender=sender_type.value,
            content=content,
        )
        await publish_events(self.emitter, room_key(patient_id, doctor_id), [event])
        logger.debug(f"Message {message.id} stored for patient {patient_id} / doctor {doctor_id}")
        return message

    async def list_messages(self, patient_id: int, doctor_id: int) -> list[ChatMessage]:
        return await self.chat_repo.list_for_pair(patient_id, doctor_id)
