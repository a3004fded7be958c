"""
Chat Repository Implementation
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_booking.domains.scheduling.application.ports import IChatRepository
from clinic_booking.domains.scheduling.domain.entities import ChatMessage
from clinic_booking.domains.scheduling.domain.value_objects import MessageSender
from clinic_booking.domains.scheduling.infrastructure.persistence.sqlalchemy.models import ChatMessageModel

from .errors import flush_or_raise


class SQLAlchemyChatRepository(IChatRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, message: ChatMessage) -> ChatMessage:
        model = ChatMessageModel(
            patient_id=message.patient_id,
            doctor_id=message.doctor_id,
            sender=message.sender,
            content=message.content,
        )
        self.session.add(model)
        await flush_or_raise(self.session, "create chat message")
        return self._to_entity(model)

    async def list_for_pair(self, patient_id: int, doctor_id: int) -> list[ChatMessage]:
        result = await self.session.execute(
            select(ChatMessageModel)
            .where(ChatMessageModel.patient_id == patient_id, ChatMessageModel.doctor_id == doctor_id)
            .order_by(ChatMessageModel.created_at, ChatMessageModel.message_id)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    def _to_entity(self, model: ChatMessageModel) -> ChatMessage:
        return ChatMessage(
            id=model.message_id,
            patient_id=model.patient_id,
            doctor_id=model.doctor_id,
            sender=MessageSender(model.sender),
            content=model.content,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
