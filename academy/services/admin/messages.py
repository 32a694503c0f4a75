import uuid
from datetime import timedelta

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.settings import settings
from academy.db.models.database import StudentMessage, User
from academy.db.session import get_session
from academy.libs.formats.datetime import now as get_now
from academy.schemas.admin.message import CreateMessage


def message_out(message: StudentMessage) -> dict:
    return {
        "id": str(message.id),
        "message": message.message,
        "target_curriculum": message.target_curriculum,
        "target_level": message.target_level,
        "target_language": message.target_language,
        "target_grade": message.target_grade,
        "is_active": message.is_active,
        "created_by": str(message.created_by) if message.created_by else None,
        "created_at": message.created_at,
    }


class MessageService:
    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    async def list_messages_async(self):
        messages = await self.db.scalars(
            select(StudentMessage).order_by(StudentMessage.created_at.desc())
        )
        return [message_out(m) for m in messages]

    async def create_message_async(self, schema: CreateMessage, staff: User):
        try:
            data = {
                field: (value.strip() or None) if isinstance(value, str) else value
                for field, value in schema.model_dump().items()
            }
            message = StudentMessage(**data, created_by=staff.id, is_active=True)
            self.db.add(message)
            await self.db.commit()
            await self.db.refresh(message)
            logger.info(f"📣 Message {message.id} posted by {staff.id}")
            return message_out(message)
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while creating message: {e}")

    async def delete_message_async(self, message_id: uuid.UUID):
        message = await self.db.get(StudentMessage, message_id)
        if not message:
            raise HTTPException(404, "Message not found")
        try:
            await self.db.delete(message)
            await self.db.commit()
            return {"message": "Message deleted"}
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while deleting message: {e}")

    async def deactivate_expired_async(self) -> int:
        cutoff = get_now() - timedelta(hours=settings.MESSAGE_TTL_HOURS)
        result = await self.db.execute(
            update(StudentMessage)
            .where(StudentMessage.is_active.is_(True), StudentMessage.created_at < cutoff)
            .values(is_active=False)
        )
        await self.db.commit()
        return result.rowcount or 0
