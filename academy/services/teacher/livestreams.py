import uuid

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.enum import STAFF_ROLES
from academy.db.models.database import Course, LiveStream, User
from academy.db.session import get_session
from academy.libs.formats.datetime import to_utc_naive
from academy.schemas.teacher.livestream import CreateLiveStream, UpdateLiveStream
from academy.services.shares.content import ContentService

MIN_DURATION = 1
MAX_DURATION = 600


def livestream_out(stream: LiveStream, with_secrets: bool = True) -> dict:
    data = {
        "id": str(stream.id),
        "course_id": str(stream.course_id),
        "title": stream.title,
        "description": stream.description,
        "scheduled_at": stream.scheduled_at,
        "duration": stream.duration,
        "position": stream.position,
        "is_published": stream.is_published,
        "created_by": str(stream.created_by) if stream.created_by else None,
        "created_at": stream.created_at,
    }
    if with_secrets:
        data.update(
            meeting_url=stream.meeting_url,
            meeting_id=stream.meeting_id,
            meeting_password=stream.meeting_password,
        )
    return data


def check_duration(duration: int | None):
    if duration is None:
        return
    if duration < MIN_DURATION or duration > MAX_DURATION:
        raise HTTPException(
            400, f"Duration must be between {MIN_DURATION} and {MAX_DURATION} minutes"
        )


class TeacherLiveStreamService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        content: ContentService = Depends(ContentService),
    ):
        self.db = db
        self.content = content

    async def _managed_course(self, course_id: uuid.UUID, user: User) -> Course:
        course = await self.content.get_course_or_404(course_id)
        if user.role not in STAFF_ROLES and course.user_id != user.id:
            raise HTTPException(403, "You can only manage live streams of your own courses")
        return course

    async def _get_managed_stream(self, stream_id: uuid.UUID, user: User) -> LiveStream:
        stream = await self.db.get(LiveStream, stream_id)
        if not stream:
            raise HTTPException(404, "Live stream not found")
        await self._managed_course(stream.course_id, user)
        return stream

    async def create_livestream_async(self, schema: CreateLiveStream, user: User):
        check_duration(schema.duration)
        course = await self._managed_course(schema.course_id, user)
        try:
            stream = LiveStream(
                course_id=course.id,
                created_by=user.id,
                title=schema.title,
                description=schema.description,
                meeting_url=schema.meeting_url,
                meeting_id=schema.meeting_id,
                meeting_password=schema.meeting_password,
                scheduled_at=await to_utc_naive(schema.scheduled_at),
                duration=schema.duration,
                position=await self.content.next_position(course.id),
                is_published=False,
            )
            self.db.add(stream)
            await self.db.commit()
            await self.db.refresh(stream)
            logger.info(f"📡 Live stream {stream.id} scheduled at {stream.scheduled_at}")
            return livestream_out(stream)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"❌ create live stream error: {e}")
            raise HTTPException(500, f"Error while creating live stream: {e}")

    async def list_livestreams_async(self, user: User, course_id: uuid.UUID | None = None):
        stmt = (
            select(LiveStream, Course.title)
            .join(Course, Course.id == LiveStream.course_id)
            .order_by(LiveStream.scheduled_at.desc())
        )
        if user.role not in STAFF_ROLES:
            stmt = stmt.where(Course.user_id == user.id)
        if course_id:
            stmt = stmt.where(LiveStream.course_id == course_id)
        rows = (await self.db.execute(stmt)).all()
        return [
            {**livestream_out(stream), "course_title": course_title}
            for stream, course_title in rows
        ]

    async def update_livestream_async(
        self, stream_id: uuid.UUID, schema: UpdateLiveStream, user: User
    ):
        stream = await self._get_managed_stream(stream_id, user)
        check_duration(schema.duration)
        try:
            data = schema.model_dump(exclude_unset=True)
            if "scheduled_at" in data and data["scheduled_at"] is not None:
                data["scheduled_at"] = await to_utc_naive(data["scheduled_at"])
            for field, value in data.items():
                if value is None and field in ("title", "scheduled_at", "duration", "meeting_url"):
                    continue
                setattr(stream, field, value)
            await self.db.commit()
            await self.db.refresh(stream)
            return livestream_out(stream)
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while updating live stream: {e}")

    async def delete_livestream_async(self, stream_id: uuid.UUID, user: User):
        stream = await self._get_managed_stream(stream_id, user)
        try:
            await self.db.delete(stream)
            await self.db.commit()
            return {"message": "Live stream deleted"}
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while deleting live stream: {e}")

    async def toggle_publish_async(self, stream_id: uuid.UUID, user: User):
        stream = await self._get_managed_stream(stream_id, user)
        try:
            stream.is_published = not stream.is_published
            await self.db.commit()
            return {"id": str(stream.id), "is_published": stream.is_published}
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while publishing live stream: {e}")
