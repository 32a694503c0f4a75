import uuid
from datetime import timedelta

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.enum import STAFF_ROLES, ContentType
from academy.db.models.database import Course, LiveStream, LiveStreamAttendance, User
from academy.db.session import get_session
from academy.libs.formats.datetime import now as get_now
from academy.services.shares.content import ContentService
from academy.services.shares.course_access import CourseAccessService
from academy.services.shares.navigation import navigation_payload
from academy.services.teacher.livestreams import livestream_out


def livestream_has_ended(stream: LiveStream, at=None) -> bool:
    at = at or get_now()
    return at > stream.scheduled_at + timedelta(minutes=stream.duration or 0)


def livestream_status(stream: LiveStream, at=None) -> str:
    at = at or get_now()
    if at < stream.scheduled_at:
        return "upcoming"
    if livestream_has_ended(stream, at):
        return "ended"
    return "live"


class LiveStreamService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        access: CourseAccessService = Depends(CourseAccessService),
        content: ContentService = Depends(ContentService),
    ):
        self.db = db
        self.access = access
        self.content = content

    async def _load_for_viewer(
        self, course_id: uuid.UUID, stream_id: uuid.UUID, user: User
    ) -> tuple[Course, LiveStream, bool]:
        course = await self.content.get_course_or_404(course_id)
        is_manager = user.role in STAFF_ROLES or course.user_id == user.id

        # 1️⃣ course published
        if not course.is_published and not is_manager:
            raise HTTPException(404, "Course not found")

        # 2️⃣ access
        if not course.is_free:
            await self.access.require_course_access(user, course)

        # 3️⃣ stream published
        stream = await self.db.get(LiveStream, stream_id)
        if not stream or stream.course_id != course.id:
            raise HTTPException(404, "Live stream not found")
        if not stream.is_published and not is_manager:
            raise HTTPException(404, "Live stream not found")

        # 4️⃣ ended streams are gone for students
        if not is_manager and livestream_has_ended(stream):
            raise HTTPException(410, "Live stream has ended")
        return course, stream, is_manager

    async def get_livestream_async(self, course_id: uuid.UUID, stream_id: uuid.UUID, user: User):
        course, stream, _ = await self._load_for_viewer(course_id, stream_id, user)
        attended = await self.db.scalar(
            select(LiveStreamAttendance.id).where(
                LiveStreamAttendance.live_stream_id == stream.id,
                LiveStreamAttendance.user_id == user.id,
            )
        )
        sequence = await self.content.load_sequence(course.id)
        return {
            **livestream_out(stream),
            "status": livestream_status(stream),
            "attended": attended is not None,
            "course": {"id": str(course.id), "title": course.title},
            "navigation": navigation_payload(
                sequence, stream.id, ContentType.LIVESTREAM.value
            ),
        }

    async def attend_livestream_async(
        self, course_id: uuid.UUID, stream_id: uuid.UUID, user: User
    ):
        _, stream, _ = await self._load_for_viewer(course_id, stream_id, user)
        existing = await self.db.scalar(
            select(LiveStreamAttendance).where(
                LiveStreamAttendance.live_stream_id == stream.id,
                LiveStreamAttendance.user_id == user.id,
            )
        )
        if existing:
            return {"attended": True, "joined_at": existing.joined_at, "created": False}
        try:
            attendance = LiveStreamAttendance(live_stream_id=stream.id, user_id=user.id)
            self.db.add(attendance)
            await self.db.commit()
            logger.info(f"🙋 {user.id} joined live stream {stream.id}")
            return {"attended": True, "joined_at": attendance.joined_at, "created": True}
        except IntegrityError:
            await self.db.rollback()
            return {"attended": True, "joined_at": None, "created": False}
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while recording attendance: {e}")
