import re
import uuid

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.enum import STAFF_ROLES, PurchaseStatus, UserRole
from academy.db.models.database import Course, Purchase, Timetable, User
from academy.db.session import get_session
from academy.libs.formats.datetime import parse_hhmm
from academy.libs.formats.text import HHMM_PATTERN
from academy.schemas.shares.timetable import CreateTimetable, UpdateTimetable
from academy.services.shares.content import ContentService
from academy.services.shares.course_access import CourseAccessService

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def validate_time_range(start_time: str, end_time: str) -> None:
    """HH:MM on both ends and end strictly after start, else 400."""
    for value in (start_time, end_time):
        if not value or not re.match(HHMM_PATTERN, value):
            raise HTTPException(400, "Invalid time format, expected HH:MM")
    if parse_hhmm(end_time) <= parse_hhmm(start_time):
        raise HTTPException(400, "End time must be after start time")


def timetable_out(row: Timetable, course_title: str | None = None) -> dict:
    return {
        "id": str(row.id),
        "course_id": str(row.course_id),
        "course_title": course_title,
        "day_of_week": row.day_of_week,
        "day_name": DAY_NAMES[row.day_of_week],
        "start_time": row.start_time,
        "end_time": row.end_time,
        "title": row.title,
        "description": row.description,
        "created_at": row.created_at,
        "updated_at": row.updated_at,
    }


class TimetableService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        access: CourseAccessService = Depends(CourseAccessService),
        content: ContentService = Depends(ContentService),
    ):
        self.db = db
        self.access = access
        self.content = content

    async def _visible_course_ids(self, user: User) -> list | None:
        """Course ids the user may see timetables of; None means all."""
        if user.role in STAFF_ROLES:
            return None
        if user.role == UserRole.TEACHER.value:
            return list(
                await self.db.scalars(select(Course.id).where(Course.user_id == user.id))
            )
        if user.role == UserRole.USER.value:
            return list(
                await self.db.scalars(
                    select(Purchase.course_id).where(
                        Purchase.user_id == user.id,
                        Purchase.status == PurchaseStatus.ACTIVE.value,
                    )
                )
            )
        raise HTTPException(403, "Permission denied")

    async def list_timetables_async(self, user: User, course_id: uuid.UUID | None = None):
        visible = await self._visible_course_ids(user)
        if visible is not None and course_id is not None and course_id not in visible:
            raise HTTPException(403, "You do not have access to this course")

        stmt = (
            select(Timetable, Course.title)
            .join(Course, Course.id == Timetable.course_id)
            .order_by(Timetable.day_of_week, Timetable.start_time)
        )
        if course_id is not None:
            stmt = stmt.where(Timetable.course_id == course_id)
        if visible is not None:
            if not visible:
                return []
            stmt = stmt.where(Timetable.course_id.in_(visible))
        rows = (await self.db.execute(stmt)).all()
        return [timetable_out(row, title) for row, title in rows]

    async def get_timetable_async(self, timetable_id: uuid.UUID, user: User):
        row = await self.db.get(Timetable, timetable_id)
        if not row:
            raise HTTPException(404, "Timetable not found")
        visible = await self._visible_course_ids(user)
        if visible is not None and row.course_id not in visible:
            raise HTTPException(403, "You do not have access to this timetable")
        course = await self.db.get(Course, row.course_id)
        return timetable_out(row, course.title if course else None)

    async def get_course_timetable_async(self, course_id: uuid.UUID, user: User):
        course = await self.content.get_course_or_404(course_id)
        access = await self.access.resolve_course_access(user, course)
        if not access["has_access"]:
            raise HTTPException(403, "You do not have access to this course")
        rows = await self.db.scalars(
            select(Timetable)
            .where(Timetable.course_id == course.id)
            .order_by(Timetable.day_of_week, Timetable.start_time)
        )
        return [timetable_out(row, course.title) for row in rows]

    async def create_timetable_async(self, schema: CreateTimetable):
        course = await self.db.get(Course, schema.course_id)
        if not course:
            raise HTTPException(404, "Course not found")
        validate_time_range(schema.start_time, schema.end_time)
        try:
            row = Timetable(**schema.model_dump())
            self.db.add(row)
            await self.db.commit()
            await self.db.refresh(row)
            logger.info(f"🗓 Timetable {row.id} added to course {course.id}")
            return timetable_out(row, course.title)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"❌ create timetable error: {e}")
            raise HTTPException(500, f"Error while creating timetable: {e}")

    async def update_timetable_async(self, timetable_id: uuid.UUID, schema: UpdateTimetable):
        row = await self.db.get(Timetable, timetable_id)
        if not row:
            raise HTTPException(404, "Timetable not found")

        data = schema.model_dump(exclude_unset=True)
        if data.get("course_id") is not None:
            if not await self.db.get(Course, data["course_id"]):
                raise HTTPException(404, "Course not found")

        # one end given: validate against the stored other end
        if "start_time" in data or "end_time" in data:
            validate_time_range(
                data.get("start_time") or row.start_time,
                data.get("end_time") or row.end_time,
            )
        try:
            for field, value in data.items():
                if value is None and field in ("course_id", "day_of_week", "start_time", "end_time", "title"):
                    continue
                setattr(row, field, value)
            await self.db.commit()
            await self.db.refresh(row)
            course = await self.db.get(Course, row.course_id)
            return timetable_out(row, course.title if course else None)
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while updating timetable: {e}")

    async def delete_timetable_async(self, timetable_id: uuid.UUID) -> None:
        row = await self.db.get(Timetable, timetable_id)
        if not row:
            raise HTTPException(404, "Timetable not found")
        try:
            await self.db.delete(row)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while deleting timetable: {e}")
