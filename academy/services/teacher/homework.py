# academy/services/teacher/homework.py
import uuid

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.enum import STAFF_ROLES
from academy.db.models.database import (
    Activity,
    ActivitySubmission,
    Chapter,
    Course,
    HomeworkSubmission,
    User,
)
from academy.db.session import get_session
from academy.schemas.teacher.homework import CorrectHomework, CreateActivity


def _student_out(student: User) -> dict:
    return {
        "id": str(student.id),
        "full_name": student.full_name,
        "email": student.email,
        "phone_number": student.phone_number,
    }


def _chapter_out(chapter: Chapter, course: Course) -> dict:
    return {
        "id": str(chapter.id),
        "title": chapter.title,
        "course": {"id": str(course.id), "title": course.title},
    }


class TeacherHomeworkService:
    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    async def _owned_chapter(self, chapter_id: uuid.UUID, user: User) -> tuple[Chapter, Course]:
        chapter = await self.db.get(Chapter, chapter_id)
        if not chapter:
            raise HTTPException(404, "Chapter not found")
        course = await self.db.get(Course, chapter.course_id)
        if user.role not in STAFF_ROLES and course.user_id != user.id:
            raise HTTPException(403, "Permission denied")
        return chapter, course

    # ==============================
    # 📝 HOMEWORK
    # ==============================

    async def list_homework_async(self, chapter_id: uuid.UUID, user: User):
        chapter, course = await self._owned_chapter(chapter_id, user)
        rows = (
            await self.db.execute(
                select(HomeworkSubmission, User)
                .join(User, User.id == HomeworkSubmission.student_id)
                .where(HomeworkSubmission.chapter_id == chapter.id)
                .order_by(HomeworkSubmission.created_at.desc())
            )
        ).all()
        return [
            {
                "id": str(homework.id),
                "image_url": homework.image_url,
                "corrected_image_urls": homework.corrected_image_urls or [],
                "created_at": homework.created_at,
                "student": _student_out(student),
                "chapter": _chapter_out(chapter, course),
            }
            for homework, student in rows
        ]

    async def correct_homework_async(
        self, chapter_id: uuid.UUID, schema: CorrectHomework, user: User
    ):
        corrected_url = (schema.corrected_image_url or "").strip()
        if not schema.homework_id or not corrected_url:
            raise HTTPException(400, "Homework id and corrected image URL are required")

        chapter, _ = await self._owned_chapter(chapter_id, user)
        homework = await self.db.get(HomeworkSubmission, schema.homework_id)
        if not homework or homework.chapter_id != chapter.id:
            raise HTTPException(404, "Homework not found")

        try:
            # corrections accumulate, a new list so the JSON column is flagged dirty
            homework.corrected_image_urls = [*(homework.corrected_image_urls or []), corrected_url]
            await self.db.commit()
            await self.db.refresh(homework)

            logger.info(f"✅ Homework {homework.id} corrected by {user.id}")
            return {
                "id": str(homework.id),
                "image_url": homework.image_url,
                "corrected_image_urls": homework.corrected_image_urls,
                "updated_at": homework.updated_at,
            }
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"❌ Error while correcting homework: {e}")
            raise HTTPException(500, f"Error while correcting homework: {e}")

    # ==============================
    # 🎨 ACTIVITIES
    # ==============================

    async def create_activity_async(self, chapter_id: uuid.UUID, schema: CreateActivity, user: User):
        title = (schema.title or "").strip()
        if not title:
            raise HTTPException(400, "Title is required")

        chapter, _ = await self._owned_chapter(chapter_id, user)
        try:
            activity = Activity(
                chapter_id=chapter.id,
                title=title,
                description=schema.description,
                is_required=schema.is_required,
            )
            self.db.add(activity)
            await self.db.commit()
            await self.db.refresh(activity)

            logger.info(f"🎨 Activity '{title}' added to chapter {chapter.id}")
            return {
                "id": str(activity.id),
                "chapter_id": str(activity.chapter_id),
                "title": activity.title,
                "description": activity.description,
                "is_required": activity.is_required,
                "created_at": activity.created_at,
            }
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"❌ Error while creating activity: {e}")
            raise HTTPException(500, f"Error while creating activity: {e}")

    async def list_activities_async(self, chapter_id: uuid.UUID, user: User):
        chapter, _ = await self._owned_chapter(chapter_id, user)
        counts = (
            select(ActivitySubmission.activity_id, func.count(ActivitySubmission.id).label("total"))
            .group_by(ActivitySubmission.activity_id)
            .subquery()
        )
        rows = (
            await self.db.execute(
                select(Activity, func.coalesce(counts.c.total, 0))
                .outerjoin(counts, counts.c.activity_id == Activity.id)
                .where(Activity.chapter_id == chapter.id)
                .order_by(Activity.created_at)
            )
        ).all()
        return [
            {
                "id": str(activity.id),
                "title": activity.title,
                "description": activity.description,
                "is_required": activity.is_required,
                "created_at": activity.created_at,
                "submissions_count": total,
            }
            for activity, total in rows
        ]

    async def list_activity_submissions_async(self, activity_id: uuid.UUID, user: User):
        activity = await self.db.get(Activity, activity_id)
        if not activity:
            raise HTTPException(404, "Activity not found")
        chapter, course = await self._owned_chapter(activity.chapter_id, user)

        rows = (
            await self.db.execute(
                select(ActivitySubmission, User)
                .join(User, User.id == ActivitySubmission.student_id)
                .where(ActivitySubmission.activity_id == activity.id)
                .order_by(ActivitySubmission.created_at.desc())
            )
        ).all()
        return [
            {
                "id": str(submission.id),
                "image_url": submission.image_url,
                "created_at": submission.created_at,
                "student": _student_out(student),
                "activity": {"id": str(activity.id), "title": activity.title},
                "chapter": _chapter_out(chapter, course),
            }
            for submission, student in rows
        ]

    # ==============================
    # 👤 PER STUDENT
    # ==============================

    async def student_homework_async(self, student_id: uuid.UUID, user: User):
        stmt = (
            select(HomeworkSubmission, Chapter, Course)
            .join(Chapter, Chapter.id == HomeworkSubmission.chapter_id)
            .join(Course, Course.id == Chapter.course_id)
            .where(HomeworkSubmission.student_id == student_id)
            .order_by(HomeworkSubmission.created_at.desc())
        )
        if user.role not in STAFF_ROLES:
            stmt = stmt.where(Course.user_id == user.id)

        rows = (await self.db.execute(stmt)).all()
        return [
            {
                "id": str(homework.id),
                "image_url": homework.image_url,
                "corrected_image_urls": homework.corrected_image_urls or [],
                "created_at": homework.created_at,
                "chapter": _chapter_out(chapter, course),
            }
            for homework, chapter, course in rows
        ]

    async def student_activities_async(self, student_id: uuid.UUID, user: User):
        stmt = (
            select(ActivitySubmission, Activity, Chapter, Course)
            .join(Activity, Activity.id == ActivitySubmission.activity_id)
            .join(Chapter, Chapter.id == Activity.chapter_id)
            .join(Course, Course.id == Chapter.course_id)
            .where(ActivitySubmission.student_id == student_id)
            .order_by(ActivitySubmission.created_at.desc())
        )
        if user.role not in STAFF_ROLES:
            stmt = stmt.where(Course.user_id == user.id)

        rows = (await self.db.execute(stmt)).all()
        return [
            {
                "id": str(submission.id),
                "image_url": submission.image_url,
                "created_at": submission.created_at,
                "activity": {"id": str(activity.id), "title": activity.title},
                "chapter": _chapter_out(chapter, course),
            }
            for submission, activity, chapter, course in rows
        ]
