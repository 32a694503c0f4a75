import uuid

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.enum import STAFF_ROLES, PurchaseStatus, UserRole
from academy.db.models.database import Attachment, Chapter, Course, Purchase, Quiz, User
from academy.db.session import get_session
from academy.libs.formats.text import public_storage_url
from academy.schemas.teacher.courses import CreateAttachment, CreateCourse, UpdateCourse
from academy.services.shares.content import ContentService
from academy.services.shares.course_access import CourseAccessService
from academy.services.user.courses import course_summary

TARGET_FIELDS = ("target_curriculum", "target_grade", "target_level", "target_language")


class TeacherCourseService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        access: CourseAccessService = Depends(CourseAccessService),
        content: ContentService = Depends(ContentService),
    ):
        self.db = db
        self.access = access
        self.content = content

    @staticmethod
    def _ensure_owner_or_staff(course: Course, user: User):
        if user.role not in STAFF_ROLES and course.user_id != user.id:
            raise HTTPException(403, "Permission denied")

    async def create_course_async(self, schema: CreateCourse, user: User):
        try:
            course = Course(**schema.model_dump(), user_id=user.id, is_published=False)
            self.db.add(course)
            await self.db.commit()
            await self.db.refresh(course)
            logger.info(f"📘 Course {course.id} created by {user.id}")
            return course_summary(course)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"❌ create course error: {e}")
            raise HTTPException(500, f"Error while creating course: {e}")

    async def list_own_courses_async(self, user: User):
        stmt = select(Course).order_by(Course.created_at.desc())
        if user.role not in STAFF_ROLES:
            stmt = stmt.where(Course.user_id == user.id)
        courses = list(await self.db.scalars(stmt))
        ids = [c.id for c in courses]

        chapter_counts = {}
        quiz_counts = {}
        student_counts = {}
        if ids:
            chapter_counts = dict(
                (await self.db.execute(
                    select(Chapter.course_id, func.count(Chapter.id))
                    .where(Chapter.course_id.in_(ids))
                    .group_by(Chapter.course_id)
                )).all()
            )
            quiz_counts = dict(
                (await self.db.execute(
                    select(Quiz.course_id, func.count(Quiz.id))
                    .where(Quiz.course_id.in_(ids))
                    .group_by(Quiz.course_id)
                )).all()
            )
            student_counts = dict(
                (await self.db.execute(
                    select(Purchase.course_id, func.count(Purchase.id))
                    .where(
                        Purchase.course_id.in_(ids),
                        Purchase.status == PurchaseStatus.ACTIVE.value,
                    )
                    .group_by(Purchase.course_id)
                )).all()
            )
        return [
            {
                **course_summary(c),
                "chapters_count": chapter_counts.get(c.id, 0),
                "quizzes_count": quiz_counts.get(c.id, 0),
                "students_count": student_counts.get(c.id, 0),
            }
            for c in courses
        ]

    async def update_course_async(self, course_id: uuid.UUID, schema: UpdateCourse, user: User):
        course = await self.content.get_course_or_404(course_id)
        if user.role != UserRole.ADMIN.value and course.user_id != user.id:
            raise HTTPException(403, "Permission denied")
        try:
            data = schema.model_dump(exclude_unset=True)
            targets_changed = False
            for field, value in data.items():
                if value is None and field in ("title", "price", "is_free"):
                    continue
                if field in TARGET_FIELDS and getattr(course, field) != value:
                    targets_changed = True
                setattr(course, field, value)
            await self.db.commit()
            await self.db.refresh(course)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"❌ update course error: {e}")
            raise HTTPException(500, f"Error while updating course: {e}")

        if course.is_published and targets_changed:
            await self.access.grant_course_access_to_subscriptions(course)
        return course_summary(course)

    async def publish_course_async(self, course_id: uuid.UUID, user: User):
        course = await self.content.get_course_or_404(course_id)
        self._ensure_owner_or_staff(course, user)

        if not course.title or not course.title.strip():
            raise HTTPException(400, "A course needs a title before publishing")
        chapters = await self.db.scalar(
            select(func.count(Chapter.id)).where(
                Chapter.course_id == course.id, Chapter.is_published.is_(True)
            )
        )
        quizzes = await self.db.scalar(
            select(func.count(Quiz.id)).where(
                Quiz.course_id == course.id, Quiz.is_published.is_(True)
            )
        )
        if not chapters and not quizzes:
            raise HTTPException(
                400, "Publish at least one chapter or quiz before publishing the course"
            )

        try:
            course.is_published = True
            await self.db.commit()
            await self.db.refresh(course)
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while publishing course: {e}")

        granted = await self.access.grant_course_access_to_subscriptions(course)
        return {**course_summary(course), "subscriptions_granted": granted}

    async def unpublish_course_async(self, course_id: uuid.UUID, user: User):
        course = await self.content.get_course_or_404(course_id)
        self._ensure_owner_or_staff(course, user)
        try:
            course.is_published = False
            await self.db.commit()
            await self.db.refresh(course)
            return course_summary(course)
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while unpublishing course: {e}")

    async def delete_course_async(self, course_id: uuid.UUID, user: User):
        course = await self.content.get_course_or_404(course_id)
        if user.role != UserRole.ADMIN.value and course.user_id != user.id:
            raise HTTPException(403, "Permission denied")
        try:
            # children go with the course through ON DELETE CASCADE
            await self.db.execute(delete(Course).where(Course.id == course.id))
            await self.db.commit()
            logger.info(f"🗑 Course {course_id} deleted by {user.id}")
            return {"message": "Course deleted"}
        except Exception as e:
            await self.db.rollback()
            logger.error(f"❌ delete course error: {e}")
            raise HTTPException(500, f"Error while deleting course: {e}")

    # ==============================
    # 📎 ATTACHMENTS
    # ==============================

    async def add_attachment_async(self, course_id: uuid.UUID, schema: CreateAttachment):
        course = await self.content.get_course_or_404(course_id)
        try:
            attachment = Attachment(course_id=course.id, name=schema.name, url=schema.url)
            self.db.add(attachment)
            await self.db.commit()
            await self.db.refresh(attachment)
            return {
                "id": str(attachment.id),
                "course_id": str(course.id),
                "name": attachment.name,
                "url": public_storage_url(attachment.url),
            }
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while adding attachment: {e}")

    async def delete_attachment_async(self, course_id: uuid.UUID, attachment_id: uuid.UUID):
        attachment = await self.db.get(Attachment, attachment_id)
        if not attachment or attachment.course_id != course_id:
            raise HTTPException(404, "Attachment not found")
        try:
            await self.db.delete(attachment)
            await self.db.commit()
            return {"message": "Attachment deleted"}
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while deleting attachment: {e}")
