import uuid

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.enum import STAFF_ROLES, ContentType
from academy.core.settings import settings
from academy.db.models.database import Chapter, Course, User, UserProgress
from academy.db.session import get_session
from academy.services.shares.content import ContentService
from academy.services.shares.course_access import CourseAccessService
from academy.services.shares.navigation import navigation_payload


class LearningService:
    """Student side of chapters: viewing and completion progress."""

    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        access: CourseAccessService = Depends(CourseAccessService),
        content: ContentService = Depends(ContentService),
    ):
        self.db = db
        self.access = access
        self.content = content

    async def load_viewable_chapter(
        self, course_id: uuid.UUID, chapter_id: uuid.UUID, user: User
    ) -> tuple[Course, Chapter]:
        course = await self.content.get_course_or_404(course_id)
        is_manager = user.role in STAFF_ROLES or course.user_id == user.id

        if not course.is_published and not is_manager:
            raise HTTPException(404, "Course not found")

        chapter = await self.db.get(Chapter, chapter_id)
        if not chapter or chapter.course_id != course.id:
            raise HTTPException(404, "Chapter not found")
        if not chapter.is_published and not is_manager:
            raise HTTPException(404, "Chapter not found")

        if not chapter.is_free:
            await self.access.require_course_access(user, course)
        return course, chapter

    async def get_chapter_async(self, course_id: uuid.UUID, chapter_id: uuid.UUID, user: User):
        course, chapter = await self.load_viewable_chapter(course_id, chapter_id, user)

        progress = await self.db.scalar(
            select(UserProgress).where(
                UserProgress.user_id == user.id, UserProgress.chapter_id == chapter.id
            )
        )
        sequence = await self.content.load_sequence(course.id)
        return {
            "id": str(chapter.id),
            "title": chapter.title,
            "description": chapter.description,
            "video_url": chapter.video_url,
            "position": chapter.position,
            "is_free": chapter.is_free,
            "course": {"id": str(course.id), "title": course.title},
            "progress": {
                "is_completed": bool(progress and progress.is_completed),
                "updated_at": progress.updated_at if progress else None,
            },
            "navigation": navigation_payload(
                sequence, chapter.id, ContentType.CHAPTER.value
            ),
        }

    async def complete_chapter_async(
        self, course_id: uuid.UUID, chapter_id: uuid.UUID, user: User
    ):
        _, chapter = await self.load_viewable_chapter(course_id, chapter_id, user)
        try:
            progress = await self.db.scalar(
                select(UserProgress).where(
                    UserProgress.user_id == user.id, UserProgress.chapter_id == chapter.id
                )
            )
            # 1️⃣ points only on the first completion
            awarded = 0
            if progress is None:
                progress = UserProgress(
                    user_id=user.id, chapter_id=chapter.id, is_completed=True
                )
                self.db.add(progress)
                awarded = settings.CHAPTER_COMPLETION_POINTS
            elif not progress.is_completed:
                progress.is_completed = True
                awarded = settings.CHAPTER_COMPLETION_POINTS

            if awarded:
                user.points = (user.points or 0) + awarded
            await self.db.commit()

            if awarded:
                logger.info(f"🏅 {user.id} +{awarded} points for chapter {chapter.id}")
            return {
                "chapter_id": str(chapter.id),
                "is_completed": True,
                "points_awarded": awarded,
                "points": user.points,
            }
        except Exception as e:
            await self.db.rollback()
            logger.error(f"❌ complete chapter error: {e}")
            raise HTTPException(500, f"Error while saving progress: {e}")

    async def delete_progress_async(
        self, course_id: uuid.UUID, chapter_id: uuid.UUID, user: User
    ) -> None:
        chapter = await self.db.get(Chapter, chapter_id)
        if not chapter or chapter.course_id != course_id:
            raise HTTPException(404, "Chapter not found")

        progress = await self.db.scalar(
            select(UserProgress).where(
                UserProgress.user_id == user.id, UserProgress.chapter_id == chapter.id
            )
        )
        if not progress:
            raise HTTPException(404, "Progress not found")

        try:
            points = settings.CHAPTER_COMPLETION_POINTS
            if progress.is_completed and (user.points or 0) >= points:
                user.points = user.points - points
            await self.db.delete(progress)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while deleting progress: {e}")
