import uuid

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.db.models.database import Activity, ActivitySubmission, HomeworkSubmission, User
from academy.db.session import get_session
from academy.schemas.user.homework import SubmitImage
from academy.services.user.learning import LearningService


def homework_out(homework: HomeworkSubmission) -> dict:
    return {
        "id": str(homework.id),
        "chapter_id": str(homework.chapter_id),
        "image_url": homework.image_url,
        "corrected_image_urls": homework.corrected_image_urls or [],
        "created_at": homework.created_at,
        "updated_at": homework.updated_at,
    }


def activity_submission_out(submission: ActivitySubmission) -> dict:
    return {
        "id": str(submission.id),
        "activity_id": str(submission.activity_id),
        "image_url": submission.image_url,
        "created_at": submission.created_at,
        "updated_at": submission.updated_at,
    }


def _require_image(schema: SubmitImage) -> str:
    image_url = (schema.image_url or "").strip()
    if not image_url:
        raise HTTPException(400, "Image URL is required")
    return image_url


class HomeworkService:
    """Student homework uploads and chapter activities."""

    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        learning: LearningService = Depends(LearningService),
    ):
        self.db = db
        self.learning = learning

    # ==============================
    # 📝 HOMEWORK
    # ==============================

    async def submit_homework_async(
        self, course_id: uuid.UUID, chapter_id: uuid.UUID, schema: SubmitImage, user: User
    ):
        image_url = _require_image(schema)
        _, chapter = await self.learning.load_viewable_chapter(course_id, chapter_id, user)
        try:
            homework = await self.db.scalar(
                select(HomeworkSubmission).where(
                    HomeworkSubmission.student_id == user.id,
                    HomeworkSubmission.chapter_id == chapter.id,
                )
            )
            # one submission per chapter, a resubmit replaces the image
            if homework is None:
                homework = HomeworkSubmission(
                    student_id=user.id, chapter_id=chapter.id, image_url=image_url
                )
                self.db.add(homework)
            else:
                homework.image_url = image_url
            await self.db.commit()
            await self.db.refresh(homework)

            logger.info(f"📝 Homework from {user.id} for chapter {chapter.id}")
            return homework_out(homework)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"❌ Error while submitting homework: {e}")
            raise HTTPException(500, f"Error while submitting homework: {e}")

    async def get_homework_async(self, course_id: uuid.UUID, chapter_id: uuid.UUID, user: User):
        _, chapter = await self.learning.load_viewable_chapter(course_id, chapter_id, user)
        homework = await self.db.scalar(
            select(HomeworkSubmission).where(
                HomeworkSubmission.student_id == user.id,
                HomeworkSubmission.chapter_id == chapter.id,
            )
        )
        return homework_out(homework) if homework else None

    # ==============================
    # 🎨 ACTIVITIES
    # ==============================

    async def list_activities_async(self, course_id: uuid.UUID, chapter_id: uuid.UUID, user: User):
        _, chapter = await self.learning.load_viewable_chapter(course_id, chapter_id, user)
        activities = await self.db.scalars(
            select(Activity).where(Activity.chapter_id == chapter.id).order_by(Activity.created_at)
        )
        return [
            {
                "id": str(a.id),
                "title": a.title,
                "description": a.description,
                "is_required": a.is_required,
                "created_at": a.created_at,
            }
            for a in activities
        ]

    async def _activity_in_chapter(self, chapter_id: uuid.UUID, activity_id: uuid.UUID) -> Activity:
        activity = await self.db.get(Activity, activity_id)
        if not activity or activity.chapter_id != chapter_id:
            raise HTTPException(404, "Activity not found")
        return activity

    async def submit_activity_async(
        self,
        course_id: uuid.UUID,
        chapter_id: uuid.UUID,
        activity_id: uuid.UUID,
        schema: SubmitImage,
        user: User,
    ):
        image_url = _require_image(schema)
        _, chapter = await self.learning.load_viewable_chapter(course_id, chapter_id, user)
        activity = await self._activity_in_chapter(chapter.id, activity_id)
        try:
            submission = await self.db.scalar(
                select(ActivitySubmission).where(
                    ActivitySubmission.student_id == user.id,
                    ActivitySubmission.activity_id == activity.id,
                )
            )
            if submission is None:
                submission = ActivitySubmission(
                    student_id=user.id, activity_id=activity.id, image_url=image_url
                )
                self.db.add(submission)
            else:
                submission.image_url = image_url
            await self.db.commit()
            await self.db.refresh(submission)

            logger.info(f"🎨 Activity {activity.id} submitted by {user.id}")
            return activity_submission_out(submission)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"❌ Error while submitting activity: {e}")
            raise HTTPException(500, f"Error while submitting activity: {e}")

    async def get_activity_submission_async(
        self, course_id: uuid.UUID, chapter_id: uuid.UUID, activity_id: uuid.UUID, user: User
    ):
        _, chapter = await self.learning.load_viewable_chapter(course_id, chapter_id, user)
        activity = await self._activity_in_chapter(chapter.id, activity_id)
        submission = await self.db.scalar(
            select(ActivitySubmission).where(
                ActivitySubmission.student_id == user.id,
                ActivitySubmission.activity_id == activity.id,
            )
        )
        return activity_submission_out(submission) if submission else None
