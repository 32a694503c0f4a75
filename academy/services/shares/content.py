import uuid

from fastapi import Depends, HTTPException
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.db.models.database import Chapter, Course, LiveStream, Quiz
from academy.db.session import get_session
from academy.services.shares.navigation import ContentItem, build_content_sequence


class ContentService:
    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    async def get_course_or_404(self, course_id: uuid.UUID, published_only: bool = False) -> Course:
        course = await self.db.get(Course, course_id)
        if not course or (published_only and not course.is_published):
            raise HTTPException(404, "Course not found")
        return course

    async def next_position(self, course_id: uuid.UUID) -> int:
        """One past the highest position over chapters, quizzes and live streams."""
        highest = 0
        for model in (Chapter, Quiz, LiveStream):
            value = await self.db.scalar(
                select(func.max(model.position)).where(model.course_id == course_id)
            )
            if value is not None and value > highest:
                highest = value
        return highest + 1

    async def load_content(self, course_id: uuid.UUID, published_only: bool = True):
        chapter_stmt = select(Chapter).where(Chapter.course_id == course_id)
        quiz_stmt = select(Quiz).where(Quiz.course_id == course_id)
        live_stmt = select(LiveStream).where(LiveStream.course_id == course_id)
        if published_only:
            chapter_stmt = chapter_stmt.where(Chapter.is_published.is_(True))
            quiz_stmt = quiz_stmt.where(Quiz.is_published.is_(True))
            live_stmt = live_stmt.where(LiveStream.is_published.is_(True))

        chapters = list(await self.db.scalars(chapter_stmt.order_by(Chapter.position)))
        quizzes = list(await self.db.scalars(quiz_stmt.order_by(Quiz.position)))
        livestreams = list(await self.db.scalars(live_stmt.order_by(LiveStream.position)))
        return chapters, quizzes, livestreams

    async def load_sequence(
        self, course_id: uuid.UUID, published_only: bool = True
    ) -> list[ContentItem]:
        chapters, quizzes, livestreams = await self.load_content(course_id, published_only)
        return build_content_sequence(chapters, quizzes, livestreams)
