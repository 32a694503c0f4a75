# academy/services/teacher/chapters.py
import uuid

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.enum import STAFF_ROLES
from academy.db.models.database import Chapter, Course, User
from academy.db.session import get_session
from academy.schemas.teacher.chapter import CreateChapter, ReorderChaptersSchema, UpdateChapter
from academy.services.shares.content import ContentService


def chapter_out(chapter: Chapter) -> dict:
    return {
        "id": str(chapter.id),
        "course_id": str(chapter.course_id),
        "title": chapter.title,
        "description": chapter.description,
        "video_url": chapter.video_url,
        "position": chapter.position,
        "is_published": chapter.is_published,
        "is_free": chapter.is_free,
        "created_at": chapter.created_at,
        "updated_at": chapter.updated_at,
    }


class ChapterService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        content: ContentService = Depends(ContentService),
    ):
        self.db = db
        self.content = content

    async def _owned_course(self, course_id: uuid.UUID, user: User) -> Course:
        course = await self.content.get_course_or_404(course_id)
        if user.role not in STAFF_ROLES and course.user_id != user.id:
            raise HTTPException(403, "Permission denied")
        return course

    async def _chapter_in_course(self, course_id: uuid.UUID, chapter_id: uuid.UUID) -> Chapter:
        chapter = await self.db.get(Chapter, chapter_id)
        if not chapter or chapter.course_id != course_id:
            raise HTTPException(404, "Chapter not found")
        return chapter

    async def list_chapters_async(self, course_id: uuid.UUID, user: User):
        await self._owned_course(course_id, user)
        chapters = await self.db.scalars(
            select(Chapter).where(Chapter.course_id == course_id).order_by(Chapter.position)
        )
        return [chapter_out(ch) for ch in chapters]

    async def create_chapter_async(self, course_id: uuid.UUID, schema: CreateChapter, user: User):
        try:
            course = await self._owned_course(course_id, user)

            # 📚 next slot after every chapter / quiz / live stream
            position = await self.content.next_position(course.id)
            chapter = Chapter(**schema.model_dump(), course_id=course.id, position=position)
            self.db.add(chapter)
            await self.db.commit()
            await self.db.refresh(chapter)
            return chapter_out(chapter)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"❌ create chapter error: {e}")
            raise HTTPException(500, f"Error while creating chapter: {e}")

    async def reorder_chapters_async(
        self, course_id: uuid.UUID, schema: ReorderChaptersSchema, user: User
    ):
        try:
            await self._owned_course(course_id, user)
            chapters = {
                ch.id: ch
                for ch in await self.db.scalars(
                    select(Chapter).where(Chapter.course_id == course_id)
                )
            }
            for item in schema.chapters:
                if item.id not in chapters:
                    raise HTTPException(400, f"Chapter {item.id} does not belong to this course")

            for item in schema.chapters:
                chapters[item.id].position = item.position
            await self.db.commit()
            return {"message": "Chapters reordered", "count": len(schema.chapters)}
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while reordering chapters: {e}")

    async def update_chapter_async(
        self, course_id: uuid.UUID, chapter_id: uuid.UUID, schema: UpdateChapter, user: User
    ):
        try:
            await self._owned_course(course_id, user)
            chapter = await self._chapter_in_course(course_id, chapter_id)
            for field, value in schema.model_dump(exclude_unset=True).items():
                if value is None and field in ("title", "is_free"):
                    continue
                setattr(chapter, field, value)
            await self.db.commit()
            await self.db.refresh(chapter)
            return chapter_out(chapter)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while updating chapter: {e}")

    async def delete_chapter_async(self, course_id: uuid.UUID, chapter_id: uuid.UUID, user: User):
        try:
            await self._owned_course(course_id, user)
            chapter = await self._chapter_in_course(course_id, chapter_id)
            await self.db.delete(chapter)
            await self.db.commit()
            return {"message": "Chapter deleted"}
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while deleting chapter: {e}")

    async def set_published_async(
        self, course_id: uuid.UUID, chapter_id: uuid.UUID, user: User, published: bool
    ):
        await self._owned_course(course_id, user)
        chapter = await self._chapter_in_course(course_id, chapter_id)
        if published:
            if not chapter.title or not chapter.title.strip():
                raise HTTPException(400, "A chapter needs a title before publishing")
            if not chapter.video_url:
                raise HTTPException(400, "A chapter needs a video before publishing")
        try:
            chapter.is_published = published
            await self.db.commit()
            await self.db.refresh(chapter)
            return chapter_out(chapter)
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while publishing chapter: {e}")
