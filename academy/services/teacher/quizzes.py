import uuid
from typing import List

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from academy.core.enum import STAFF_ROLES, QuestionType
from academy.db.models.database import Course, Question, Quiz, QuizResult, User
from academy.db.session import get_session
from academy.schemas.teacher.quiz import CreateQuiz, QuestionIn, UpdateQuiz
from academy.services.shares.content import ContentService


def quiz_out(quiz: Quiz, with_answers: bool = True) -> dict:
    return {
        "id": str(quiz.id),
        "course_id": str(quiz.course_id),
        "title": quiz.title,
        "description": quiz.description,
        "position": quiz.position,
        "is_published": quiz.is_published,
        "max_attempts": quiz.max_attempts,
        "timer": quiz.timer,
        "questions": [
            {
                "id": str(q.id),
                "text": q.text_,
                "type": q.type,
                "options": q.options,
                "points": q.points,
                "image_url": q.image_url,
                "position": q.position,
                **({"correct_answer": q.correct_answer} if with_answers else {}),
            }
            for q in sorted(quiz.questions, key=lambda q: q.position)
        ],
        "created_at": quiz.created_at,
        "updated_at": quiz.updated_at,
    }


def build_questions(quiz_id: uuid.UUID, questions: List[QuestionIn]) -> list[Question]:
    """Question rows numbered 1..n; options are kept for multiple choice only."""
    rows = []
    for index, item in enumerate(questions, start=1):
        is_choice = item.type == QuestionType.MULTIPLE_CHOICE.value
        if is_choice and not item.options:
            raise HTTPException(400, f"Question {index} needs options")
        rows.append(
            Question(
                quiz_id=quiz_id,
                text_=item.text,
                type=item.type,
                options=list(item.options) if is_choice else None,
                correct_answer=item.correct_answer,
                points=item.points,
                image_url=item.image_url,
                position=index,
            )
        )
    return rows


class TeacherQuizService:
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

    async def _get_quiz(self, quiz_id: uuid.UUID) -> Quiz:
        quiz = await self.db.scalar(
            select(Quiz).options(selectinload(Quiz.questions)).where(Quiz.id == quiz_id)
        )
        if not quiz:
            raise HTTPException(404, "Quiz not found")
        return quiz

    async def list_quizzes_async(self, user: User, course_id: uuid.UUID | None = None):
        stmt = (
            select(Quiz)
            .options(selectinload(Quiz.questions))
            .join(Course, Course.id == Quiz.course_id)
            .order_by(Quiz.course_id, Quiz.position)
        )
        if user.role not in STAFF_ROLES:
            stmt = stmt.where(Course.user_id == user.id)
        if course_id:
            stmt = stmt.where(Quiz.course_id == course_id)
        return [quiz_out(q) for q in await self.db.scalars(stmt)]

    async def create_quiz_async(self, schema: CreateQuiz, user: User):
        course = await self._owned_course(schema.course_id, user)
        try:
            quiz = Quiz(
                course_id=course.id,
                title=schema.title,
                description=schema.description,
                max_attempts=schema.max_attempts,
                timer=schema.timer,
                position=await self.content.next_position(course.id),
                is_published=False,
            )
            self.db.add(quiz)
            await self.db.flush()
            self.db.add_all(build_questions(quiz.id, schema.questions))
            await self.db.commit()
            quiz = await self._reload(quiz.id)
            logger.info(f"🧩 Quiz {quiz.id} created in course {course.id}")
            return quiz_out(quiz)
        except HTTPException:
            await self.db.rollback()
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"❌ create quiz error: {e}")
            raise HTTPException(500, f"Error while creating quiz: {e}")

    async def _reload(self, quiz_id: uuid.UUID) -> Quiz:
        quiz = await self._get_quiz(quiz_id)
        await self.db.refresh(quiz, attribute_names=["questions"])
        return quiz

    async def update_quiz_async(
        self, course_id: uuid.UUID, quiz_id: uuid.UUID, schema: UpdateQuiz, user: User
    ):
        await self._owned_course(course_id, user)
        quiz = await self._get_quiz(quiz_id)
        if quiz.course_id != course_id:
            raise HTTPException(404, "Quiz not found")
        try:
            data = schema.model_dump(exclude_unset=True, exclude={"questions"})
            for field, value in data.items():
                if value is None and field in ("title", "max_attempts"):
                    continue
                setattr(quiz, field, value)

            # replace the question list when one is sent
            if schema.questions is not None:
                await self.db.execute(delete(Question).where(Question.quiz_id == quiz.id))
                self.db.add_all(build_questions(quiz.id, schema.questions))

            await self.db.commit()
            quiz = await self._reload(quiz.id)
            return quiz_out(quiz)
        except HTTPException:
            await self.db.rollback()
            raise
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while updating quiz: {e}")

    async def delete_quiz_async(self, course_id: uuid.UUID, quiz_id: uuid.UUID, user: User):
        await self._owned_course(course_id, user)
        quiz = await self.db.get(Quiz, quiz_id)
        if not quiz or quiz.course_id != course_id:
            raise HTTPException(404, "Quiz not found")
        try:
            await self.db.execute(delete(Quiz).where(Quiz.id == quiz.id))
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while deleting quiz: {e}")

    async def toggle_publish_async(self, quiz_id: uuid.UUID, user: User):
        quiz = await self._get_quiz(quiz_id)
        await self._owned_course(quiz.course_id, user)
        if not quiz.is_published and not quiz.questions:
            raise HTTPException(400, "Add at least one question before publishing")
        try:
            quiz.is_published = not quiz.is_published
            await self.db.commit()
            return {"id": str(quiz.id), "is_published": quiz.is_published}
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while publishing quiz: {e}")

    # ==============================
    # 🛡 STAFF LISTINGS
    # ==============================

    async def admin_list_quizzes_async(self, course_id: uuid.UUID | None = None):
        stmt = (
            select(Quiz, Course.title, func.count(QuizResult.id))
            .join(Course, Course.id == Quiz.course_id)
            .outerjoin(QuizResult, QuizResult.quiz_id == Quiz.id)
            .group_by(Quiz.id, Course.title)
            .order_by(Course.title, Quiz.position)
        )
        if course_id:
            stmt = stmt.where(Quiz.course_id == course_id)
        rows = (await self.db.execute(stmt)).all()
        return [
            {
                "id": str(quiz.id),
                "course_id": str(quiz.course_id),
                "course_title": course_title,
                "title": quiz.title,
                "is_published": quiz.is_published,
                "max_attempts": quiz.max_attempts,
                "position": quiz.position,
                "results_count": results,
            }
            for quiz, course_title, results in rows
        ]

    async def admin_list_results_async(
        self, course_id: uuid.UUID | None = None, quiz_id: uuid.UUID | None = None
    ):
        stmt = (
            select(QuizResult, Quiz.title, Quiz.course_id, User.full_name)
            .join(Quiz, Quiz.id == QuizResult.quiz_id)
            .join(User, User.id == QuizResult.student_id)
            .order_by(QuizResult.submitted_at.desc())
        )
        if course_id:
            stmt = stmt.where(Quiz.course_id == course_id)
        if quiz_id:
            stmt = stmt.where(QuizResult.quiz_id == quiz_id)
        rows = (await self.db.execute(stmt)).all()
        return [
            {
                "id": str(result.id),
                "quiz_id": str(result.quiz_id),
                "quiz_title": quiz_title,
                "course_id": str(quiz_course_id),
                "student_id": str(result.student_id),
                "student_name": student_name,
                "score": result.score,
                "total_points": result.total_points,
                "percentage": float(result.percentage),
                "attempt_number": result.attempt_number,
                "submitted_at": result.submitted_at,
            }
            for result, quiz_title, quiz_course_id, student_name in rows
        ]
