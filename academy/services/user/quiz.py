import uuid
from typing import Iterable, Mapping

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from academy.core.enum import STAFF_ROLES, ContentType
from academy.db.models.database import Course, Quiz, QuizAnswer, QuizResult, User
from academy.db.session import get_session
from academy.libs.formats.datetime import now as get_now
from academy.libs.formats.text import normalize_answer
from academy.schemas.user.quiz import SubmitQuiz
from academy.services.shares.content import ContentService
from academy.services.shares.course_access import CourseAccessService
from academy.services.shares.navigation import navigation_payload


def is_correct_answer(student_answer: str | None, correct_answer: str | None) -> bool:
    if student_answer is None or not str(student_answer).strip():
        return False
    return normalize_answer(student_answer) == normalize_answer(correct_answer)


def grade_quiz(questions: Iterable, answers: Mapping[str, str | None]) -> dict:
    """
    Grade answers keyed by question id.
    Unanswered questions count as wrong.
    """
    graded = []
    score = 0
    total = 0
    for question in questions:
        points = question.points or 0
        total += points
        student_answer = answers.get(str(question.id))
        correct = is_correct_answer(student_answer, question.correct_answer)
        obtained = points if correct else 0
        score += obtained
        graded.append(
            {
                "question_id": question.id,
                "student_answer": student_answer,
                "correct_answer": question.correct_answer,
                "is_correct": correct,
                "points_obtained": obtained,
            }
        )
    percentage = round(score * 100 / total, 2) if total else 0
    return {
        "score": score,
        "total_points": total,
        "percentage": percentage,
        "answers": graded,
    }


class QuizService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        access: CourseAccessService = Depends(CourseAccessService),
        content: ContentService = Depends(ContentService),
    ):
        self.db = db
        self.access = access
        self.content = content

    # ==============================
    # 🔐 CHECKS
    # ==============================

    async def _load_quiz_for_student(
        self, course_id: uuid.UUID, quiz_id: uuid.UUID, user: User
    ) -> tuple[Course, Quiz]:
        course = await self.content.get_course_or_404(course_id)
        is_manager = user.role in STAFF_ROLES or course.user_id == user.id
        if not course.is_published and not is_manager:
            raise HTTPException(404, "Course not found")

        # 1️⃣ free course, ACTIVE purchase or matching ACTIVE subscription
        if not course.is_free:
            await self.access.require_course_access(user, course)

        # 2️⃣ the quiz itself
        quiz = await self.db.scalar(
            select(Quiz)
            .options(selectinload(Quiz.questions))
            .where(Quiz.id == quiz_id, Quiz.course_id == course.id)
        )
        if not quiz or (not quiz.is_published and not is_manager):
            raise HTTPException(404, "Quiz not found")
        return course, quiz

    async def _attempt_count(self, quiz_id: uuid.UUID, user_id: uuid.UUID) -> int:
        count = await self.db.scalar(
            select(func.count(QuizResult.id)).where(
                QuizResult.quiz_id == quiz_id, QuizResult.student_id == user_id
            )
        )
        return count or 0

    @staticmethod
    def _ensure_attempts_left(quiz: Quiz, attempts: int):
        if attempts >= quiz.max_attempts:
            raise HTTPException(
                status_code=400,
                detail={
                    "error": "MAX_ATTEMPTS_REACHED",
                    "message": "You have used all attempts for this quiz",
                    "max_attempts": quiz.max_attempts,
                    "previous_attempts": attempts,
                },
            )

    # ==============================
    # 📝 STUDENT VIEW
    # ==============================

    async def get_quiz_async(self, course_id: uuid.UUID, quiz_id: uuid.UUID, user: User):
        course, quiz = await self._load_quiz_for_student(course_id, quiz_id, user)
        attempts = await self._attempt_count(quiz.id, user.id)
        self._ensure_attempts_left(quiz, attempts)

        sequence = await self.content.load_sequence(course.id)
        return {
            "id": str(quiz.id),
            "course_id": str(course.id),
            "title": quiz.title,
            "description": quiz.description,
            "timer": quiz.timer,
            "max_attempts": quiz.max_attempts,
            "current_attempt": attempts + 1,
            "previous_attempts": attempts,
            "questions": [
                {
                    "id": str(q.id),
                    "text": q.text_,
                    "type": q.type,
                    "options": q.options,
                    "points": q.points,
                    "image_url": q.image_url,
                    "position": q.position,
                }
                for q in sorted(quiz.questions, key=lambda q: q.position)
            ],
            "navigation": navigation_payload(sequence, quiz.id, ContentType.QUIZ.value),
        }

    async def get_quiz_info_async(self, course_id: uuid.UUID, quiz_id: uuid.UUID, user: User):
        _, quiz = await self._load_quiz_for_student(course_id, quiz_id, user)
        attempts = await self._attempt_count(quiz.id, user.id)
        return {
            "id": str(quiz.id),
            "title": quiz.title,
            "description": quiz.description,
            "max_attempts": quiz.max_attempts,
            "timer": quiz.timer,
            "questions_count": len(quiz.questions),
            "current_attempt": attempts + 1,
            "previous_attempts": attempts,
        }

    async def submit_quiz_async(
        self, course_id: uuid.UUID, quiz_id: uuid.UUID, schema: SubmitQuiz, user: User
    ):
        _, quiz = await self._load_quiz_for_student(course_id, quiz_id, user)
        attempts = await self._attempt_count(quiz.id, user.id)
        self._ensure_attempts_left(quiz, attempts)

        questions = sorted(quiz.questions, key=lambda q: q.position)
        answers = {str(a.question_id): a.answer for a in schema.answers}
        graded = grade_quiz(questions, answers)

        try:
            current = get_now()
            result = QuizResult(
                student_id=user.id,
                quiz_id=quiz.id,
                score=graded["score"],
                total_points=graded["total_points"],
                percentage=graded["percentage"],
                attempt_number=attempts + 1,
                submitted_at=current,
                created_at=current,
            )
            self.db.add(result)
            await self.db.flush()
            for item in graded["answers"]:
                self.db.add(QuizAnswer(quiz_result_id=result.id, **item))
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise HTTPException(409, "This attempt was already submitted")
        except Exception as e:
            await self.db.rollback()
            logger.error(f"❌ submit quiz error: {e}")
            raise HTTPException(500, f"Error while submitting quiz: {e}")

        logger.info(
            f"📝 {user.id} quiz {quiz.id} attempt {result.attempt_number}: {result.percentage}%"
        )
        return {
            "result_id": str(result.id),
            "quiz_id": str(quiz.id),
            "attempt_number": result.attempt_number,
            "score": result.score,
            "total_points": result.total_points,
            "percentage": graded["percentage"],
            "attempts_left": max(quiz.max_attempts - result.attempt_number, 0),
        }

    async def get_latest_result_async(
        self, course_id: uuid.UUID, quiz_id: uuid.UUID, user: User
    ):
        quiz = await self.db.scalar(
            select(Quiz).where(Quiz.id == quiz_id, Quiz.course_id == course_id)
        )
        if not quiz:
            raise HTTPException(404, "Quiz not found")

        result = await self.db.scalar(
            select(QuizResult)
            .options(selectinload(QuizResult.answers).selectinload(QuizAnswer.question))
            .where(QuizResult.quiz_id == quiz.id, QuizResult.student_id == user.id)
            .order_by(QuizResult.attempt_number.desc())
            .limit(1)
        )
        if not result:
            raise HTTPException(404, "No result for this quiz")

        answers = sorted(result.answers, key=lambda a: a.question.position)
        return {
            "result_id": str(result.id),
            "quiz_id": str(quiz.id),
            "quiz_title": quiz.title,
            "attempt_number": result.attempt_number,
            "max_attempts": quiz.max_attempts,
            "score": result.score,
            "total_points": result.total_points,
            "percentage": float(result.percentage),
            "submitted_at": result.submitted_at,
            "answers": [
                {
                    "question_id": str(a.question_id),
                    "question_text": a.question.text_,
                    "type": a.question.type,
                    "options": a.question.options,
                    "student_answer": a.student_answer,
                    "correct_answer": a.correct_answer,
                    "is_correct": a.is_correct,
                    "points_obtained": a.points_obtained,
                    "points": a.question.points,
                }
                for a in answers
            ],
        }


