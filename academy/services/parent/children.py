from fastapi import Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.enum import PurchaseStatus, UserRole
from academy.db.models.database import Chapter, Purchase, Quiz, QuizResult, User, UserProgress
from academy.db.session import get_session


def average_best_percentage(best_by_quiz: dict) -> int:
    """Mean of each quiz's best percentage, rounded; 0 with no results."""
    if not best_by_quiz:
        return 0
    values = [float(v) for v in best_by_quiz.values()]
    return round(sum(values) / len(values))


class ParentService:
    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    async def _children(self, parent: User) -> list[User]:
        return list(
            await self.db.scalars(
                select(User)
                .where(
                    User.parent_phone_number == parent.phone_number,
                    User.role == UserRole.USER.value,
                )
                .order_by(User.full_name)
            )
        )

    async def _child_stats(self, child: User) -> dict:
        course_ids = list(
            await self.db.scalars(
                select(Purchase.course_id).where(
                    Purchase.user_id == child.id,
                    Purchase.status == PurchaseStatus.ACTIVE.value,
                )
            )
        )

        total_chapters = completed_chapters = total_quizzes = 0
        if course_ids:
            total_chapters = await self.db.scalar(
                select(func.count(Chapter.id)).where(
                    Chapter.course_id.in_(course_ids), Chapter.is_published.is_(True)
                )
            ) or 0
            completed_chapters = await self.db.scalar(
                select(func.count(UserProgress.id))
                .join(Chapter, Chapter.id == UserProgress.chapter_id)
                .where(
                    Chapter.course_id.in_(course_ids),
                    UserProgress.user_id == child.id,
                    UserProgress.is_completed.is_(True),
                )
            ) or 0
            total_quizzes = await self.db.scalar(
                select(func.count(Quiz.id)).where(
                    Quiz.course_id.in_(course_ids), Quiz.is_published.is_(True)
                )
            ) or 0

        best_by_quiz = dict(
            (await self.db.execute(
                select(QuizResult.quiz_id, func.max(QuizResult.percentage))
                .where(QuizResult.student_id == child.id)
                .group_by(QuizResult.quiz_id)
            )).all()
        )
        recent = (
            await self.db.execute(
                select(QuizResult, Quiz.title)
                .join(Quiz, Quiz.id == QuizResult.quiz_id)
                .where(QuizResult.student_id == child.id)
                .order_by(QuizResult.submitted_at.desc())
                .limit(5)
            )
        ).all()

        return {
            "id": str(child.id),
            "full_name": child.full_name,
            "grade": child.grade,
            "curriculum": child.curriculum,
            "level": child.level,
            "points": child.points or 0,
            "courses_count": len(course_ids),
            "completed_chapters": completed_chapters,
            "total_chapters": total_chapters,
            "total_quizzes": total_quizzes,
            "completed_quizzes": len(best_by_quiz),
            "average_score": average_best_percentage(best_by_quiz),
            "recent_results": [
                {
                    "quiz_id": str(r.quiz_id),
                    "quiz_title": title,
                    "percentage": float(r.percentage),
                    "score": r.score,
                    "total_points": r.total_points,
                    "submitted_at": r.submitted_at,
                }
                for r, title in recent
            ],
        }

    async def get_children_async(self, parent: User):
        return [await self._child_stats(child) for child in await self._children(parent)]
