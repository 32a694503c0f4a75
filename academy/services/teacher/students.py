import uuid

from fastapi import Depends, HTTPException
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.enum import STAFF_ROLES, PurchaseStatus, UserRole
from academy.db.models.database import Chapter, Course, Purchase, Quiz, QuizResult, User, UserProgress
from academy.db.session import get_session


class TeacherStudentService:
    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    async def _own_course_ids(self, teacher: User) -> list | None:
        """None for staff: every course."""
        if teacher.role in STAFF_ROLES:
            return None
        return list(
            await self.db.scalars(select(Course.id).where(Course.user_id == teacher.id))
        )

    async def list_students_async(self, teacher: User, search: str | None = None):
        own = await self._own_course_ids(teacher)
        counts = (
            select(Purchase.user_id, func.count(Purchase.id).label("courses_count"))
            .where(Purchase.status == PurchaseStatus.ACTIVE.value)
        )
        if own is not None:
            counts = counts.where(Purchase.course_id.in_(own))
        counts = counts.group_by(Purchase.user_id).subquery()

        stmt = (
            select(User, func.coalesce(counts.c.courses_count, 0))
            .outerjoin(counts, counts.c.user_id == User.id)
            .where(User.role == UserRole.USER.value)
            .order_by(User.full_name)
        )
        if own is not None:
            stmt = stmt.where(counts.c.user_id.is_not(None))
        if search:
            pattern = f"%{search.strip()}%"
            stmt = stmt.where(User.full_name.ilike(pattern) | User.phone_number.ilike(pattern))

        rows = (await self.db.execute(stmt)).all()
        return [
            {
                "id": str(user.id),
                "full_name": user.full_name,
                "phone_number": user.phone_number,
                "email": user.email,
                "grade": user.grade,
                "curriculum": user.curriculum,
                "level": user.level,
                "points": user.points or 0,
                "courses_count": courses_count,
            }
            for user, courses_count in rows
        ]

    async def get_student_progress_async(self, teacher: User, student_id: uuid.UUID):
        student = await self.db.get(User, student_id)
        if not student or student.role != UserRole.USER.value:
            raise HTTPException(404, "Student not found")

        own = await self._own_course_ids(teacher)
        stmt = (
            select(Course)
            .join(Purchase, Purchase.course_id == Course.id)
            .where(
                Purchase.user_id == student.id,
                Purchase.status == PurchaseStatus.ACTIVE.value,
            )
            .order_by(Course.title)
        )
        if own is not None:
            stmt = stmt.where(Course.id.in_(own))
        courses = list(await self.db.scalars(stmt))
        if own is not None and not courses:
            raise HTTPException(403, "This student is not enrolled in your courses")

        items = []
        for course in courses:
            chapters = list(
                await self.db.scalars(
                    select(Chapter)
                    .where(Chapter.course_id == course.id, Chapter.is_published.is_(True))
                    .order_by(Chapter.position)
                )
            )
            completed = set(
                await self.db.scalars(
                    select(UserProgress.chapter_id).where(
                        UserProgress.user_id == student.id,
                        UserProgress.is_completed.is_(True),
                        UserProgress.chapter_id.in_([c.id for c in chapters]),
                    )
                )
            )
            results = (
                await self.db.execute(
                    select(QuizResult, Quiz.title)
                    .join(Quiz, Quiz.id == QuizResult.quiz_id)
                    .where(Quiz.course_id == course.id, QuizResult.student_id == student.id)
                    .order_by(Quiz.position, QuizResult.attempt_number)
                )
            ).all()
            total = len(chapters)
            items.append(
                {
                    "course_id": str(course.id),
                    "course_title": course.title,
                    "completed_chapters": len(completed),
                    "total_chapters": total,
                    "progress": round(len(completed) * 100 / total, 2) if total else 0,
                    "chapters": [
                        {
                            "id": str(c.id),
                            "title": c.title,
                            "is_completed": c.id in completed,
                        }
                        for c in chapters
                    ],
                    "quiz_results": [
                        {
                            "quiz_id": str(r.quiz_id),
                            "quiz_title": title,
                            "attempt_number": r.attempt_number,
                            "score": r.score,
                            "total_points": r.total_points,
                            "percentage": float(r.percentage),
                            "submitted_at": r.submitted_at,
                        }
                        for r, title in results
                    ],
                }
            )
        return {
            "student": {
                "id": str(student.id),
                "full_name": student.full_name,
                "grade": student.grade,
                "points": student.points or 0,
            },
            "courses": items,
        }
