from datetime import datetime, timedelta

from fastapi import Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.enum import PurchaseStatus
from academy.db.models.database import (
    Chapter,
    Course,
    LiveStream,
    Purchase,
    Quiz,
    QuizResult,
    StudentMessage,
    User,
    UserProgress,
)
from academy.db.session import get_session
from academy.libs.formats.datetime import now as get_now
from academy.libs.formats.datetime import to_utc_naive
from academy.libs.formats.text import public_storage_url
from academy.services.shares.course_access import CourseAccessService
from academy.services.teacher.livestreams import MAX_DURATION

MESSAGES_LIMIT = 5
DEFAULT_CURRICULUM = "egyptian"


def student_curriculum(student) -> str | None:
    """A student with only a curriculum type counts as the default curriculum."""
    if not student.curriculum and student.curriculum_type:
        return DEFAULT_CURRICULUM
    return student.curriculum


def message_matches_student(message, student) -> bool:
    """Every non-null target must equal the student's value."""
    pairs = (
        (message.target_curriculum, student_curriculum(student)),
        (message.target_level, student.level),
        (message.target_language, student.language),
        (message.target_grade, student.grade),
    )
    for target, value in pairs:
        if target and target != value:
            return False
    return True


class StudentDashboardService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        access: CourseAccessService = Depends(CourseAccessService),
    ):
        self.db = db
        self.access = access

    async def _purchased_course_ids(self, user: User) -> list:
        return list(
            await self.db.scalars(
                select(Purchase.course_id).where(
                    Purchase.user_id == user.id,
                    Purchase.status == PurchaseStatus.ACTIVE.value,
                )
            )
        )

    async def get_dashboard_async(self, user: User):
        await self.access.check_user_subscription(user.id)
        course_ids = await self._purchased_course_ids(user)

        courses = []
        if course_ids:
            total_rows = dict(
                (await self.db.execute(
                    select(Chapter.course_id, func.count(Chapter.id))
                    .where(Chapter.course_id.in_(course_ids), Chapter.is_published.is_(True))
                    .group_by(Chapter.course_id)
                )).all()
            )
            done_rows = dict(
                (await self.db.execute(
                    select(Chapter.course_id, func.count(UserProgress.id))
                    .join(UserProgress, UserProgress.chapter_id == Chapter.id)
                    .where(
                        Chapter.course_id.in_(course_ids),
                        Chapter.is_published.is_(True),
                        UserProgress.user_id == user.id,
                        UserProgress.is_completed.is_(True),
                    )
                    .group_by(Chapter.course_id)
                )).all()
            )
            for course in await self.db.scalars(
                select(Course).where(Course.id.in_(course_ids)).order_by(Course.title)
            ):
                total = total_rows.get(course.id, 0)
                done = done_rows.get(course.id, 0)
                courses.append(
                    {
                        "id": str(course.id),
                        "title": course.title,
                        "image_url": public_storage_url(course.image_url),
                        "completed_chapters": done,
                        "total_chapters": total,
                        "progress": round(done * 100 / total, 2) if total else 0,
                    }
                )

        results = (
            await self.db.execute(
                select(QuizResult, Quiz.title)
                .join(Quiz, Quiz.id == QuizResult.quiz_id)
                .where(QuizResult.student_id == user.id)
                .order_by(QuizResult.submitted_at.desc())
                .limit(5)
            )
        ).all()

        upcoming = []
        if course_ids:
            current = get_now()
            streams = await self.db.scalars(
                select(LiveStream)
                .where(
                    LiveStream.course_id.in_(course_ids),
                    LiveStream.is_published.is_(True),
                    LiveStream.scheduled_at >= current - timedelta(minutes=MAX_DURATION),
                )
                .order_by(LiveStream.scheduled_at)
            )
            for stream in streams:
                if stream.scheduled_at + timedelta(minutes=stream.duration) < current:
                    continue
                upcoming.append(
                    {
                        "id": str(stream.id),
                        "course_id": str(stream.course_id),
                        "title": stream.title,
                        "scheduled_at": stream.scheduled_at,
                        "duration": stream.duration,
                    }
                )
                if len(upcoming) >= 5:
                    break

        return {
            "points": user.points or 0,
            "balance": float(user.balance or 0),
            "courses": courses,
            "recent_quiz_results": [
                {
                    "quiz_id": str(r.quiz_id),
                    "quiz_title": title,
                    "score": r.score,
                    "total_points": r.total_points,
                    "percentage": float(r.percentage),
                    "attempt_number": r.attempt_number,
                    "submitted_at": r.submitted_at,
                }
                for r, title in results
            ],
            "upcoming_livestreams": upcoming,
        }

    async def get_messages_async(self, user: User):
        messages = await self.db.scalars(
            select(StudentMessage)
            .where(StudentMessage.is_active.is_(True))
            .order_by(StudentMessage.created_at.desc())
        )
        matched = [m for m in messages if message_matches_student(m, user)]
        return [
            {"id": str(m.id), "message": m.message, "created_at": m.created_at}
            for m in matched[:MESSAGES_LIMIT]
        ]

    async def get_new_content_async(self, user: User, since: datetime | None = None):
        since = await to_utc_naive(since) if since else get_now() - timedelta(days=7)
        course_ids = await self._purchased_course_ids(user)
        if not course_ids:
            return {"since": since, "items": []}

        titles = dict(
            (await self.db.execute(
                select(Course.id, Course.title).where(Course.id.in_(course_ids))
            )).all()
        )
        items = []
        for kind, model in (("chapter", Chapter), ("quiz", Quiz), ("livestream", LiveStream)):
            rows = await self.db.scalars(
                select(model).where(
                    model.course_id.in_(course_ids),
                    model.is_published.is_(True),
                    model.created_at > since,
                )
            )
            for row in rows:
                items.append(
                    {
                        "id": str(row.id),
                        "type": kind,
                        "title": row.title,
                        "course_id": str(row.course_id),
                        "course_title": titles.get(row.course_id),
                        "created_at": row.created_at,
                    }
                )
        items.sort(key=lambda i: i["created_at"], reverse=True)
        return {"since": since, "items": items}
