"""Integration tests for the student side of chapters and live streams."""

from datetime import timedelta
from decimal import Decimal

from sqlalchemy import func, select

from academy.core.settings import settings
from academy.db.models.database import LiveStreamAttendance
from academy.libs.formats.datetime import now as get_now


async def free_course(factory):
    teacher = await factory.user(role="TEACHER")
    course = await factory.course(teacher, is_free=True, price=Decimal("0"))
    return teacher, course


class TestChapterProgress:
    async def test_points_are_awarded_once(self, make_client, factory, db):
        _, course = await free_course(factory)
        chapter = await factory.chapter(course)
        student = await factory.user()
        client = await make_client(student)
        url = f"/api/v1/courses/{course.id}/chapters/{chapter.id}/progress"

        first = await client.put(url)
        assert first.status_code == 200, first.text
        assert first.json()["points_awarded"] == settings.CHAPTER_COMPLETION_POINTS

        second = await client.put(url)
        assert second.json()["points_awarded"] == 0

        await db.refresh(student)
        assert student.points == settings.CHAPTER_COMPLETION_POINTS

        progress = await client.get(f"/api/v1/courses/{course.id}/progress")
        assert progress.json()["completed_chapters"] == 1
        assert progress.json()["percentage"] == 100

    async def test_deleting_progress_takes_the_points_back(self, make_client, factory, db):
        _, course = await free_course(factory)
        chapter = await factory.chapter(course)
        student = await factory.user()
        client = await make_client(student)
        url = f"/api/v1/courses/{course.id}/chapters/{chapter.id}/progress"

        await client.put(url)
        res = await client.delete(url)
        assert res.status_code == 204

        await db.refresh(student)
        assert student.points == 0

        missing = await client.delete(url)
        assert missing.status_code == 404

    async def test_paid_chapter_needs_access(self, make_client, factory):
        teacher = await factory.user(role="TEACHER")
        course = await factory.course(teacher)
        locked = await factory.chapter(course)
        preview = await factory.chapter(course, is_free=True, position=0)
        client = await make_client(await factory.user())

        res = await client.get(f"/api/v1/courses/{course.id}/chapters/{locked.id}")
        assert res.status_code == 403

        res = await client.get(f"/api/v1/courses/{course.id}/chapters/{preview.id}")
        assert res.status_code == 200

    async def test_navigation_spans_quizzes_and_livestreams(self, make_client, factory):
        _, course = await free_course(factory)
        chapter = await factory.chapter(course, position=1)
        quiz = await factory.quiz(course, position=2)
        stream = await factory.livestream(course, position=1)
        client = await make_client(await factory.user())

        res = await client.get(f"/api/v1/courses/{course.id}/chapters/{chapter.id}")
        navigation = res.json()["navigation"]
        assert navigation["previous"] is None
        assert navigation["next"]["id"] == str(stream.id)
        assert navigation["next"]["type"] == "livestream"

        content = await client.get(f"/api/v1/courses/{course.id}/content")
        assert [i["id"] for i in content.json()["items"]] == [
            str(chapter.id),
            str(stream.id),
            str(quiz.id),
        ]


class TestLiveStreams:
    async def test_ended_stream_is_gone_for_students(self, make_client, factory):
        teacher, course = await free_course(factory)
        stream = await factory.livestream(
            course, scheduled_at=get_now() - timedelta(hours=3), duration=60
        )
        url = f"/api/v1/courses/{course.id}/livestreams/{stream.id}"

        student_client = await make_client(await factory.user())
        res = await student_client.get(url)
        assert res.status_code == 410

        teacher_client = await make_client(teacher)
        res = await teacher_client.get(url)
        assert res.status_code == 200
        assert res.json()["status"] == "ended"

    async def test_attendance_is_recorded_once(self, make_client, factory, db):
        _, course = await free_course(factory)
        stream = await factory.livestream(course)
        student = await factory.user()
        client = await make_client(student)
        url = f"/api/v1/courses/{course.id}/livestreams/{stream.id}/attend"

        first = await client.post(url)
        assert first.json()["created"] is True
        second = await client.post(url)
        assert second.status_code == 200
        assert second.json()["created"] is False

        count = await db.scalar(
            select(func.count(LiveStreamAttendance.id)).where(
                LiveStreamAttendance.user_id == student.id
            )
        )
        assert count == 1

        view = await client.get(f"/api/v1/courses/{course.id}/livestreams/{stream.id}")
        assert view.json()["attended"] is True
        assert view.json()["status"] == "upcoming"
