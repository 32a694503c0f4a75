"""Integration tests for course authoring: courses, chapters, quizzes, live streams."""

from datetime import timedelta

from sqlalchemy import func, select

from academy.db.models.database import Question, Quiz
from academy.libs.formats.datetime import now as get_now


class TestCourses:
    async def test_create_publish_flow(self, make_client, factory):
        teacher = await factory.user(role="TEACHER")
        client = await make_client(teacher)

        created = await client.post(
            "/api/v1/teacher/courses",
            json={"title": "Algebra", "price": "120.00", "target_curriculum": "egyptian"},
        )
        assert created.status_code == 201, created.text
        course_id = created.json()["id"]
        assert created.json()["is_published"] is False

        # nothing published yet
        res = await client.patch(f"/api/v1/courses/{course_id}/publish")
        assert res.status_code == 400

        chapter = await client.post(
            f"/api/v1/courses/{course_id}/chapters",
            json={"title": "Intro", "video_url": "https://video.example.com/intro"},
        )
        assert chapter.status_code == 201
        chapter_id = chapter.json()["id"]
        assert chapter.json()["position"] == 1

        res = await client.patch(f"/api/v1/courses/{course_id}/chapters/{chapter_id}/publish")
        assert res.json()["is_published"] is True

        res = await client.patch(f"/api/v1/courses/{course_id}/publish")
        assert res.status_code == 200
        assert res.json()["is_published"] is True

        mine = await client.get("/api/v1/teacher/courses")
        assert [c["id"] for c in mine.json()] == [course_id]

    async def test_students_cannot_author(self, make_client, factory):
        client = await make_client(await factory.user())
        res = await client.post("/api/v1/teacher/courses", json={"title": "Nope"})
        assert res.status_code == 403

    async def test_other_teachers_cannot_edit_or_delete(self, make_client, factory):
        owner = await factory.user(role="TEACHER")
        course = await factory.course(owner)
        client = await make_client(await factory.user(role="TEACHER"))

        res = await client.patch(f"/api/v1/courses/{course.id}", json={"title": "Mine now"})
        assert res.status_code == 403
        res = await client.delete(f"/api/v1/courses/{course.id}")
        assert res.status_code == 403

    async def test_delete_course(self, make_client, factory):
        owner = await factory.user(role="TEACHER")
        course = await factory.course(owner)
        await factory.chapter(course)
        await factory.quiz(course)
        client = await make_client(owner)

        res = await client.delete(f"/api/v1/courses/{course.id}")
        assert res.status_code == 200
        res = await client.get(f"/api/v1/courses/{course.id}")
        assert res.status_code == 404

    async def test_attachments_are_staff_only(self, make_client, factory):
        owner = await factory.user(role="TEACHER")
        course = await factory.course(owner)
        payload = {"name": "Worksheet", "url": "files/worksheet.pdf"}

        teacher_client = await make_client(owner)
        res = await teacher_client.post(f"/api/v1/admin/courses/{course.id}/attachments", json=payload)
        assert res.status_code == 403

        admin_client = await make_client(await factory.user(role="ADMIN"))
        res = await admin_client.post(f"/api/v1/admin/courses/{course.id}/attachments", json=payload)
        assert res.status_code == 201, res.text

        detail = await admin_client.get(f"/api/v1/courses/{course.id}")
        assert [a["name"] for a in detail.json()["attachments"]] == ["Worksheet"]


class TestChapters:
    async def test_publish_requires_video(self, make_client, factory):
        owner = await factory.user(role="TEACHER")
        course = await factory.course(owner)
        chapter = await factory.chapter(course, video_url=None, is_published=False)
        client = await make_client(owner)

        res = await client.patch(f"/api/v1/courses/{course.id}/chapters/{chapter.id}/publish")
        assert res.status_code == 400

    async def test_reorder(self, make_client, factory):
        owner = await factory.user(role="TEACHER")
        course = await factory.course(owner)
        first = await factory.chapter(course, position=1)
        second = await factory.chapter(course, position=2)
        client = await make_client(owner)

        res = await client.put(
            f"/api/v1/courses/{course.id}/chapters/reorder",
            json={
                "chapters": [
                    {"id": str(first.id), "position": 2},
                    {"id": str(second.id), "position": 1},
                ]
            },
        )
        assert res.status_code == 200
        listed = await client.get(f"/api/v1/courses/{course.id}/chapters")
        assert [c["id"] for c in listed.json()] == [str(second.id), str(first.id)]

    async def test_reorder_rejects_foreign_chapters(self, make_client, factory):
        owner = await factory.user(role="TEACHER")
        course = await factory.course(owner)
        other = await factory.course(owner)
        foreign = await factory.chapter(other)
        client = await make_client(owner)

        res = await client.put(
            f"/api/v1/courses/{course.id}/chapters/reorder",
            json={"chapters": [{"id": str(foreign.id), "position": 1}]},
        )
        assert res.status_code == 400


class TestQuizzes:
    async def test_create_update_publish_delete(self, make_client, factory, db):
        owner = await factory.user(role="TEACHER")
        course = await factory.course(owner)
        await factory.chapter(course, position=1)
        client = await make_client(owner)

        created = await client.post(
            "/api/v1/teacher/quizzes",
            json={
                "course_id": str(course.id),
                "title": "Check-in",
                "questions": [
                    {"text": "Pick one", "type": "MULTIPLE_CHOICE", "options": ["a", "b"], "correct_answer": "a"},
                    {"text": "Sky is blue", "type": "TRUE_FALSE", "options": ["x"], "correct_answer": "true"},
                ],
            },
        )
        assert created.status_code == 201, created.text
        quiz = created.json()
        assert quiz["position"] == 2
        assert [q["position"] for q in quiz["questions"]] == [1, 2]
        assert quiz["questions"][1]["options"] is None

        updated = await client.patch(
            f"/api/v1/courses/{course.id}/quizzes/{quiz['id']}",
            json={"questions": [{"text": "Name it", "type": "SHORT_ANSWER", "correct_answer": "x"}]},
        )
        assert updated.status_code == 200, updated.text
        assert [q["text"] for q in updated.json()["questions"]] == ["Name it"]
        count = await db.scalar(select(func.count(Question.id)))
        assert count == 1

        published = await client.patch(f"/api/v1/teacher/quizzes/{quiz['id']}/publish")
        assert published.json()["is_published"] is True

        deleted = await client.delete(f"/api/v1/courses/{course.id}/quizzes/{quiz['id']}")
        assert deleted.status_code == 204
        assert await db.scalar(select(func.count(Quiz.id))) == 0

    async def test_multiple_choice_needs_options(self, make_client, factory):
        owner = await factory.user(role="TEACHER")
        course = await factory.course(owner)
        client = await make_client(owner)

        res = await client.post(
            "/api/v1/teacher/quizzes",
            json={
                "course_id": str(course.id),
                "title": "Broken",
                "questions": [{"text": "Pick", "type": "MULTIPLE_CHOICE", "correct_answer": "a"}],
            },
        )
        assert res.status_code == 400

    async def test_empty_quiz_cannot_be_published(self, make_client, factory):
        owner = await factory.user(role="TEACHER")
        course = await factory.course(owner)
        client = await make_client(owner)

        created = await client.post(
            "/api/v1/teacher/quizzes", json={"course_id": str(course.id), "title": "Empty"}
        )
        res = await client.patch(f"/api/v1/teacher/quizzes/{created.json()['id']}/publish")
        assert res.status_code == 400


class TestTeacherLiveStreams:
    async def test_duration_limits(self, make_client, factory):
        owner = await factory.user(role="TEACHER")
        course = await factory.course(owner)
        client = await make_client(owner)
        payload = {
            "course_id": str(course.id),
            "title": "Revision",
            "meeting_url": "https://meet.example.com/r",
            "scheduled_at": (get_now() + timedelta(days=1)).isoformat(),
        }

        res = await client.post("/api/v1/teacher/livestreams", json={**payload, "duration": 601})
        assert res.status_code == 400

        res = await client.post("/api/v1/teacher/livestreams", json={**payload, "duration": 90})
        assert res.status_code == 201, res.text
        stream_id = res.json()["id"]

        toggled = await client.patch(f"/api/v1/teacher/livestreams/{stream_id}/publish")
        assert toggled.json()["is_published"] is True

        listed = await client.get("/api/v1/teacher/livestreams")
        assert [s["id"] for s in listed.json()] == [stream_id]

    async def test_foreign_course_is_rejected(self, make_client, factory):
        owner = await factory.user(role="TEACHER")
        course = await factory.course(owner)
        client = await make_client(await factory.user(role="TEACHER"))

        res = await client.post(
            "/api/v1/teacher/livestreams",
            json={
                "course_id": str(course.id),
                "title": "Hijack",
                "meeting_url": "https://meet.example.com/h",
                "scheduled_at": (get_now() + timedelta(days=1)).isoformat(),
            },
        )
        assert res.status_code == 403


class TestPartialUpdates:
    async def test_null_required_fields_are_left_alone(self, make_client, factory):
        owner = await factory.user(role="TEACHER")
        course = await factory.course(owner)
        chapter = await factory.chapter(course)
        quiz = await factory.quiz(course, max_attempts=3)
        client = await make_client(owner)

        res = await client.patch(
            f"/api/v1/courses/{course.id}",
            json={"title": None, "price": None, "is_free": None, "description": "Updated"},
        )
        assert res.status_code == 200, res.text
        assert res.json()["title"] == course.title
        assert res.json()["price"] == 100.0
        assert res.json()["description"] == "Updated"

        res = await client.patch(
            f"/api/v1/courses/{course.id}/chapters/{chapter.id}",
            json={"title": None, "is_free": None},
        )
        assert res.status_code == 200, res.text
        assert res.json()["title"] == chapter.title

        res = await client.patch(
            f"/api/v1/courses/{course.id}/quizzes/{quiz.id}",
            json={"title": None, "max_attempts": None},
        )
        assert res.status_code == 200, res.text
        assert res.json()["title"] == quiz.title
        assert res.json()["max_attempts"] == 3
