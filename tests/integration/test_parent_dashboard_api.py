from decimal import Decimal

from academy.db.models.database import Purchase


async def enroll(db, student, course):
    db.add(Purchase(user_id=student.id, course_id=course.id, price_paid=Decimal("100.00")))
    await db.commit()


class TestParent:
    async def test_children_progress(self, make_client, factory, db):
        parent = await factory.user(role="PARENT")
        child = await factory.user(parent_phone_number=parent.phone_number, grade="grade-5")
        await factory.user(parent_phone_number="01999999999")
        course = await factory.course(await factory.user(role="TEACHER"))
        await factory.chapter(course)
        quiz = await factory.quiz(course, questions=[("2 + 2 = ?", "4", 1), ("3 + 3 = ?", "6", 1)])
        await enroll(db, child, course)

        child_client = await make_client(child)
        res = await child_client.post(
            f"/api/v1/courses/{course.id}/quizzes/{quiz.id}/submit",
            json={"answers": [{"question_id": str(quiz.questions[0].id), "answer": "4"}]},
        )
        assert res.status_code == 200, res.text

        parent_client = await make_client(parent)
        res = await parent_client.get("/api/v1/parent/children")
        assert res.status_code == 200
        [stats] = res.json()
        assert stats["id"] == str(child.id)
        assert stats["courses_count"] == 1
        assert stats["total_chapters"] == 1
        assert stats["completed_chapters"] == 0
        assert stats["total_quizzes"] == 1
        assert stats["completed_quizzes"] == 1
        assert stats["average_score"] == 50
        assert stats["recent_results"][0]["quiz_title"] == quiz.title

    async def test_students_are_not_parents(self, make_client, factory):
        client = await make_client(await factory.user())
        res = await client.get("/api/v1/parent/children")
        assert res.status_code == 403


class TestCertificates:
    async def test_assign_and_view(self, make_client, factory):
        parent = await factory.user(role="PARENT")
        child = await factory.user(parent_phone_number=parent.phone_number)
        teacher = await factory.user(role="TEACHER")
        teacher_client = await make_client(teacher)

        res = await teacher_client.post("/api/v1/certificates", json={"student_id": str(child.id)})
        assert res.status_code == 400

        res = await teacher_client.post(
            "/api/v1/certificates",
            json={
                "student_id": str(child.id),
                "image_url": "https://cdn.example.com/cert.png",
                "title": "Top of the class",
            },
        )
        assert res.status_code == 201, res.text
        cert = res.json()
        assert cert["student_name"] == child.full_name
        assert cert["assigned_by_name"] == teacher.full_name

        child_client = await make_client(child)
        mine = await child_client.get("/api/v1/certificates/my-certificates")
        assert [c["id"] for c in mine.json()] == [cert["id"]]

        parent_client = await make_client(parent)
        theirs = await parent_client.get("/api/v1/parent/certificates")
        assert [c["id"] for c in theirs.json()] == [cert["id"]]

        other_client = await make_client(await factory.user(role="TEACHER"))
        assert (await other_client.get("/api/v1/certificates")).json() == []
        res = await other_client.delete(f"/api/v1/certificates/{cert['id']}")
        assert res.status_code == 403

        res = await teacher_client.delete(f"/api/v1/certificates/{cert['id']}")
        assert res.status_code == 200

    async def test_only_students_receive_certificates(self, make_client, factory):
        teacher_client = await make_client(await factory.user(role="TEACHER"))
        parent = await factory.user(role="PARENT")
        res = await teacher_client.post(
            "/api/v1/certificates",
            json={"student_id": str(parent.id), "image_url": "https://cdn.example.com/c.png"},
        )
        assert res.status_code == 404


class TestStudentDashboard:
    async def test_dashboard(self, make_client, factory, db):
        student = await factory.user(points=7)
        course = await factory.course(await factory.user(role="TEACHER"))
        await factory.chapter(course)
        stream = await factory.livestream(course)
        await enroll(db, student, course)

        client = await make_client(student)
        res = await client.get("/api/v1/dashboard/student")
        assert res.status_code == 200, res.text
        body = res.json()
        assert body["points"] == 7
        assert body["courses"][0]["total_chapters"] == 1
        assert body["courses"][0]["progress"] == 0
        assert [s["id"] for s in body["upcoming_livestreams"]] == [str(stream.id)]

        res = await client.get("/api/v1/student/new-content")
        kinds = sorted(item["type"] for item in res.json()["items"])
        assert kinds == ["chapter", "livestream"]

    async def test_targeted_messages(self, make_client, factory):
        staff_client = await make_client(await factory.user(role="SUPERVISOR"))
        for payload in (
            {"message": "Everyone"},
            {"message": "Grade five", "target_grade": "grade-5"},
            {"message": "Grade six", "target_grade": "grade-6"},
            {"message": "British only", "target_curriculum": "british"},
        ):
            res = await staff_client.post("/api/v1/admin/messages", json=payload)
            assert res.status_code == 201

        student = await factory.user(grade="grade-5", curriculum="egyptian")
        client = await make_client(student)
        res = await client.get("/api/v1/dashboard/messages")
        assert sorted(m["message"] for m in res.json()) == ["Everyone", "Grade five"]

        listed = await staff_client.get("/api/v1/admin/messages")
        assert len(listed.json()) == 4
