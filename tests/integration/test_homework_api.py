"""Integration tests for chapter homework and activities, student and teacher sides."""

from decimal import Decimal

from academy.db.models.database import Activity, Purchase


async def enrolled(db, factory, course):
    student = await factory.user(full_name="Student One")
    db.add(Purchase(user_id=student.id, course_id=course.id, price_paid=Decimal("100.00")))
    await db.commit()
    return student


class TestStudentHomework:
    async def test_submit_then_resubmit_replaces_image(self, db, make_client, factory):
        course = await factory.course(await factory.user(role="TEACHER"))
        chapter = await factory.chapter(course)
        client = await make_client(await enrolled(db, factory, course))
        url = f"/api/v1/courses/{course.id}/chapters/{chapter.id}/homework"

        res = await client.get(url)
        assert res.status_code == 200
        assert res.json() is None

        first = await client.post(url, json={"image_url": "homework/page-1.png"})
        assert first.status_code == 200, first.text
        second = await client.post(url, json={"image_url": "homework/page-2.png"})
        assert second.json()["id"] == first.json()["id"]

        res = await client.get(url)
        assert res.json()["image_url"] == "homework/page-2.png"
        assert res.json()["corrected_image_urls"] == []

    async def test_image_is_required(self, db, make_client, factory):
        course = await factory.course(await factory.user(role="TEACHER"))
        chapter = await factory.chapter(course)
        client = await make_client(await enrolled(db, factory, course))

        res = await client.post(
            f"/api/v1/courses/{course.id}/chapters/{chapter.id}/homework", json={"image_url": "  "}
        )
        assert res.status_code == 400

    async def test_paid_chapter_needs_access(self, make_client, factory):
        course = await factory.course(await factory.user(role="TEACHER"))
        paid = await factory.chapter(course)
        free = await factory.chapter(course, position=2, is_free=True)
        client = await make_client(await factory.user())

        res = await client.post(
            f"/api/v1/courses/{course.id}/chapters/{paid.id}/homework",
            json={"image_url": "homework/page-1.png"},
        )
        assert res.status_code == 403
        res = await client.post(
            f"/api/v1/courses/{course.id}/chapters/{free.id}/homework",
            json={"image_url": "homework/page-1.png"},
        )
        assert res.status_code == 200

    async def test_chapter_from_another_course(self, db, make_client, factory):
        teacher = await factory.user(role="TEACHER")
        course = await factory.course(teacher)
        other = await factory.chapter(await factory.course(teacher))
        client = await make_client(await enrolled(db, factory, course))

        res = await client.get(f"/api/v1/courses/{course.id}/chapters/{other.id}/homework")
        assert res.status_code == 404


class TestStudentActivities:
    async def test_list_and_submit(self, db, make_client, factory):
        course = await factory.course(await factory.user(role="TEACHER"))
        chapter = await factory.chapter(course)
        db.add(Activity(chapter_id=chapter.id, title="Draw a triangle"))
        await db.commit()
        client = await make_client(await enrolled(db, factory, course))
        base = f"/api/v1/courses/{course.id}/chapters/{chapter.id}"

        activities = (await client.get(f"{base}/activities")).json()
        assert [a["title"] for a in activities] == ["Draw a triangle"]
        assert activities[0]["is_required"] is True
        activity_id = activities[0]["id"]

        res = await client.get(f"{base}/activities/{activity_id}/submission")
        assert res.json() is None
        res = await client.post(
            f"{base}/activities/{activity_id}/submission", json={"image_url": "activities/triangle.png"}
        )
        assert res.status_code == 200, res.text
        res = await client.get(f"{base}/activities/{activity_id}/submission")
        assert res.json()["image_url"] == "activities/triangle.png"

    async def test_activity_must_belong_to_chapter(self, db, make_client, factory):
        course = await factory.course(await factory.user(role="TEACHER"))
        chapter = await factory.chapter(course)
        elsewhere = await factory.chapter(course, position=2)
        activity = Activity(chapter_id=elsewhere.id, title="Elsewhere")
        db.add(activity)
        await db.commit()
        client = await make_client(await enrolled(db, factory, course))

        res = await client.post(
            f"/api/v1/courses/{course.id}/chapters/{chapter.id}/activities/{activity.id}/submission",
            json={"image_url": "activities/x.png"},
        )
        assert res.status_code == 404


class TestTeacherHomework:
    async def test_review_and_correct(self, db, make_client, factory):
        teacher = await factory.user(role="TEACHER")
        course = await factory.course(teacher)
        chapter = await factory.chapter(course)
        student = await enrolled(db, factory, course)
        student_client = await make_client(student)
        await student_client.post(
            f"/api/v1/courses/{course.id}/chapters/{chapter.id}/homework",
            json={"image_url": "homework/page-1.png"},
        )

        client = await make_client(teacher)
        listed = (await client.get(f"/api/v1/teacher/homework/{chapter.id}")).json()
        assert len(listed) == 1
        assert listed[0]["student"]["full_name"] == "Student One"
        assert listed[0]["chapter"]["course"]["id"] == str(course.id)

        homework_id = listed[0]["id"]
        for page in ("fixed-1.png", "fixed-2.png"):
            res = await client.patch(
                f"/api/v1/teacher/homework/{chapter.id}",
                json={"homework_id": homework_id, "corrected_image_url": page},
            )
            assert res.status_code == 200, res.text
        assert res.json()["corrected_image_urls"] == ["fixed-1.png", "fixed-2.png"]

        res = await client.patch(f"/api/v1/teacher/homework/{chapter.id}", json={"homework_id": homework_id})
        assert res.status_code == 400

    async def test_other_teachers_are_refused(self, make_client, factory):
        course = await factory.course(await factory.user(role="TEACHER"))
        chapter = await factory.chapter(course)
        client = await make_client(await factory.user(role="TEACHER"))

        res = await client.get(f"/api/v1/teacher/homework/{chapter.id}")
        assert res.status_code == 403
        res = await client.post(f"/api/v1/teacher/chapters/{chapter.id}/activities", json={"title": "X"})
        assert res.status_code == 403

    async def test_students_are_refused(self, make_client, factory):
        chapter = await factory.chapter(await factory.course(await factory.user(role="TEACHER")))
        client = await make_client(await factory.user())
        res = await client.get(f"/api/v1/teacher/homework/{chapter.id}")
        assert res.status_code == 403


class TestTeacherActivities:
    async def test_create_list_and_submissions(self, db, make_client, factory):
        teacher = await factory.user(role="TEACHER")
        course = await factory.course(teacher)
        chapter = await factory.chapter(course)
        client = await make_client(teacher)

        res = await client.post(f"/api/v1/teacher/chapters/{chapter.id}/activities", json={"title": "  "})
        assert res.status_code == 400
        created = await client.post(
            f"/api/v1/teacher/chapters/{chapter.id}/activities",
            json={"title": "Colour the map", "description": "Use three colours"},
        )
        assert created.status_code == 201, created.text
        assert created.json()["is_required"] is True
        activity_id = created.json()["id"]

        student_client = await make_client(await enrolled(db, factory, course))
        await student_client.post(
            f"/api/v1/courses/{course.id}/chapters/{chapter.id}/activities/{activity_id}/submission",
            json={"image_url": "activities/map.png"},
        )

        listed = (await client.get(f"/api/v1/teacher/chapters/{chapter.id}/activities")).json()
        assert listed[0]["submissions_count"] == 1

        submissions = (await client.get(f"/api/v1/teacher/activities/{activity_id}/submissions")).json()
        assert submissions[0]["image_url"] == "activities/map.png"
        assert submissions[0]["activity"]["title"] == "Colour the map"

    async def test_per_student_views_are_scoped_to_own_courses(self, db, make_client, factory):
        teacher = await factory.user(role="TEACHER")
        mine = await factory.course(teacher)
        theirs = await factory.course(await factory.user(role="TEACHER"))
        my_chapter = await factory.chapter(mine)
        their_chapter = await factory.chapter(theirs)

        student = await factory.user()
        db.add_all(
            [
                Purchase(user_id=student.id, course_id=mine.id, price_paid=Decimal("100.00")),
                Purchase(user_id=student.id, course_id=theirs.id, price_paid=Decimal("100.00")),
            ]
        )
        await db.commit()
        student_client = await make_client(student)
        for course, chapter in ((mine, my_chapter), (theirs, their_chapter)):
            res = await student_client.post(
                f"/api/v1/courses/{course.id}/chapters/{chapter.id}/homework",
                json={"image_url": f"homework/{chapter.id}.png"},
            )
            assert res.status_code == 200

        client = await make_client(teacher)
        res = await client.get(f"/api/v1/teacher/students/{student.id}/homework")
        assert [h["chapter"]["id"] for h in res.json()] == [str(my_chapter.id)]

        admin_client = await make_client(await factory.user(role="ADMIN"))
        res = await admin_client.get(f"/api/v1/teacher/students/{student.id}/homework")
        assert len(res.json()) == 2
        res = await admin_client.get(f"/api/v1/teacher/students/{student.id}/activities")
        assert res.json() == []
