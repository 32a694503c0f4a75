from decimal import Decimal

from academy.db.models.database import Purchase


def slot(course, **kwargs):
    payload = {
        "course_id": str(course.id),
        "day_of_week": 1,
        "start_time": "16:00",
        "end_time": "17:30",
        "title": "Weekly session",
    }
    payload.update(kwargs)
    return payload


async def test_admin_manages_timetables(make_client, factory):
    course = await factory.course(await factory.user(role="TEACHER"))
    client = await make_client(await factory.user(role="ADMIN"))

    created = await client.post("/api/v1/timetables", json=slot(course))
    assert created.status_code == 201, created.text
    row = created.json()
    assert row["day_name"] == "Monday"
    assert row["course_title"] == course.title

    res = await client.patch(f"/api/v1/timetables/{row['id']}", json={"end_time": "15:00"})
    assert res.status_code == 400

    res = await client.patch(f"/api/v1/timetables/{row['id']}", json={"day_of_week": 0})
    assert res.json()["day_name"] == "Sunday"

    res = await client.delete(f"/api/v1/timetables/{row['id']}")
    assert res.status_code == 204
    res = await client.get(f"/api/v1/timetables/{row['id']}")
    assert res.status_code == 404


async def test_invalid_ranges_are_rejected(make_client, factory):
    course = await factory.course(await factory.user(role="TEACHER"))
    client = await make_client(await factory.user(role="ADMIN"))

    res = await client.post("/api/v1/timetables", json=slot(course, end_time="16:00"))
    assert res.status_code == 400
    res = await client.post("/api/v1/timetables", json=slot(course, start_time="4pm"))
    assert res.status_code == 400


async def test_only_admins_write(make_client, factory):
    teacher = await factory.user(role="TEACHER")
    course = await factory.course(teacher)
    client = await make_client(teacher)

    res = await client.post("/api/v1/timetables", json=slot(course))
    assert res.status_code == 403


async def test_visibility_by_role(make_client, factory, db):
    teacher = await factory.user(role="TEACHER")
    own = await factory.course(teacher)
    other = await factory.course(await factory.user(role="TEACHER"))
    student = await factory.user()
    db.add(Purchase(user_id=student.id, course_id=other.id, price_paid=Decimal("100.00")))
    await db.commit()

    admin_client = await make_client(await factory.user(role="ADMIN"))
    for course in (own, other):
        res = await admin_client.post("/api/v1/timetables", json=slot(course))
        assert res.status_code == 201

    listed = await admin_client.get("/api/v1/timetables")
    assert len(listed.json()) == 2

    teacher_client = await make_client(teacher)
    listed = await teacher_client.get("/api/v1/timetables")
    assert [r["course_id"] for r in listed.json()] == [str(own.id)]

    student_client = await make_client(student)
    listed = await student_client.get("/api/v1/timetables")
    assert [r["course_id"] for r in listed.json()] == [str(other.id)]
    res = await student_client.get(f"/api/v1/timetables/course/{other.id}")
    assert res.status_code == 200 and len(res.json()) == 1
    res = await student_client.get(f"/api/v1/timetables/course/{own.id}")
    assert res.status_code == 403

    parent_client = await make_client(await factory.user(role="PARENT"))
    res = await parent_client.get("/api/v1/timetables")
    assert res.status_code == 403
