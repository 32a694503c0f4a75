from sqlalchemy import select

from academy.db.models.database import BalanceTransaction
from conftest import PASSWORD


class TestUsers:
    async def test_paginated_listing(self, make_client, factory):
        admin = await factory.user(role="ADMIN")
        for _ in range(3):
            await factory.user()
        client = await make_client(admin)

        res = await client.get("/api/v1/admin/users", params={"role": "user", "size": 2})
        assert res.status_code == 200
        body = res.json()
        assert body["total_items"] == 3
        assert body["total_pages"] == 2
        assert body["has_next"] is True and body["has_previous"] is False
        assert len(body["items"]) == 2
        assert {u["role"] for u in body["items"]} == {"USER"}

        res = await client.get("/api/v1/admin/users", params={"search": "admin"})
        assert [u["id"] for u in res.json()["items"]] == [str(admin.id)]

    async def test_teachers_cannot_list_users(self, make_client, factory):
        client = await make_client(await factory.user(role="TEACHER"))
        res = await client.get("/api/v1/admin/users")
        assert res.status_code == 403

    async def test_export(self, make_client, factory):
        await factory.user()
        client = await make_client(await factory.user(role="SUPERVISOR"))

        res = await client.get("/api/v1/admin/users/export")
        assert res.status_code == 200
        assert res.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        assert "students_export.xlsx" in res.headers["content-disposition"]
        # xlsx files are zip archives
        assert res.content[:2] == b"PK"

    async def test_balance_adjustment(self, make_client, factory, db):
        admin = await factory.user(role="ADMIN")
        student = await factory.user(balance=40)
        client = await make_client(admin)

        res = await client.patch(
            f"/api/v1/admin/users/{student.id}/balance", json={"new_balance": 150.5}
        )
        assert res.status_code == 200, res.text
        assert res.json() == {"user_id": str(student.id), "balance": 150.5, "change": 110.5}

        tx = await db.scalar(
            select(BalanceTransaction).where(BalanceTransaction.user_id == student.id)
        )
        assert tx.type == "ADJUSTMENT"
        assert float(tx.amount) == 110.5
        assert tx.created_by == admin.id

        res = await client.patch(
            f"/api/v1/admin/users/{student.id}/balance", json={"new_balance": -1}
        )
        assert res.status_code == 400

    async def test_balance_must_be_a_finite_number(self, make_client, factory):
        student = await factory.user(balance=40)
        client = await make_client(await factory.user(role="ADMIN"))

        for raw in (b'{"new_balance": NaN}', b'{"new_balance": Infinity}'):
            res = await client.patch(
                f"/api/v1/admin/users/{student.id}/balance",
                content=raw,
                headers={"content-type": "application/json"},
            )
            assert res.status_code == 400

    async def test_password_reset(self, make_client, factory):
        student = await factory.user()
        client = await make_client(await factory.user(role="ADMIN"))

        res = await client.patch(
            f"/api/v1/admin/users/{student.id}/password", json={"new_password": "brand-new"}
        )
        assert res.status_code == 200

        anonymous = await make_client()
        res = await anonymous.post(
            "/api/v1/auth/login",
            json={"phone_number": student.phone_number, "password": PASSWORD},
        )
        assert res.status_code == 401
        await make_client(student, password="brand-new")

    async def test_password_reset_is_admin_only(self, make_client, factory):
        student = await factory.user()
        client = await make_client(await factory.user(role="SUPERVISOR"))
        res = await client.patch(
            f"/api/v1/admin/users/{student.id}/password", json={"new_password": "brand-new"}
        )
        assert res.status_code == 403

    async def test_create_teacher_account(self, make_client, factory):
        client = await make_client(await factory.user(role="ADMIN"))
        payload = {
            "full_name": "Mona Teacher",
            "phone_number": "01222222222",
            "email": "mona@example.com",
            "password": "teach123",
        }

        res = await client.post("/api/v1/teacher/create-account", json=payload)
        assert res.status_code == 201, res.text
        assert res.json()["role"] == "TEACHER"

        res = await client.post("/api/v1/teacher/create-account", json=payload)
        assert res.status_code == 400

        teacher_client = await make_client()
        res = await teacher_client.post(
            "/api/v1/auth/login", json={"phone_number": "01222222222", "password": "teach123"}
        )
        assert res.status_code == 200


class TestPlans:
    async def test_crud(self, make_client, factory):
        client = await make_client(await factory.user(role="ADMIN"))

        created = await client.post(
            "/api/v1/admin/subscription-plans",
            json={"name": "Monthly", "price": "75", "duration": 30, "grade": "grade-5"},
        )
        assert created.status_code == 201, created.text
        plan_id = created.json()["id"]

        res = await client.patch(
            f"/api/v1/admin/subscription-plans/{plan_id}", json={"price": "60", "name": None}
        )
        assert res.json()["price"] == 60.0
        assert res.json()["name"] == "Monthly"

        listed = await client.get("/api/v1/admin/subscription-plans")
        assert listed.json()[0]["subscriptions_count"] == 0

        res = await client.delete(f"/api/v1/admin/subscription-plans/{plan_id}")
        assert res.json() == {"deleted": True, "deactivated": False}
        listed = await client.get("/api/v1/admin/subscription-plans")
        assert listed.json() == []

    async def test_used_plan_is_deactivated(self, make_client, factory):
        plan = await factory.plan()
        student = await factory.user()
        await factory.subscription(student, plan)
        client = await make_client(await factory.user(role="ADMIN"))

        res = await client.delete(f"/api/v1/admin/subscription-plans/{plan.id}")
        assert res.json() == {"deleted": False, "deactivated": True}

        student_client = await make_client(student)
        res = await student_client.get("/api/v1/subscription-plans")
        assert res.json() == []

    async def test_supervisors_cannot_manage_plans(self, make_client, factory):
        client = await make_client(await factory.user(role="SUPERVISOR"))
        res = await client.get("/api/v1/admin/subscription-plans")
        assert res.status_code == 403


class TestStaffListings:
    async def test_quiz_overview(self, make_client, factory):
        course = await factory.course(await factory.user(role="TEACHER"))
        await factory.quiz(course)
        client = await make_client(await factory.user(role="ADMIN"))

        res = await client.get("/api/v1/admin/quizzes")
        assert res.status_code == 200
        assert len(res.json()) == 1

        res = await client.get("/api/v1/admin/quiz-results")
        assert res.status_code == 200
