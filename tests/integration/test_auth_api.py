"""Integration tests for registration, login sessions and suspension."""

from sqlalchemy import select

from academy.db.models.database import User, UserSession
from conftest import PASSWORD

REGISTER_PAYLOAD = {
    "full_name": "Omar Khaled",
    "phone_number": "01011112222",
    "email": "omar@example.com",
    "parent_phone_number": "01033334444",
    "curriculum": "egyptian",
    "grade": "grade-5",
    "password": PASSWORD,
    "confirm_password": PASSWORD,
    "recaptcha_token": "token",
}


class TestRegister:
    async def test_register_creates_student_and_parent(self, make_client, db):
        client = await make_client()
        res = await client.post("/api/v1/auth/register", json=REGISTER_PAYLOAD)
        assert res.status_code == 201, res.text
        assert res.json() == {"success": True}

        student = await db.scalar(select(User).where(User.phone_number == "01011112222"))
        parent = await db.scalar(select(User).where(User.phone_number == "01033334444"))
        assert student.role == "USER"
        assert student.parent_phone_number == parent.phone_number
        assert parent.role == "PARENT"
        assert parent.full_name == "Omar's Parent"

        # the parent shares the student's password
        login = await client.post(
            "/api/v1/auth/login",
            json={"phone_number": "01033334444", "password": PASSWORD},
        )
        assert login.status_code == 200

    async def test_password_mismatch(self, make_client):
        client = await make_client()
        res = await client.post(
            "/api/v1/auth/register",
            json={**REGISTER_PAYLOAD, "confirm_password": "different"},
        )
        assert res.status_code == 400

    async def test_same_phone_for_parent_is_rejected(self, make_client):
        client = await make_client()
        res = await client.post(
            "/api/v1/auth/register",
            json={**REGISTER_PAYLOAD, "parent_phone_number": "01011112222"},
        )
        assert res.status_code == 400

    async def test_duplicate_phone(self, make_client, factory):
        await factory.user(phone_number="01011112222")
        client = await make_client()
        res = await client.post("/api/v1/auth/register", json=REGISTER_PAYLOAD)
        assert res.status_code == 400

    async def test_missing_recaptcha_token(self, make_client):
        client = await make_client()
        res = await client.post(
            "/api/v1/auth/register", json={**REGISTER_PAYLOAD, "recaptcha_token": None}
        )
        assert res.status_code == 400


class TestLogin:
    async def test_login_and_me(self, make_client, factory):
        student = await factory.user()
        client = await make_client(student)

        res = await client.get("/api/v1/auth/me")
        assert res.status_code == 200
        assert res.json()["id"] == str(student.id)
        assert res.json()["role"] == "USER"

    async def test_wrong_password(self, make_client, factory):
        student = await factory.user()
        client = await make_client()
        res = await client.post(
            "/api/v1/auth/login",
            json={"phone_number": student.phone_number, "password": "wrong-password"},
        )
        assert res.status_code == 401
        assert res.json()["detail"]["error"] == "INVALID_CREDENTIALS"

    async def test_no_cookie(self, make_client):
        client = await make_client()
        res = await client.get("/api/v1/auth/me")
        assert res.status_code == 401

    async def test_logout_ends_the_session(self, make_client, factory, db):
        student = await factory.user()
        client = await make_client(student)
        token = client.cookies["access_token"]

        res = await client.post("/api/v1/auth/logout")
        assert res.status_code == 200

        session = await db.scalar(select(UserSession).where(UserSession.user_id == student.id))
        assert session.ended_at is not None

        # the old token is useless once its session has ended
        replay = await make_client()
        replay.cookies.set("access_token", token)
        res = await replay.get("/api/v1/auth/me")
        assert res.status_code == 401


class TestSuspension:
    async def test_suspended_user_can_log_in_but_not_use_the_app(self, make_client, factory):
        student = await factory.user(is_suspended=True)
        client = await make_client(student)

        me = await client.get("/api/v1/auth/me")
        assert me.status_code == 200
        assert me.json()["is_suspended"] is True

        res = await client.get("/api/v1/courses")
        assert res.status_code == 403
        assert res.json()["detail"]["error"] == "ACCOUNT_SUSPENDED"

    async def test_suspending_ends_open_sessions(self, make_client, factory):
        admin = await factory.user(role="ADMIN")
        student = await factory.user()
        admin_client = await make_client(admin)
        student_client = await make_client(student)

        res = await admin_client.patch(
            f"/api/v1/admin/users/{student.id}/suspend", json={"is_suspended": True}
        )
        assert res.status_code == 200
        assert res.json()["is_suspended"] is True

        res = await student_client.get("/api/v1/auth/me")
        assert res.status_code == 401

    async def test_staff_cannot_be_suspended(self, make_client, factory):
        admin = await factory.user(role="ADMIN")
        client = await make_client(admin)
        for role in ("ADMIN", "SUPERVISOR"):
            staff = await factory.user(role=role)
            res = await client.patch(
                f"/api/v1/admin/users/{staff.id}/suspend", json={"is_suspended": True}
            )
            assert res.status_code == 400

    async def test_teachers_can_be_suspended(self, make_client, factory):
        admin = await factory.user(role="ADMIN")
        teacher = await factory.user(role="TEACHER")
        client = await make_client(admin)
        res = await client.patch(
            f"/api/v1/admin/users/{teacher.id}/suspend", json={"is_suspended": True}
        )
        assert res.status_code == 200
        assert res.json()["is_suspended"] is True
