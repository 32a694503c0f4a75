"""Shared fixtures: a throwaway SQLite database, the app wired to it and
small factories for the rows most tests need."""

from datetime import timedelta
from decimal import Decimal

import bcrypt
import httpx
import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from academy.db.models.database import (
    Base,
    Chapter,
    Course,
    LiveStream,
    Question,
    Quiz,
    Subscription,
    SubscriptionPlan,
    User,
)
from academy.db.session import get_session
from academy.libs.formats.datetime import now as get_now
from academy.main import app as application

PASSWORD = "secret123"
PASSWORD_HASH = bcrypt.hashpw(PASSWORD.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")


# =============================================================================
# Database
# =============================================================================


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'academy.db'}", poolclass=NullPool
    )

    # cascades live in the schema
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


# =============================================================================
# Application
# =============================================================================


def _recaptcha_ok(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"success": True})


@pytest.fixture
async def app(session_factory):
    async def override_get_session():
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_session] = override_get_session
    application.state.http = httpx.AsyncClient(transport=httpx.MockTransport(_recaptcha_ok))
    yield application
    await application.state.http.aclose()
    application.dependency_overrides.clear()


@pytest.fixture
async def make_client(app):
    """Build an HTTP client, logged in as `user` when one is given."""
    clients = []

    async def _make(user: User | None = None, password: str = PASSWORD) -> httpx.AsyncClient:
        client = httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://test"
        )
        clients.append(client)
        if user is not None:
            res = await client.post(
                "/api/v1/auth/login",
                json={"phone_number": user.phone_number, "password": password},
            )
            assert res.status_code == 200, res.text
        return client

    yield _make
    for client in clients:
        await client.aclose()


# =============================================================================
# Factories
# =============================================================================


class Factory:
    def __init__(self, db: AsyncSession):
        self.db = db
        self._counter = 0

    def _next(self) -> int:
        self._counter += 1
        return self._counter

    async def _save(self, row):
        self.db.add(row)
        await self.db.commit()
        await self.db.refresh(row)
        return row

    async def user(self, role: str = "USER", **kwargs) -> User:
        n = self._next()
        values = {
            "full_name": f"{role.title()} {n}",
            "phone_number": f"0100000{n:04d}",
            "email": f"{role.lower()}{n}@example.com",
            "hashed_password": PASSWORD_HASH,
            "role": role,
        }
        values.update(kwargs)
        return await self._save(User(**values))

    async def course(self, owner: User, **kwargs) -> Course:
        values = {
            "user_id": owner.id,
            "title": f"Course {self._next()}",
            "price": Decimal("100.00"),
            "is_published": True,
            "target_curriculum": "egyptian",
            "target_grade": "grade-5",
        }
        values.update(kwargs)
        return await self._save(Course(**values))

    async def chapter(self, course: Course, **kwargs) -> Chapter:
        values = {
            "course_id": course.id,
            "title": f"Chapter {self._next()}",
            "video_url": "https://video.example.com/1",
            "position": 1,
            "is_published": True,
        }
        values.update(kwargs)
        return await self._save(Chapter(**values))

    async def quiz(self, course: Course, questions=None, **kwargs) -> Quiz:
        values = {
            "course_id": course.id,
            "title": f"Quiz {self._next()}",
            "position": 2,
            "is_published": True,
            "max_attempts": 1,
        }
        values.update(kwargs)
        quiz = Quiz(**values)
        for position, (text_, correct, points) in enumerate(
            questions or [("2 + 2 = ?", "4", 1)], start=1
        ):
            quiz.questions.append(
                Question(
                    text_=text_,
                    type="SHORT_ANSWER",
                    correct_answer=correct,
                    points=points,
                    position=position,
                )
            )
        await self._save(quiz)
        await self.db.refresh(quiz, ["questions"])
        return quiz

    async def livestream(self, course: Course, **kwargs) -> LiveStream:
        values = {
            "course_id": course.id,
            "title": f"Live {self._next()}",
            "meeting_url": "https://meet.example.com/room",
            "scheduled_at": get_now() + timedelta(hours=1),
            "duration": 60,
            "position": 3,
            "is_published": True,
        }
        values.update(kwargs)
        return await self._save(LiveStream(**values))

    async def plan(self, **kwargs) -> SubscriptionPlan:
        values = {
            "name": f"Plan {self._next()}",
            "price": Decimal("50.00"),
            "duration": 30,
            "curriculum": "egyptian",
            "grade": "grade-5",
        }
        values.update(kwargs)
        return await self._save(SubscriptionPlan(**values))

    async def subscription(self, user: User, plan: SubscriptionPlan, **kwargs) -> Subscription:
        current = get_now()
        values = {
            "user_id": user.id,
            "plan_id": plan.id,
            "status": "ACTIVE",
            "start_date": current - timedelta(days=1),
            "end_date": current + timedelta(days=29),
        }
        values.update(kwargs)
        return await self._save(Subscription(**values))


@pytest.fixture
def factory(db) -> Factory:
    return Factory(db)
