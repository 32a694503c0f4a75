"""Background jobs run against the test database."""

from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy import select

from academy.core import scheduler
from academy.db.models.database import Purchase, StudentMessage, Subscription, UserSession
from academy.libs.formats.datetime import now as get_now


@pytest.fixture(autouse=True)
def job_sessions(monkeypatch, session_factory):
    monkeypatch.setattr(scheduler, "AsyncSessionLocal", session_factory)


async def test_subscription_expiry_job(factory, db, session_factory):
    teacher = await factory.user(role="TEACHER")
    student = await factory.user()
    plan = await factory.plan()
    current = get_now()
    subscription = await factory.subscription(
        student,
        plan,
        start_date=current - timedelta(days=31),
        end_date=current - timedelta(days=1),
    )
    granted = await factory.course(teacher)
    bought = await factory.course(teacher)
    db.add_all(
        [
            Purchase(user_id=student.id, course_id=granted.id),
            Purchase(user_id=student.id, course_id=bought.id, price_paid=Decimal("100.00")),
        ]
    )
    await db.commit()

    await scheduler.subscription_expiry_job()

    async with session_factory() as fresh:
        sub = await fresh.get(Subscription, subscription.id)
        assert sub.status == "EXPIRED"
        statuses = dict(
            (await fresh.execute(
                select(Purchase.course_id, Purchase.status).where(Purchase.user_id == student.id)
            )).all()
        )
    assert statuses == {granted.id: "INACTIVE", bought.id: "ACTIVE"}


async def test_session_cleanup_job(factory, db, session_factory):
    student = await factory.user()
    current = get_now()
    idle = UserSession(
        user_id=student.id,
        token="idle-token",
        last_seen_at=current - timedelta(hours=25),
        expires_at=current + timedelta(hours=1),
    )
    lapsed = UserSession(
        user_id=student.id,
        token="lapsed-token",
        expires_at=current - timedelta(minutes=1),
    )
    live = UserSession(
        user_id=student.id,
        token="live-token",
        expires_at=current + timedelta(hours=1),
    )
    db.add_all([idle, lapsed, live])
    await db.commit()

    await scheduler.session_cleanup_job()

    async with session_factory() as fresh:
        ended = {
            s.token: s.ended_at is not None
            for s in await fresh.scalars(select(UserSession))
        }
    assert ended == {"idle-token": True, "lapsed-token": True, "live-token": False}


async def test_message_deactivate_job(db, session_factory):
    current = get_now()
    db.add_all(
        [
            StudentMessage(message="old", is_active=True, created_at=current - timedelta(hours=25)),
            StudentMessage(message="new", is_active=True, created_at=current - timedelta(hours=1)),
        ]
    )
    await db.commit()

    await scheduler.message_deactivate_job()

    async with session_factory() as fresh:
        active = {m.message: m.is_active for m in await fresh.scalars(select(StudentMessage))}
    assert active == {"old": False, "new": True}
