"""Create every table and seed the first admin account.

Run with ``python -m academy.db.models.init_db``.
"""
import asyncio

from loguru import logger
from sqlalchemy import select

from academy.core.enum import UserRole
from academy.core.security import SecurityService
from academy.core.settings import settings
from academy.db.models.database import Base, User
from academy.db.session import AsyncSessionLocal, engine


async def create_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.success("🎉 Database tables created")


async def seed_admin():
    if not settings.ADMIN_PHONE_NUMBER or not settings.ADMIN_PASSWORD:
        logger.warning("⚠ ADMIN_PHONE_NUMBER / ADMIN_PASSWORD not set, skipping admin seed")
        return None

    async with AsyncSessionLocal() as session:
        existing = await session.scalar(
            select(User).where(User.phone_number == settings.ADMIN_PHONE_NUMBER)
        )
        if existing:
            logger.info(f"👤 Admin {existing.phone_number} already exists")
            return existing

        admin = User(
            full_name="Administrator",
            phone_number=settings.ADMIN_PHONE_NUMBER,
            email=settings.ADMIN_EMAIL or f"admin@{settings.PARENT_EMAIL_DOMAIN}",
            hashed_password=await SecurityService.hash_password(settings.ADMIN_PASSWORD),
            role=UserRole.ADMIN.value,
        )
        session.add(admin)
        await session.commit()
        logger.success(f"✅ Admin {admin.phone_number} created")
        return admin


async def main():
    await create_tables()
    await seed_admin()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
