from apscheduler.jobstores.base import ConflictingIdError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger

from academy.core.security import SecurityService
from academy.core.settings import settings
from academy.db.session import AsyncSessionLocal
from academy.services.admin.messages import MessageService
from academy.services.shares.auth import AuthService
from academy.services.shares.course_access import CourseAccessService

scheduler = AsyncIOScheduler()


# ================================
# JOB 1: Expire ended subscriptions
# ================================
async def subscription_expiry_job():
    logger.info("🔎 Running subscription expiry job...")

    async with AsyncSessionLocal() as session:
        service = CourseAccessService(session)
        try:
            expired = await service.expire_all_subscriptions()
            logger.success(f"✔ Subscription expiry result: {expired} user(s) swept")
        except Exception as e:
            logger.error(f"❌ Subscription expiry job error: {e}")


# ================================
# JOB 2: End stale login sessions
# ================================
async def session_cleanup_job():
    logger.info("🧹 Running session cleanup job...")

    async with AsyncSessionLocal() as session:
        service = AuthService(session, SecurityService())
        try:
            ended = await service.cleanup_sessions()
            logger.success(f"✔ Session cleanup result: {ended} session(s) ended")
        except Exception as e:
            logger.error(f"❌ Session cleanup job error: {e}")


# ================================
# JOB 3: Hide old dashboard messages
# ================================
async def message_deactivate_job():
    logger.info("📨 Running message deactivation job...")

    async with AsyncSessionLocal() as session:
        service = MessageService(session)
        try:
            hidden = await service.deactivate_expired_async()
            logger.success(f"✔ Message deactivation result: {hidden} message(s) hidden")
        except Exception as e:
            logger.error(f"❌ Message deactivation job error: {e}")


# ================================
# START ALL JOBS
# ================================
def start_scheduler():
    try:
        scheduler.add_job(
            subscription_expiry_job,
            trigger=IntervalTrigger(minutes=settings.SUBSCRIPTION_SWEEP_MINUTES),
            id="subscription_expiry_job",
            replace_existing=True,
            max_instances=1,
        )
    except ConflictingIdError:
        logger.warning("⚠ subscription_expiry_job existed")

    try:
        scheduler.add_job(
            session_cleanup_job,
            trigger=IntervalTrigger(hours=1),
            id="session_cleanup_job",
            replace_existing=True,
            max_instances=1,
        )
    except ConflictingIdError:
        logger.warning("⚠ session_cleanup_job existed")

    try:
        scheduler.add_job(
            message_deactivate_job,
            trigger=IntervalTrigger(hours=1),
            id="message_deactivate_job",
            replace_existing=True,
            max_instances=1,
        )
    except ConflictingIdError:
        logger.warning("⚠ message_deactivate_job existed")

    scheduler.start()
    logger.info("🔔 ALL scheduler started (subscriptions + sessions + messages)")
