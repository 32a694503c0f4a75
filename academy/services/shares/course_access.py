import uuid
from typing import Any, Optional

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import and_, desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from academy.core.enum import STAFF_ROLES, PurchaseStatus, SubscriptionStatus
from academy.db.models.database import Course, Purchase, Subscription, User
from academy.db.session import get_session
from academy.libs.formats.datetime import now as get_now


def course_matches_plan(course, plan) -> bool:
    """
    Does a subscription plan cover a course?
    - curriculum / grade: equal, or the plan value is null (any)
    - level: plan null, course null, or equal
    - language is not compared
    """
    if plan.curriculum is not None and plan.curriculum != course.target_curriculum:
        return False
    if plan.grade is not None and plan.grade != course.target_grade:
        return False
    if (
        plan.level is not None
        and course.target_level is not None
        and plan.level != course.target_level
    ):
        return False
    return True


class CourseAccessService:
    """Purchases, subscriptions and who may open a course."""

    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    # ==============================
    # 🔎 SUBSCRIPTIONS
    # ==============================

    async def active_subscriptions(self, user_id: uuid.UUID | None = None):
        stmt = (
            select(Subscription)
            .options(selectinload(Subscription.plan))
            .where(Subscription.status == SubscriptionStatus.ACTIVE.value)
            .order_by(Subscription.created_at)
        )
        if user_id is not None:
            stmt = stmt.where(Subscription.user_id == user_id)
        return list(await self.db.scalars(stmt))

    async def published_courses(self):
        return list(
            await self.db.scalars(select(Course).where(Course.is_published.is_(True)))
        )

    async def check_user_subscription(self, user_id: uuid.UUID) -> Optional[Subscription]:
        """
        Expire the user's ACTIVE subscriptions that ended and revoke the
        purchases they granted. Returns the first one still active.
        """
        subscriptions = await self.active_subscriptions(user_id)
        if not subscriptions:
            return None

        current = get_now()
        still_active = [
            s for s in subscriptions if s.end_date is None or s.end_date >= current
        ]
        expired = [s for s in subscriptions if s not in still_active]
        if not expired:
            return still_active[0] if still_active else None

        try:
            courses = await self.published_courses()
            for sub in expired:
                sub.status = SubscriptionStatus.EXPIRED.value
                revoked_ids = [
                    c.id
                    for c in courses
                    if course_matches_plan(c, sub.plan)
                    and not any(course_matches_plan(c, a.plan) for a in still_active)
                ]
                if revoked_ids:
                    # balance-paid purchases keep their access
                    await self.db.execute(
                        update(Purchase)
                        .where(
                            Purchase.user_id == user_id,
                            Purchase.course_id.in_(revoked_ids),
                            Purchase.status == PurchaseStatus.ACTIVE.value,
                            Purchase.price_paid.is_(None),
                        )
                        .values(status=PurchaseStatus.INACTIVE.value, updated_at=current)
                    )
                logger.info(
                    f"⌛ Subscription {sub.id} expired, {len(revoked_ids)} course(s) revoked"
                )
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"❌ check_user_subscription error: {e}")
            raise HTTPException(500, f"Error while checking subscriptions: {e}")

        return still_active[0] if still_active else None

    async def has_subscription_access(
        self, user_id: uuid.UUID, course: Course, refresh: bool = True
    ) -> bool:
        if refresh:
            await self.check_user_subscription(user_id)
        for sub in await self.active_subscriptions(user_id):
            if course_matches_plan(course, sub.plan):
                return True
        return False

    async def latest_expired_match(
        self, user_id: uuid.UUID, course: Course
    ) -> Optional[Subscription]:
        latest = await self.db.scalar(
            select(Subscription)
            .options(selectinload(Subscription.plan))
            .where(
                Subscription.user_id == user_id,
                Subscription.status == SubscriptionStatus.EXPIRED.value,
            )
            .order_by(desc(Subscription.end_date))
            .limit(1)
        )
        if latest and course_matches_plan(course, latest.plan):
            return latest
        return None

    # ==============================
    # 🔐 COURSE ACCESS
    # ==============================

    async def has_active_purchase(self, user_id: uuid.UUID, course_id: uuid.UUID) -> bool:
        purchase_id = await self.db.scalar(
            select(Purchase.id).where(
                Purchase.user_id == user_id,
                Purchase.course_id == course_id,
                Purchase.status == PurchaseStatus.ACTIVE.value,
            )
        )
        return purchase_id is not None

    async def resolve_course_access(self, user: User, course: Course) -> dict[str, Any]:
        result: dict[str, Any] = {
            "has_access": False,
            "via": None,
            "subscription_expired": False,
            "subscription_end_date": None,
        }
        if user.role in STAFF_ROLES:
            result.update(has_access=True, via="staff")
            return result
        if course.user_id == user.id:
            result.update(has_access=True, via="owner")
            return result
        if course.is_free:
            result.update(has_access=True, via="free")
            return result

        # expiry first: it may revoke subscription purchases
        await self.check_user_subscription(user.id)

        if await self.has_active_purchase(user.id, course.id):
            result.update(has_access=True, via="purchase")
            return result

        if await self.has_subscription_access(user.id, course, refresh=False):
            result.update(has_access=True, via="subscription")
            return result

        expired = await self.latest_expired_match(user.id, course)
        if expired:
            result["subscription_expired"] = True
            result["subscription_end_date"] = (
                expired.end_date.isoformat() if expired.end_date else None
            )
        return result

    async def require_course_access(self, user: User, course: Course) -> dict[str, Any]:
        access = await self.resolve_course_access(user, course)
        if access["has_access"]:
            return access
        if access["subscription_expired"]:
            raise HTTPException(
                status_code=403,
                detail={
                    "error": "SUBSCRIPTION_EXPIRED",
                    "message": "Your subscription has expired",
                    "subscription_end_date": access["subscription_end_date"],
                },
            )
        raise HTTPException(
            status_code=403,
            detail={
                "error": "COURSE_ACCESS_REQUIRED",
                "message": "Purchase this course or subscribe to a matching plan",
            },
        )

    # ==============================
    # 🎁 GRANTING
    # ==============================

    async def _upsert_purchase(self, user_id: uuid.UUID, course_id: uuid.UUID) -> bool:
        """ACTIVE purchase for the pair; True when created or re-activated."""
        purchase = await self.db.scalar(
            select(Purchase).where(
                and_(Purchase.user_id == user_id, Purchase.course_id == course_id)
            )
        )
        if purchase is None:
            self.db.add(
                Purchase(
                    user_id=user_id,
                    course_id=course_id,
                    status=PurchaseStatus.ACTIVE.value,
                )
            )
            await self.db.flush()
            return True
        if purchase.status != PurchaseStatus.ACTIVE.value:
            purchase.status = PurchaseStatus.ACTIVE.value
            purchase.updated_at = get_now()
            await self.db.flush()
            return True
        return False

    async def grant_for_subscription(self, subscription: Subscription, courses=None) -> int:
        """Upsert purchases for every published course the plan covers (no commit)."""
        if courses is None:
            courses = await self.published_courses()
        granted = 0
        for course in courses:
            if course_matches_plan(course, subscription.plan):
                if await self._upsert_purchase(subscription.user_id, course.id):
                    granted += 1
        return granted

    async def grant_course_access_to_subscriptions(self, course: Course) -> int:
        if not course.is_published:
            return 0
        if not course.target_curriculum or not course.target_grade:
            return 0
        try:
            current = get_now()
            granted = 0
            for sub in await self.active_subscriptions():
                if sub.end_date is not None and sub.end_date < current:
                    continue
                if course_matches_plan(course, sub.plan):
                    if await self._upsert_purchase(sub.user_id, course.id):
                        granted += 1
            await self.db.commit()
            if granted:
                logger.info(f"🎁 Course {course.id} granted to {granted} subscriber(s)")
            return granted
        except Exception as e:
            await self.db.rollback()
            logger.error(f"❌ grant_course_access_to_subscriptions error: {e}")
            raise HTTPException(500, f"Error while granting course access: {e}")

    async def grant_access_for_user(self, user_id: uuid.UUID) -> int:
        try:
            subscriptions = await self.active_subscriptions(user_id)
            if not subscriptions:
                return 0
            courses = await self.published_courses()
            granted = 0
            for sub in subscriptions:
                granted += await self.grant_for_subscription(sub, courses)
            await self.db.commit()
            return granted
        except Exception as e:
            await self.db.rollback()
            logger.error(f"❌ grant_access_for_user error: {e}")
            raise HTTPException(500, f"Error while granting access: {e}")

    async def grant_access_to_all_active_subscriptions(self) -> dict[str, int]:
        try:
            current = get_now()
            subscriptions = [
                s
                for s in await self.active_subscriptions()
                if s.end_date is None or s.end_date >= current
            ]
            courses = await self.published_courses()
            granted = 0
            for sub in subscriptions:
                granted += await self.grant_for_subscription(sub, courses)
            await self.db.commit()
            logger.success(
                f"✔ Granted {granted} course(s) over {len(subscriptions)} subscription(s)"
            )
            return {
                "subscriptions_processed": len(subscriptions),
                "courses_granted": granted,
            }
        except Exception as e:
            await self.db.rollback()
            logger.error(f"❌ grant_access_to_all_active_subscriptions error: {e}")
            raise HTTPException(500, f"Error while granting access: {e}")

    async def expire_all_subscriptions(self) -> int:
        """Sweep every user with an ended ACTIVE subscription."""
        current = get_now()
        user_ids = list(
            await self.db.scalars(
                select(Subscription.user_id)
                .where(
                    Subscription.status == SubscriptionStatus.ACTIVE.value,
                    Subscription.end_date.is_not(None),
                    Subscription.end_date < current,
                )
                .distinct()
            )
        )
        for user_id in user_ids:
            await self.check_user_subscription(user_id)
        return len(user_ids)
