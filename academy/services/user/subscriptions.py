import uuid

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from academy.core.enum import RequestStatus, SubscriptionStatus
from academy.db.models.database import Subscription, SubscriptionPlan, SubscriptionRequest, User
from academy.db.session import get_session
from academy.libs.formats.text import public_storage_url
from academy.schemas.shares.subscription import CreateSubscription
from academy.services.shares.course_access import CourseAccessService

OPEN_STATUSES = [
    SubscriptionStatus.PENDING.value,
    SubscriptionStatus.APPROVED.value,
    SubscriptionStatus.ACTIVE.value,
]


def plan_out(plan: SubscriptionPlan) -> dict:
    return {
        "id": str(plan.id),
        "name": plan.name,
        "description": plan.description,
        "price": float(plan.price or 0),
        "duration": plan.duration,
        "curriculum": plan.curriculum,
        "grade": plan.grade,
        "level": plan.level,
        "language": plan.language,
        "is_active": plan.is_active,
        "created_at": plan.created_at,
    }


def subscription_out(sub: Subscription) -> dict:
    request = sub.request
    return {
        "id": str(sub.id),
        "user_id": str(sub.user_id),
        "status": sub.status,
        "start_date": sub.start_date,
        "end_date": sub.end_date,
        "created_at": sub.created_at,
        "plan": plan_out(sub.plan) if sub.plan else None,
        "request": {
            "id": str(request.id),
            "status": request.status,
            "transaction_image": public_storage_url(request.transaction_image),
            "reviewed_at": request.reviewed_at,
        }
        if request
        else None,
    }


class SubscriptionService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        access: CourseAccessService = Depends(CourseAccessService),
    ):
        self.db = db
        self.access = access

    async def list_plans_async(self):
        plans = await self.db.scalars(
            select(SubscriptionPlan)
            .where(SubscriptionPlan.is_active.is_(True))
            .order_by(SubscriptionPlan.price, SubscriptionPlan.name)
        )
        return [plan_out(p) for p in plans]

    async def list_subscriptions_async(self, user: User):
        # expire first, then top up access for what is still active
        await self.access.check_user_subscription(user.id)
        await self.access.grant_access_for_user(user.id)

        subscriptions = await self.db.scalars(
            select(Subscription)
            .options(
                selectinload(Subscription.plan),
                selectinload(Subscription.request),
            )
            .where(Subscription.user_id == user.id)
            .order_by(Subscription.created_at.desc())
        )
        return [subscription_out(s) for s in subscriptions]

    async def create_subscription_async(self, schema: CreateSubscription, user: User):
        plan = await self.db.get(SubscriptionPlan, schema.plan_id)
        if not plan or not plan.is_active:
            raise HTTPException(404, "Subscription plan not found")

        existing = await self.db.scalar(
            select(Subscription.id).where(
                Subscription.user_id == user.id,
                Subscription.plan_id == plan.id,
                Subscription.status.in_(OPEN_STATUSES),
            )
        )
        if existing:
            raise HTTPException(400, "You already have an open subscription for this plan")

        try:
            subscription = Subscription(
                user_id=user.id,
                plan_id=plan.id,
                status=SubscriptionStatus.PENDING.value,
            )
            self.db.add(subscription)
            await self.db.flush()
            self.db.add(
                SubscriptionRequest(
                    subscription_id=subscription.id,
                    transaction_image=schema.transaction_image,
                    status=RequestStatus.PENDING.value,
                )
            )
            await self.db.commit()
            logger.info(f"🧾 Subscription request {subscription.id} for plan {plan.id}")
            return await self.get_subscription_async(subscription.id)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"❌ create subscription error: {e}")
            raise HTTPException(500, f"Error while creating subscription: {e}")

    async def get_subscription_async(self, subscription_id: uuid.UUID):
        subscription = await self.db.scalar(
            select(Subscription)
            .options(
                selectinload(Subscription.plan),
                selectinload(Subscription.request),
            )
            .where(Subscription.id == subscription_id)
            .execution_options(populate_existing=True)
        )
        if not subscription:
            raise HTTPException(404, "Subscription not found")
        return subscription_out(subscription)
