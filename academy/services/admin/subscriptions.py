import uuid
from datetime import timedelta

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from academy.core.enum import RequestStatus, SubscriptionStatus
from academy.db.models.database import Subscription, SubscriptionPlan, SubscriptionRequest, User
from academy.db.session import get_session
from academy.libs.formats.datetime import now as get_now
from academy.libs.formats.text import public_storage_url
from academy.schemas.shares.subscription import CreatePlan, ReviewRequest, UpdatePlan
from academy.services.shares.course_access import CourseAccessService
from academy.services.user.subscriptions import plan_out


class AdminSubscriptionService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        access: CourseAccessService = Depends(CourseAccessService),
    ):
        self.db = db
        self.access = access

    # ==============================
    # 📦 PLANS
    # ==============================

    async def list_plans_async(self):
        rows = (
            await self.db.execute(
                select(SubscriptionPlan, func.count(Subscription.id))
                .outerjoin(Subscription, Subscription.plan_id == SubscriptionPlan.id)
                .group_by(SubscriptionPlan.id)
                .order_by(SubscriptionPlan.created_at.desc())
            )
        ).all()
        return [
            {**plan_out(plan), "subscriptions_count": count} for plan, count in rows
        ]

    async def create_plan_async(self, schema: CreatePlan):
        try:
            plan = SubscriptionPlan(**schema.model_dump())
            self.db.add(plan)
            await self.db.commit()
            await self.db.refresh(plan)
            logger.info(f"📦 Plan {plan.id} created")
            return plan_out(plan)
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while creating plan: {e}")

    async def update_plan_async(self, plan_id: uuid.UUID, schema: UpdatePlan):
        plan = await self.db.get(SubscriptionPlan, plan_id)
        if not plan:
            raise HTTPException(404, "Subscription plan not found")
        try:
            for field, value in schema.model_dump(exclude_unset=True).items():
                if value is None and field in ("name", "price", "duration", "is_active"):
                    continue
                setattr(plan, field, value)
            await self.db.commit()
            await self.db.refresh(plan)
            return plan_out(plan)
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while updating plan: {e}")

    async def delete_plan_async(self, plan_id: uuid.UUID):
        plan = await self.db.get(SubscriptionPlan, plan_id)
        if not plan:
            raise HTTPException(404, "Subscription plan not found")
        used = await self.db.scalar(
            select(func.count(Subscription.id)).where(Subscription.plan_id == plan.id)
        )
        try:
            if used:
                # plans with history are kept, only hidden
                plan.is_active = False
                await self.db.commit()
                return {"deleted": False, "deactivated": True}
            await self.db.delete(plan)
            await self.db.commit()
            return {"deleted": True, "deactivated": False}
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while deleting plan: {e}")

    # ==============================
    # 🧾 REQUESTS
    # ==============================

    async def list_requests_async(self, status: str | None = None):
        stmt = (
            select(SubscriptionRequest)
            .options(
                selectinload(SubscriptionRequest.subscription).selectinload(Subscription.plan),
                selectinload(SubscriptionRequest.subscription).selectinload(Subscription.user),
            )
            .order_by(SubscriptionRequest.created_at.desc())
        )
        if status:
            stmt = stmt.where(SubscriptionRequest.status == status.upper())
        requests = await self.db.scalars(stmt)
        items = []
        for req in requests:
            sub = req.subscription
            user: User = sub.user
            items.append(
                {
                    "id": str(req.id),
                    "status": req.status,
                    "transaction_image": public_storage_url(req.transaction_image),
                    "created_at": req.created_at,
                    "reviewed_at": req.reviewed_at,
                    "subscription": {
                        "id": str(sub.id),
                        "status": sub.status,
                        "start_date": sub.start_date,
                        "end_date": sub.end_date,
                    },
                    "plan": plan_out(sub.plan),
                    "user": {
                        "id": str(user.id),
                        "full_name": user.full_name,
                        "phone_number": user.phone_number,
                        "email": user.email,
                    },
                }
            )
        return items

    async def review_request_async(
        self, request_id: uuid.UUID, schema: ReviewRequest, admin: User
    ):
        req = await self.db.scalar(
            select(SubscriptionRequest)
            .options(
                selectinload(SubscriptionRequest.subscription).selectinload(Subscription.plan)
            )
            .where(SubscriptionRequest.id == request_id)
        )
        if not req:
            raise HTTPException(404, "Subscription request not found")
        if req.status != RequestStatus.PENDING.value:
            raise HTTPException(400, "This request has already been reviewed")

        try:
            current = get_now()
            sub = req.subscription
            req.reviewed_by = admin.id
            req.reviewed_at = current
            granted = 0

            if schema.action == "approve":
                # 1️⃣ activate for the plan duration
                req.status = RequestStatus.APPROVED.value
                sub.status = SubscriptionStatus.ACTIVE.value
                sub.start_date = current
                sub.end_date = current + timedelta(days=sub.plan.duration)
                await self.db.flush()

                # 2️⃣ purchases for every published course the plan covers
                granted = await self.access.grant_for_subscription(sub)
            else:
                req.status = RequestStatus.DENIED.value
                sub.status = SubscriptionStatus.DENIED.value

            await self.db.commit()
            logger.info(
                f"🧾 Request {req.id} {req.status} by {admin.id} ({granted} course(s) granted)"
            )
            return {
                "id": str(req.id),
                "status": req.status,
                "subscription": {
                    "id": str(sub.id),
                    "status": sub.status,
                    "start_date": sub.start_date,
                    "end_date": sub.end_date,
                },
                "courses_granted": granted,
            }
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"❌ review subscription request error: {e}")
            raise HTTPException(500, f"Error while reviewing request: {e}")

    async def grant_access_async(self):
        return await self.access.grant_access_to_all_active_subscriptions()
