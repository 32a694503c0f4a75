from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.enum import PromoCodeStatus
from academy.db.models.database import PromoCode, User
from academy.db.session import get_session


def promo_out(promo: PromoCode | None) -> dict | None:
    if not promo:
        return None
    return {
        "id": str(promo.id),
        "code": promo.code,
        "discount_percentage": promo.discount_percentage,
        "status": promo.status,
        "is_used": promo.is_used,
        "requested_at": promo.requested_at,
        "created_at": promo.created_at,
    }


class PromoCodeService:
    """Student side: see the latest code, ask for a new one."""

    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    async def _pending_request(self, user_id) -> PromoCode | None:
        return await self.db.scalar(
            select(PromoCode)
            .where(
                PromoCode.student_id == user_id,
                PromoCode.status == PromoCodeStatus.REQUESTED.value,
            )
            .order_by(PromoCode.requested_at.desc())
            .limit(1)
        )

    async def _latest_approved(self, user_id) -> PromoCode | None:
        return await self.db.scalar(
            select(PromoCode)
            .where(
                PromoCode.student_id == user_id,
                PromoCode.status == PromoCodeStatus.APPROVED.value,
            )
            .order_by(PromoCode.created_at.desc())
            .limit(1)
        )

    async def get_my_promocode_async(self, user: User):
        latest = await self._latest_approved(user.id)
        pending = await self._pending_request(user.id)
        return {
            "points": user.points or 0,
            "promo_code": promo_out(latest),
            "has_pending_request": pending is not None,
        }

    async def request_promocode_async(self, user: User):
        if await self._pending_request(user.id):
            raise HTTPException(400, "You already have a pending promo code request")
        latest = await self._latest_approved(user.id)
        if latest and not latest.is_used:
            raise HTTPException(400, "You already have an unused promo code")
        try:
            promo = PromoCode(
                student_id=user.id,
                status=PromoCodeStatus.REQUESTED.value,
            )
            self.db.add(promo)
            await self.db.commit()
            await self.db.refresh(promo)
            logger.info(f"🎟 {user.id} requested a promo code")
            return promo_out(promo)
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while requesting promo code: {e}")
