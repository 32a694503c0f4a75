from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.enum import PromoCodeStatus, UserRole
from academy.core.security import SecurityService
from academy.db.models.database import PromoCode, User
from academy.db.session import get_session
from academy.libs.formats.datetime import now as get_now
from academy.schemas.admin.promocode import CreatePromoCode
from academy.services.user.promocode import promo_out

MAX_CODE_TRIES = 10


class AdminPromoCodeService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        security: SecurityService = Depends(SecurityService),
    ):
        self.db = db
        self.security = security

    async def list_students_async(self):
        students = list(
            await self.db.scalars(
                select(User)
                .where(User.role == UserRole.USER.value)
                .order_by(User.points.desc(), User.full_name)
            )
        )
        promos = await self.db.scalars(
            select(PromoCode)
            .where(PromoCode.student_id.in_([s.id for s in students]))
            .order_by(PromoCode.requested_at)
        )
        latest: dict = {}
        for promo in promos:
            latest[promo.student_id] = promo

        return [
            {
                "id": str(student.id),
                "full_name": student.full_name,
                "phone_number": student.phone_number,
                "points": student.points or 0,
                "grade": student.grade,
                "promo_code": promo_out(latest.get(student.id)),
                "has_pending_request": bool(
                    latest.get(student.id)
                    and latest[student.id].status == PromoCodeStatus.REQUESTED.value
                ),
            }
            for student in students
        ]

    async def _unique_code(self) -> str:
        for _ in range(MAX_CODE_TRIES):
            code = self.security.generate_promo_code()
            taken = await self.db.scalar(select(PromoCode.id).where(PromoCode.code == code))
            if not taken:
                return code
        raise HTTPException(500, "Could not generate a unique promo code")

    async def create_promocode_async(self, schema: CreatePromoCode, staff: User):
        if schema.discount_percentage < 1 or schema.discount_percentage > 100:
            raise HTTPException(400, "Discount must be between 1 and 100")

        student = await self.db.get(User, schema.student_id)
        if not student or student.role != UserRole.USER.value:
            raise HTTPException(404, "Student not found")

        try:
            code = await self._unique_code()
            promo = await self.db.scalar(
                select(PromoCode)
                .where(
                    PromoCode.student_id == student.id,
                    PromoCode.status == PromoCodeStatus.REQUESTED.value,
                )
                .order_by(PromoCode.requested_at.desc())
                .limit(1)
            )
            # approve the open request, or issue a new code directly
            if promo is None:
                promo = PromoCode(student_id=student.id, requested_at=get_now())
                self.db.add(promo)
            promo.code = code
            promo.discount_percentage = schema.discount_percentage
            promo.status = PromoCodeStatus.APPROVED.value
            promo.is_used = False
            promo.created_by = staff.id
            promo.created_at = get_now()
            await self.db.commit()
            await self.db.refresh(promo)
            logger.info(f"🎟 Promo {code} ({schema.discount_percentage}%) for {student.id}")
            return promo_out(promo)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while creating promo code: {e}")
