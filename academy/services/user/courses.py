import uuid
from decimal import ROUND_HALF_UP, Decimal

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from academy.core.enum import (
    STAFF_ROLES,
    BalanceTransactionType,
    ContentType,
    PromoCodeStatus,
    PurchaseStatus,
)
from academy.db.models.database import (
    BalanceTransaction,
    Chapter,
    Course,
    PromoCode,
    Purchase,
    QuizResult,
    User,
    UserProgress,
)
from academy.db.session import get_session
from academy.libs.formats.datetime import now as get_now
from academy.libs.formats.text import public_storage_url
from academy.schemas.user.courses import PurchaseCourse
from academy.services.shares.content import ContentService
from academy.services.shares.course_access import CourseAccessService, course_matches_plan
from academy.services.shares.navigation import build_content_sequence


def course_summary(course: Course) -> dict:
    return {
        "id": str(course.id),
        "title": course.title,
        "description": course.description,
        "image_url": public_storage_url(course.image_url),
        "price": float(course.price or 0),
        "is_free": course.is_free,
        "is_published": course.is_published,
        "target_curriculum": course.target_curriculum,
        "target_grade": course.target_grade,
        "target_level": course.target_level,
        "target_language": course.target_language,
        "created_at": course.created_at,
    }


class CourseService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        access: CourseAccessService = Depends(CourseAccessService),
        content: ContentService = Depends(ContentService),
    ):
        self.db = db
        self.access = access
        self.content = content

    async def _published_chapter_counts(self, course_ids: list[uuid.UUID]) -> dict:
        if not course_ids:
            return {}
        rows = await self.db.execute(
            select(Chapter.course_id, func.count(Chapter.id))
            .where(Chapter.course_id.in_(course_ids), Chapter.is_published.is_(True))
            .group_by(Chapter.course_id)
        )
        return {cid: count for cid, count in rows.all()}

    # ==============================
    # 📚 CATALOGUE
    # ==============================

    async def list_courses_async(
        self,
        user: User,
        curriculum: str | None = None,
        grade: str | None = None,
        level: str | None = None,
        search: str | None = None,
    ):
        stmt = select(Course).where(Course.is_published.is_(True))
        if curriculum:
            stmt = stmt.where(Course.target_curriculum == curriculum)
        if grade:
            stmt = stmt.where(Course.target_grade == grade)
        if level:
            stmt = stmt.where(Course.target_level == level)
        if search:
            stmt = stmt.where(Course.title.ilike(f"%{search.strip()}%"))
        courses = list(await self.db.scalars(stmt.order_by(Course.created_at.desc())))

        counts = await self._published_chapter_counts([c.id for c in courses])

        is_staff = user.role in STAFF_ROLES
        purchased: set = set()
        plans = []
        if not is_staff:
            await self.access.check_user_subscription(user.id)
            purchased = set(
                await self.db.scalars(
                    select(Purchase.course_id).where(
                        Purchase.user_id == user.id,
                        Purchase.status == PurchaseStatus.ACTIVE.value,
                    )
                )
            )
            plans = [s.plan for s in await self.access.active_subscriptions(user.id)]

        items = []
        for course in courses:
            has_access = (
                is_staff
                or course.is_free
                or course.user_id == user.id
                or course.id in purchased
                or any(course_matches_plan(course, plan) for plan in plans)
            )
            items.append(
                {
                    **course_summary(course),
                    "chapters_count": counts.get(course.id, 0),
                    "has_access": has_access,
                }
            )
        return items

    async def get_course_detail_async(self, course_id: uuid.UUID, user: User):
        course = await self.db.scalar(
            select(Course)
            .options(selectinload(Course.attachments))
            .where(Course.id == course_id)
        )
        if not course or not course.is_published:
            raise HTTPException(404, "Course not found")

        chapters = await self.db.scalars(
            select(Chapter)
            .where(Chapter.course_id == course_id, Chapter.is_published.is_(True))
            .order_by(Chapter.position)
        )
        purchases = await self.db.scalars(
            select(Purchase).where(
                Purchase.course_id == course_id, Purchase.user_id == user.id
            )
        )
        return {
            **course_summary(course),
            "chapters": [
                {
                    "id": str(ch.id),
                    "title": ch.title,
                    "description": ch.description,
                    "position": ch.position,
                    "is_free": ch.is_free,
                }
                for ch in chapters
            ],
            "attachments": [
                {
                    "id": str(att.id),
                    "name": att.name,
                    "url": public_storage_url(att.url),
                }
                for att in sorted(course.attachments, key=lambda a: a.created_at)
            ],
            "purchases": [
                {"id": str(p.id), "status": p.status, "created_at": p.created_at}
                for p in purchases
            ],
        }

    async def get_course_access_async(self, course_id: uuid.UUID, user: User):
        course = await self.content.get_course_or_404(course_id)
        return await self.access.resolve_course_access(user, course)

    async def get_course_content_async(self, course_id: uuid.UUID, user: User):
        course = await self.content.get_course_or_404(course_id, published_only=True)
        chapters, quizzes, livestreams = await self.content.load_content(course.id)
        sequence = build_content_sequence(chapters, quizzes, livestreams)

        completed = set(
            await self.db.scalars(
                select(UserProgress.chapter_id).where(
                    UserProgress.user_id == user.id,
                    UserProgress.is_completed.is_(True),
                    UserProgress.chapter_id.in_([c.id for c in chapters]),
                )
            )
        )
        best_rows = await self.db.execute(
            select(QuizResult.quiz_id, func.max(QuizResult.percentage))
            .where(
                QuizResult.student_id == user.id,
                QuizResult.quiz_id.in_([q.id for q in quizzes]),
            )
            .group_by(QuizResult.quiz_id)
        )
        best = {str(qid): float(pct) for qid, pct in best_rows.all()}
        completed_ids = {str(cid) for cid in completed}

        items = []
        for item in sequence:
            entry = item.as_dict()
            if item.type == ContentType.CHAPTER.value:
                entry["is_completed"] = item.id in completed_ids
            elif item.type == ContentType.QUIZ.value:
                entry["best_percentage"] = best.get(item.id)
            items.append(entry)
        return {"course_id": str(course.id), "items": items}

    async def get_course_progress_async(self, course_id: uuid.UUID, user: User):
        await self.content.get_course_or_404(course_id)
        total = await self.db.scalar(
            select(func.count(Chapter.id)).where(
                Chapter.course_id == course_id, Chapter.is_published.is_(True)
            )
        )
        completed = await self.db.scalar(
            select(func.count(UserProgress.id))
            .join(Chapter, Chapter.id == UserProgress.chapter_id)
            .where(
                Chapter.course_id == course_id,
                Chapter.is_published.is_(True),
                UserProgress.user_id == user.id,
                UserProgress.is_completed.is_(True),
            )
        )
        total = total or 0
        completed = completed or 0
        percentage = round(completed * 100 / total, 2) if total else 0
        return {
            "course_id": str(course_id),
            "completed_chapters": completed,
            "total_chapters": total,
            "percentage": percentage,
        }

    # ==============================
    # 💳 PURCHASE FROM BALANCE
    # ==============================

    async def purchase_course_async(
        self, course_id: uuid.UUID, user: User, schema: PurchaseCourse
    ):
        try:
            course = await self.content.get_course_or_404(course_id, published_only=True)

            # 1️⃣ WHAT CAN BE BOUGHT
            if course.is_free:
                raise HTTPException(400, "This course is free")

            purchase: Purchase | None = await self.db.scalar(
                select(Purchase).where(
                    Purchase.user_id == user.id, Purchase.course_id == course.id
                )
            )
            if purchase and purchase.status == PurchaseStatus.ACTIVE.value:
                raise HTTPException(400, "Course already purchased")

            # 2️⃣ PROMO CODE
            price = Decimal(course.price or 0)
            promo: PromoCode | None = None
            if schema.promo_code:
                promo = await self.db.scalar(
                    select(PromoCode).where(
                        PromoCode.code == schema.promo_code.strip().upper(),
                        PromoCode.student_id == user.id,
                        PromoCode.status == PromoCodeStatus.APPROVED.value,
                        PromoCode.is_used.is_(False),
                    )
                )
                if not promo:
                    raise HTTPException(400, "Invalid or already used promo code")
                discount = Decimal(promo.discount_percentage or 0)
                price = (price * (Decimal(100) - discount) / Decimal(100)).quantize(
                    Decimal("0.01"), rounding=ROUND_HALF_UP
                )

            # 3️⃣ BALANCE
            balance = Decimal(user.balance or 0)
            if balance < price:
                raise HTTPException(400, "Insufficient balance")

            new_balance = balance - price
            user.balance = new_balance
            self.db.add(
                BalanceTransaction(
                    user_id=user.id,
                    amount=-price,
                    balance_after=new_balance,
                    type=BalanceTransactionType.PURCHASE.value,
                    description=f"Purchase: {course.title}",
                    created_by=user.id,
                )
            )

            # 4️⃣ PURCHASE ROW
            if purchase:
                purchase.status = PurchaseStatus.ACTIVE.value
                purchase.price_paid = price
                purchase.promo_code_id = promo.id if promo else None
                purchase.updated_at = get_now()
            else:
                purchase = Purchase(
                    user_id=user.id,
                    course_id=course.id,
                    status=PurchaseStatus.ACTIVE.value,
                    price_paid=price,
                    promo_code_id=promo.id if promo else None,
                )
                self.db.add(purchase)
            if promo:
                promo.is_used = True

            await self.db.commit()
            await self.db.refresh(purchase)
            logger.info(f"💳 User {user.id} bought course {course.id} for {price}")
            return {
                "purchase_id": str(purchase.id),
                "course_id": str(course.id),
                "price_paid": float(price),
                "balance": float(new_balance),
            }
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"❌ purchase error: {e}")
            raise HTTPException(500, f"Error while purchasing course: {e}")
