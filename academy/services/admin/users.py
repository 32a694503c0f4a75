import math
import uuid
from decimal import Decimal
from io import BytesIO

import pandas as pd
from fastapi import Depends, HTTPException, Response
from loguru import logger
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.enum import STAFF_ROLES, BalanceTransactionType, PurchaseStatus, UserRole
from academy.core.security import SecurityService
from academy.db.models.database import BalanceTransaction, Purchase, User
from academy.db.session import get_session
from academy.schemas.admin.user import ResetPassword, SuspendUser, UpdateBalance
from academy.schemas.auth.user import CreateStaffAccount
from academy.services.shares.auth import AuthService

SORTABLE = {"created_at", "full_name", "balance", "points", "last_login_at"}


class UserService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        security: SecurityService = Depends(SecurityService),
        auth: AuthService = Depends(AuthService),
    ):
        self.db = db
        self.security = security
        self.auth = auth

    async def get_users_async(
        self,
        role: str | None,
        search: str | None,
        sort_by: str,
        order: str,
        page: int,
        size: int,
    ):
        # 1️⃣ users + ACTIVE purchase count
        stmt = (
            select(User, func.count(Purchase.id).label("purchase_count"))
            .join(
                Purchase,
                (Purchase.user_id == User.id)
                & (Purchase.status == PurchaseStatus.ACTIVE.value),
                isouter=True,
            )
            .group_by(User.id)
        )

        # 2️⃣ filters
        if role:
            stmt = stmt.where(User.role == role.upper())
        if search:
            pattern = f"%{search.strip()}%"
            stmt = stmt.where(
                or_(
                    User.full_name.ilike(pattern),
                    User.email.ilike(pattern),
                    User.phone_number.ilike(pattern),
                )
            )

        # 3️⃣ total
        subquery = stmt.subquery()
        total_items = (
            await self.db.scalar(select(func.count()).select_from(subquery)) or 0
        )

        # 4️⃣ page
        sort_column = getattr(User, sort_by) if sort_by in SORTABLE else User.created_at
        sort_expr = sort_column.asc() if order.lower() == "asc" else sort_column.desc()
        stmt = stmt.order_by(sort_expr).offset((page - 1) * size).limit(size)

        records = (await self.db.execute(stmt)).all()
        users = [
            {
                "id": str(user.id),
                "full_name": user.full_name,
                "phone_number": user.phone_number,
                "email": user.email,
                "role": user.role,
                "parent_phone_number": user.parent_phone_number,
                "curriculum": user.curriculum,
                "grade": user.grade,
                "level": user.level,
                "balance": float(user.balance or 0),
                "points": user.points,
                "is_suspended": user.is_suspended,
                "purchase_count": purchase_count,
                "last_login_at": user.last_login_at,
                "created_at": user.created_at,
            }
            for user, purchase_count in records
        ]

        total_pages = (total_items + size - 1) // size
        return {
            "page": page,
            "size": size,
            "total_items": total_items,
            "total_pages": total_pages,
            "has_next": page < total_pages,
            "has_previous": page > 1,
            "items": users,
        }

    async def export_users_async(self):
        students = await self.db.scalars(
            select(User)
            .where(User.role == UserRole.USER.value)
            .order_by(User.created_at)
        )
        rows = [
            {
                "Id": str(user.id),
                "Full name": user.full_name,
                "Phone": user.phone_number,
                "Email": user.email,
                "Parent phone": user.parent_phone_number,
                "Curriculum": user.curriculum,
                "Grade": user.grade,
                "Level": user.level,
                "Balance": float(user.balance or 0),
                "Points": user.points,
                "Suspended": user.is_suspended,
                "Created at": user.created_at,
            }
            for user in students
        ]
        df = pd.DataFrame(
            rows,
            columns=[
                "Id",
                "Full name",
                "Phone",
                "Email",
                "Parent phone",
                "Curriculum",
                "Grade",
                "Level",
                "Balance",
                "Points",
                "Suspended",
                "Created at",
            ],
        )

        output = BytesIO()
        df.to_excel(output, index=False, engine="openpyxl")
        output.seek(0)

        headers = {"Content-Disposition": "attachment; filename=students_export.xlsx"}
        return Response(
            content=output.getvalue(),
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            headers=headers,
        )

    async def _get_user_or_404(self, user_id: uuid.UUID) -> User:
        user = await self.db.get(User, user_id)
        if not user:
            raise HTTPException(404, "User not found")
        return user

    async def update_balance_async(self, user_id: uuid.UUID, schema: UpdateBalance, admin: User):
        if not math.isfinite(schema.new_balance) or schema.new_balance < 0:
            raise HTTPException(400, "Balance must be a number greater than or equal to 0")
        user = await self._get_user_or_404(user_id)
        try:
            new_balance = Decimal(str(schema.new_balance)).quantize(Decimal("0.01"))
            delta = new_balance - Decimal(user.balance or 0)
            user.balance = new_balance
            self.db.add(
                BalanceTransaction(
                    user_id=user.id,
                    amount=delta,
                    balance_after=new_balance,
                    type=BalanceTransactionType.ADJUSTMENT.value,
                    description=schema.description or "Balance adjusted by staff",
                    created_by=admin.id,
                )
            )
            await self.db.commit()
            logger.info(f"💰 {admin.id} set balance of {user.id} to {new_balance}")
            return {"user_id": str(user.id), "balance": float(new_balance), "change": float(delta)}
        except Exception as e:
            await self.db.rollback()
            logger.error(f"❌ update balance error: {e}")
            raise HTTPException(500, f"Error while updating balance: {e}")

    async def suspend_user_async(self, user_id: uuid.UUID, schema: SuspendUser, admin: User):
        user = await self._get_user_or_404(user_id)
        if user.role in STAFF_ROLES:
            raise HTTPException(400, "Staff accounts cannot be suspended")
        try:
            user.is_suspended = schema.is_suspended
            ended = 0
            if schema.is_suspended:
                ended = await self.auth.end_user_sessions(user.id)
            await self.db.commit()
            logger.warning(
                f"⛔ {admin.id} set suspended={schema.is_suspended} on {user.id} ({ended} session(s) ended)"
            )
            return {"user_id": str(user.id), "is_suspended": user.is_suspended}
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while suspending user: {e}")

    async def reset_password_async(self, user_id: uuid.UUID, schema: ResetPassword, admin: User):
        user = await self._get_user_or_404(user_id)
        try:
            user.hashed_password = await self.security.hash_password(schema.new_password)
            await self.auth.end_user_sessions(user.id)
            await self.db.commit()
            logger.info(f"🔑 {admin.id} reset the password of {user.id}")
            return {"message": "Password updated"}
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while resetting password: {e}")

    async def create_staff_account_async(self, schema: CreateStaffAccount):
        existing = await self.db.scalar(
            select(User).where(
                or_(User.phone_number == schema.phone_number, User.email == str(schema.email))
            )
        )
        if existing:
            raise HTTPException(400, "Phone number or email already registered")
        try:
            user = User(
                full_name=schema.full_name.strip(),
                phone_number=schema.phone_number.strip(),
                email=str(schema.email),
                hashed_password=await self.security.hash_password(schema.password),
                role=schema.role,
            )
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)
            logger.success(f"👩‍🏫 {schema.role} account {user.id} created")
            return {
                "id": str(user.id),
                "full_name": user.full_name,
                "phone_number": user.phone_number,
                "email": user.email,
                "role": user.role,
            }
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while creating account: {e}")
