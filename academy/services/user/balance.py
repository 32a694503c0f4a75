from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.db.models.database import BalanceTransaction, User
from academy.db.session import get_session


class BalanceService:
    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    async def get_balance_async(self, user: User, limit: int = 20):
        transactions = await self.db.scalars(
            select(BalanceTransaction)
            .where(BalanceTransaction.user_id == user.id)
            .order_by(BalanceTransaction.created_at.desc())
            .limit(limit)
        )
        return {
            "balance": float(user.balance or 0),
            "transactions": [
                {
                    "id": str(t.id),
                    "amount": float(t.amount),
                    "balance_after": float(t.balance_after),
                    "type": t.type,
                    "description": t.description,
                    "created_at": t.created_at,
                }
                for t in transactions
            ],
        }

    async def get_points_async(self, user: User):
        return {"user_id": str(user.id), "points": user.points or 0}
