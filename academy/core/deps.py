# academy/core/deps.py
import uuid
from typing import List, Optional

from fastapi import Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.context import get_request
from academy.core.security import SecurityService
from academy.db.models.database import User, UserSession
from academy.db.session import get_session
from academy.libs.formats.datetime import now as get_now


class AuthorizationService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        security: SecurityService = Depends(SecurityService),
    ):
        self.db = db
        self.security = security

    # ==============================
    # 🧩 CORE AUTH CHECKS
    # ==============================

    async def _load_session_user(self, token: str) -> tuple[User, UserSession] | None:
        payload = await self.security.decode_access_token(token)
        user_id = payload.get("sub")
        sid = payload.get("sid")
        if not user_id or not sid:
            return None

        session = await self.db.scalar(
            select(UserSession).where(UserSession.token == sid)
        )
        if not session or session.ended_at is not None:
            return None
        if str(session.user_id) != str(user_id):
            return None

        current = get_now()
        if session.expires_at <= current:
            return None

        user = await self.db.get(User, uuid.UUID(str(user_id)))
        if not user:
            return None

        session.last_seen_at = current
        await self.db.commit()
        return user, session

    async def get_current_user(self, allow_suspended: bool = False) -> User:
        """Current user from the access_token cookie and its live session."""
        request = get_request()
        token = request.cookies.get("access_token")

        if not token:
            raise HTTPException(status_code=401, detail="Token not found in cookies")

        try:
            loaded = await self._load_session_user(token)
        except ValueError:
            raise HTTPException(status_code=401, detail="Invalid token")

        if not loaded:
            raise HTTPException(status_code=401, detail="Invalid session")

        user, _ = loaded
        if user.is_suspended and not allow_suspended:
            raise HTTPException(
                status_code=403,
                detail={
                    "error": "ACCOUNT_SUSPENDED",
                    "message": "Your account has been suspended",
                },
            )
        return user

    # ==============================
    # 🧩 ROLE-BASED ACCESS CONTROL
    # ==============================

    async def require_role(self, required_roles: Optional[List[str]] = None) -> User:
        """Require one of the given roles (e.g. ["ADMIN"])."""
        current_user = await self.get_current_user()

        if not required_roles:
            return current_user

        if current_user.role not in required_roles:
            raise HTTPException(status_code=403, detail="Permission denied")

        return current_user
