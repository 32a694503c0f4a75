from __future__ import annotations

from datetime import timedelta
from typing import Any

from fastapi import Depends, HTTPException, Response, status
from loguru import logger
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.context import get_request
from academy.core.enum import UserRole
from academy.core.security import SecurityService
from academy.core.settings import settings
from academy.db.models.database import User, UserSession
from academy.db.session import get_session
from academy.libs.formats.datetime import now as get_now
from academy.libs.formats.text import first_name, parent_email
from academy.schemas.auth.user import LoginUser, RegisterUser, UserOut
from academy.services.shares.recaptcha import RecaptchaError, RecaptchaService

INVALID_CREDENTIALS = {
    "error": "INVALID_CREDENTIALS",
    "message": "Phone number or password is incorrect",
}


class AuthService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        security: SecurityService = Depends(SecurityService),
    ):
        self.db = db
        self.security = security

    async def login_async(self, schema: LoginUser, res: Response):
        try:
            user: User | None = await self.db.scalar(
                select(User).where(User.phone_number == schema.phone_number.strip())
            )

            # 1️⃣ UNKNOWN PHONE OR WRONG PASSWORD
            if not user:
                raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS)
            if not await self.security.verify_password(
                schema.password, user.hashed_password or ""
            ):
                raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS)

            # 2️⃣ OPEN A SESSION
            current = get_now()
            session = UserSession(
                user_id=user.id,
                token=self.security.generate_session_token(),
                created_at=current,
                last_seen_at=current,
                expires_at=current + timedelta(hours=settings.SESSION_TTL_HOURS),
            )
            self.db.add(session)
            user.last_login_at = current
            await self.db.commit()
            await self.db.refresh(user)

            # 3️⃣ TOKEN + COOKIE
            res.set_cookie(
                key="access_token",
                value=await self.security.create_access_token(
                    str(user.id), session.token
                ),
                httponly=True,
                secure=settings.COOKIE_SECURE,
                samesite="lax",
                max_age=60 * 60 * settings.SESSION_TTL_HOURS,
                path="/",
            )
            logger.info(f"🔑 {user.role} {user.id} logged in")
            return {
                "message": "Login successful",
                "user": UserOut.model_validate(user).model_dump(mode="json"),
            }
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"❌ login error: {e}")
            raise HTTPException(500, f"Login failed: {e}")

    async def register_async(
        self, schema: RegisterUser, recaptcha: RecaptchaService
    ) -> dict[str, Any]:
        # 1️⃣ reCAPTCHA
        if not schema.recaptcha_token:
            raise HTTPException(400, "reCAPTCHA token is required")
        try:
            human = await recaptcha.verify(schema.recaptcha_token)
        except RecaptchaError:
            human = False
        if not human:
            raise HTTPException(400, "reCAPTCHA verification failed")

        # 2️⃣ FIELD RULES
        if schema.password != schema.confirm_password:
            raise HTTPException(400, "Passwords do not match")

        phone = schema.phone_number.strip()
        parent_phone = schema.parent_phone_number.strip()
        if phone == parent_phone:
            raise HTTPException(400, "Parent phone number must differ from your own")

        try:
            existing = await self.db.scalar(
                select(User).where(
                    or_(User.phone_number == phone, User.email == schema.email)
                )
            )
            if existing:
                field = "Phone number" if existing.phone_number == phone else "Email"
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"{field} already registered",
                )

            parent = await self.db.scalar(
                select(User).where(User.phone_number == parent_phone)
            )
            if parent and parent.role != UserRole.PARENT.value:
                raise HTTPException(
                    400, "Parent phone number is registered to a non-parent account"
                )

            hashed = await self.security.hash_password(schema.password)

            # 3️⃣ PARENT ACCOUNT (same password)
            if not parent:
                parent = User(
                    full_name=f"{first_name(schema.full_name)}'s Parent",
                    phone_number=parent_phone,
                    email=parent_email(parent_phone),
                    hashed_password=hashed,
                    role=UserRole.PARENT.value,
                )
                self.db.add(parent)

            # 4️⃣ STUDENT
            student = User(
                full_name=schema.full_name.strip(),
                phone_number=phone,
                email=str(schema.email),
                hashed_password=hashed,
                role=UserRole.USER.value,
                parent_phone_number=parent_phone,
                curriculum=schema.curriculum,
                curriculum_type=schema.curriculum_type,
                level=schema.level,
                language=schema.language,
                grade=schema.grade,
            )
            self.db.add(student)
            await self.db.commit()
            logger.success(f"🎉 Registered student {student.id}")
            return {"success": True}
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"❌ register error: {e}")
            raise HTTPException(500, f"Registration failed: {e}")

    async def logout_async(self, res: Response):
        token = get_request().cookies.get("access_token")
        if token:
            try:
                payload = await self.security.decode_access_token(token)
            except ValueError:
                payload = {}
            sid = payload.get("sid")
            if sid:
                session = await self.db.scalar(
                    select(UserSession).where(UserSession.token == sid)
                )
                if session and session.ended_at is None:
                    session.ended_at = get_now()
                    await self.db.commit()

        res.delete_cookie(
            key="access_token",
            httponly=True,
            secure=settings.COOKIE_SECURE,
            samesite="lax",
            path="/",
        )
        return {"message": "Logout done"}

    async def end_user_sessions(self, user_id) -> int:
        """End every open session of a user (no commit)."""
        sessions = await self.db.scalars(
            select(UserSession).where(
                UserSession.user_id == user_id, UserSession.ended_at.is_(None)
            )
        )
        count = 0
        current = get_now()
        for session in sessions:
            session.ended_at = current
            count += 1
        return count

    async def cleanup_sessions(self) -> int:
        """End sessions that expired or sat idle longer than their lifetime."""
        current = get_now()
        idle_limit = current - timedelta(hours=settings.SESSION_TTL_HOURS)
        sessions = await self.db.scalars(
            select(UserSession).where(
                UserSession.ended_at.is_(None),
                or_(
                    UserSession.expires_at <= current,
                    UserSession.last_seen_at < idle_limit,
                ),
            )
        )
        count = 0
        for session in sessions:
            session.ended_at = current
            count += 1
        await self.db.commit()
        return count
