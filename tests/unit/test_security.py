"""Unit tests for tokens and password hashing."""

import jwt
import pytest

from academy.core.security import SecurityService


class TestSecurityService:
    async def test_token_round_trip_keeps_subject_and_session(self):
        security = SecurityService()
        token = await security.create_access_token("user-1", "session-1")
        payload = await security.decode_access_token(token)
        assert payload["sub"] == "user-1"
        assert payload["sid"] == "session-1"

    async def test_foreign_signature_is_rejected(self):
        security = SecurityService()
        token = jwt.encode({"sub": "user-1", "sid": "session-1"}, "another-key", algorithm="HS256")
        with pytest.raises(ValueError, match="Invalid"):
            await security.decode_access_token(token)

    async def test_expired_token_is_rejected(self):
        security = SecurityService()
        security.access_token_expire_minutes = -1
        token = await security.create_access_token("user-1", "session-1")
        with pytest.raises(ValueError, match="expired"):
            await security.decode_access_token(token)

    async def test_password_hashing(self):
        hashed = await SecurityService.hash_password("secret123")
        assert await SecurityService.verify_password("secret123", hashed)
        assert not await SecurityService.verify_password("wrong", hashed)
        assert not await SecurityService.verify_password("secret123", "not-a-hash")

    def test_promo_codes_are_upper_hex(self):
        code = SecurityService.generate_promo_code()
        assert len(code) == 8
        assert code == code.upper()
