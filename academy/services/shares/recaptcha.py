import httpx
from loguru import logger

from academy.core.settings import settings


class RecaptchaError(RuntimeError):
    pass


class RecaptchaService:
    """Google reCAPTCHA siteverify over the shared httpx client."""

    def __init__(self, http: httpx.AsyncClient, timeout: float = 10.0):
        self.http = http
        self.secret = settings.RECAPTCHA_SECRET_KEY
        self.verify_url = settings.RECAPTCHA_VERIFY_URL
        self.default_timeout = timeout

    async def verify(self, token: str, remote_ip: str | None = None) -> bool:
        data = {"secret": self.secret, "response": token}
        if remote_ip:
            data["remoteip"] = remote_ip
        try:
            resp = await self.http.post(
                self.verify_url, data=data, timeout=self.default_timeout
            )
        except httpx.HTTPError as e:
            logger.error(f"❌ reCAPTCHA request failed: {e}")
            raise RecaptchaError(str(e))

        if resp.status_code != 200:
            logger.warning(f"⚠ reCAPTCHA HTTP {resp.status_code}")
            return False
        payload = resp.json()
        if not payload.get("success"):
            logger.info(f"🤖 reCAPTCHA rejected: {payload.get('error-codes')}")
            return False
        return True
