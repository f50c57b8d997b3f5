# user_accounts/UAA/otp_store.py
import json
from datetime import datetime, timezone
from typing import Optional

import structlog
import redis.asyncio as aioredis
from redis.exceptions import RedisError

from .interfaces import CodeStore
from .schemas import ConfirmationCode
from .errors import StoreError

logger = structlog.get_logger(__name__)


def _otp_key(purpose: str, email: str) -> str:
    return f"otp:{purpose}:{email.lower()}"


class OTPStore(CodeStore):
    """
    One-time codes in Redis, one key per (purpose, email).

    The key TTL follows the code's expiry so Redis evicts dead slots on its own;
    the stored ``expires_at`` is still what the service checks.
    """

    def __init__(self, client: aioredis.Redis):
        self.client = client

    async def put(self, email: str, purpose: str, code: str, expires_at: datetime) -> None:
        ttl = max(1, int((expires_at - datetime.now(timezone.utc)).total_seconds()))
        value = json.dumps({"code": code, "expires_at": expires_at.isoformat()})
        try:
            await self.client.set(_otp_key(purpose, email), value, ex=ttl)
        except RedisError as e:
            logger.exception("otp_store_put_failed", email=email, purpose=purpose, error=str(e))
            raise StoreError() from e
        logger.info("otp_created", email=email, purpose=purpose, ttl=ttl)

    async def get(self, email: str, purpose: str) -> Optional[ConfirmationCode]:
        try:
            raw = await self.client.get(_otp_key(purpose, email))
        except RedisError as e:
            logger.exception("otp_store_get_failed", email=email, purpose=purpose, error=str(e))
            raise StoreError() from e
        if not raw:
            return None
        data = json.loads(raw)
        return ConfirmationCode(code=data["code"], expires_at=datetime.fromisoformat(data["expires_at"]))

    async def delete(self, email: str, purpose: str) -> None:
        try:
            await self.client.delete(_otp_key(purpose, email))
        except RedisError as e:
            logger.exception("otp_store_delete_failed", email=email, purpose=purpose, error=str(e))
            raise StoreError() from e
