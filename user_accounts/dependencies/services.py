# user_accounts/dependencies/services.py
from fastapi import Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from .db import get_session_dep
from ..UAA.repository import UserRepository
from ..UAA.otp_store import OTPStore
from ..UAA.services import UserService
from ..infrastructure.redis_cache import redis_client
from ..infrastructure.email import EmailNotifier

async def get_user_service(session: AsyncSession = Depends(get_session_dep)) -> UserService:
    return UserService(UserRepository(session), OTPStore(redis_client), EmailNotifier())
