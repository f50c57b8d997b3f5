# user_accounts/UAA/repository.py
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel import select, or_, col
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
import structlog

from .models import User
from .interfaces import UserStore
from .errors import ConflictError, StoreError, UserNotFoundError

logger = structlog.get_logger(__name__)


class UserRepository(UserStore):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _first(self, q) -> Optional[User]:
        try:
            res = await self.session.execute(q)
        except SQLAlchemyError as e:
            logger.exception("user_query_failed", error=str(e))
            raise StoreError() from e
        return res.scalars().first()

    async def _save(self, user: User) -> User:
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.info("user_write_conflict", user_id=user.id)
            raise ConflictError("username or email already in use") from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception("user_write_failed", user_id=user.id, error=str(e))
            raise StoreError() from e
        await self.session.refresh(user)
        return user

    async def _require(self, user_id: str) -> User:
        user = await self.get_by_id(user_id)
        if not user:
            raise UserNotFoundError()
        return user

    async def get_by_email(self, email: str) -> Optional[User]:
        return await self._first(select(User).where(User.email == email))

    async def get_by_username(self, username: str) -> Optional[User]:
        return await self._first(select(User).where(User.username == username))

    async def get_by_id(self, user_id: str) -> Optional[User]:
        return await self._first(select(User).where(User.id == user_id))

    async def get_by_name_or_username(self, name_or_username: str) -> List[User]:
        pattern = f"%{name_or_username}%"
        q = select(User).where(or_(col(User.name).ilike(pattern), col(User.username).ilike(pattern)))
        try:
            res = await self.session.execute(q)
        except SQLAlchemyError as e:
            logger.exception("user_search_failed", error=str(e))
            raise StoreError() from e
        return list(res.scalars().all())

    async def get_all(self) -> List[User]:
        try:
            res = await self.session.execute(select(User).order_by(User.created_at))
        except SQLAlchemyError as e:
            logger.exception("user_list_failed", error=str(e))
            raise StoreError() from e
        return list(res.scalars().all())

    async def create(self, user: User) -> User:
        return await self._save(user)

    async def update(self, user_id: str, fields: Dict[str, Any]) -> User:
        user = await self._require(user_id)
        for key, value in fields.items():
            setattr(user, key, value)
        user.updated_at = datetime.now(timezone.utc)
        return await self._save(user)

    async def update_password(self, user_id: str, hashed_password: str) -> None:
        await self.update(user_id, {"hashed_password": hashed_password})

    async def confirm_email(self, user_id: str) -> None:
        await self.update(user_id, {"email_confirmed": True})

    async def delete(self, user_id: str) -> None:
        user = await self._require(user_id)
        try:
            await self.session.delete(user)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception("user_delete_failed", user_id=user_id, error=str(e))
            raise StoreError() from e
