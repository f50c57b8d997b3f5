"""
Tests for the SQLModel user repository against a mocked async session.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from user_accounts.UAA.errors import ConflictError, StoreError, UserNotFoundError
from user_accounts.UAA.models import User
from user_accounts.UAA.repository import UserRepository


def _user(**overrides) -> User:
    data = {"name": "Alice", "username": "alice", "email": "alice@x.com", "hashed_password": "hash"}
    data.update(overrides)
    return User(**data)


def _session(found=None):
    session = MagicMock()
    result = MagicMock()
    result.scalars.return_value.first.return_value = found
    result.scalars.return_value.all.return_value = [found] if found else []
    session.execute = AsyncMock(return_value=result)
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.refresh = AsyncMock()
    session.delete = AsyncMock()
    return session


class TestUserRepository:
    def test_new_user_defaults(self):
        user = _user()
        assert len(user.id) == 36
        assert user.email_confirmed is False
        assert user.two_factor_auth_active is False
        assert user.created_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_create_commits(self):
        session = _session()
        user = _user()

        created = await UserRepository(session).create(user)

        assert created is user
        session.add.assert_called_once_with(user)
        session.commit.assert_awaited_once()
        session.refresh.assert_awaited_once_with(user)

    @pytest.mark.asyncio
    async def test_create_integrity_error_is_conflict(self):
        session = _session()
        session.commit.side_effect = IntegrityError("INSERT", {}, Exception("duplicate key"))

        with pytest.raises(ConflictError):
            await UserRepository(session).create(_user())
        session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_query_failure_is_store_error(self):
        session = _session()
        session.execute.side_effect = OperationalError("SELECT", {}, Exception("connection lost"))

        with pytest.raises(StoreError):
            await UserRepository(session).get_by_email("alice@x.com")

    @pytest.mark.asyncio
    async def test_lookup_returns_first_match(self):
        user = _user()
        repo = UserRepository(_session(found=user))
        assert await repo.get_by_username("alice") is user
        assert await repo.get_by_name_or_username("ali") == [user]

    @pytest.mark.asyncio
    async def test_update_applies_fields(self):
        user = _user()
        before = user.updated_at
        session = _session(found=user)

        await UserRepository(session).update_password(user.id, "new-hash")

        assert user.hashed_password == "new-hash"
        assert user.updated_at >= before
        session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_confirm_email(self):
        user = _user()
        await UserRepository(_session(found=user)).confirm_email(user.id)
        assert user.email_confirmed is True

    @pytest.mark.asyncio
    async def test_update_unknown_user(self):
        with pytest.raises(UserNotFoundError):
            await UserRepository(_session()).update("missing", {"name": "x"})

    @pytest.mark.asyncio
    async def test_delete(self):
        user = _user()
        session = _session(found=user)

        await UserRepository(session).delete(user.id)

        session.delete.assert_awaited_once_with(user)
        session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_unknown_user(self):
        with pytest.raises(UserNotFoundError):
            await UserRepository(_session()).delete("missing")
