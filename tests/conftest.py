"""
Shared fixtures: in-memory implementations of the service's collaborators.
"""

import os

os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "development"

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

from user_accounts.UAA.errors import ConflictError, UserNotFoundError
from user_accounts.UAA.interfaces import CodeStore, Notifier, UserStore
from user_accounts.UAA.models import User
from user_accounts.UAA.schemas import ConfirmationCode, UserCreate
from user_accounts.UAA.services import UserService


class InMemoryUserStore(UserStore):
    def __init__(self) -> None:
        self.users: Dict[str, User] = {}

    def _find(self, **match: Any) -> Optional[User]:
        for user in self.users.values():
            if all(getattr(user, k) == v for k, v in match.items()):
                return user
        return None

    async def create(self, user: User) -> User:
        if self._find(email=user.email) or self._find(username=user.username):
            raise ConflictError("username or email already in use")
        self.users[user.id] = user
        return user

    async def get_by_id(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        return self._find(email=email)

    async def get_by_username(self, username: str) -> Optional[User]:
        return self._find(username=username)

    async def get_by_name_or_username(self, name_or_username: str) -> List[User]:
        needle = name_or_username.lower()
        return [
            u for u in self.users.values()
            if needle in u.name.lower() or needle in u.username.lower()
        ]

    async def get_all(self) -> List[User]:
        return list(self.users.values())

    async def update(self, user_id: str, fields: Dict[str, Any]) -> User:
        user = self.users.get(user_id)
        if user is None:
            raise UserNotFoundError()
        for key, value in fields.items():
            setattr(user, key, value)
        user.updated_at = datetime.now(timezone.utc)
        return user

    async def delete(self, user_id: str) -> None:
        if self.users.pop(user_id, None) is None:
            raise UserNotFoundError()

    async def update_password(self, user_id: str, hashed_password: str) -> None:
        await self.update(user_id, {"hashed_password": hashed_password})

    async def confirm_email(self, user_id: str) -> None:
        await self.update(user_id, {"email_confirmed": True})


class InMemoryCodeStore(CodeStore):
    def __init__(self) -> None:
        self.records: Dict[tuple, ConfirmationCode] = {}

    async def put(self, email: str, purpose: str, code: str, expires_at: datetime) -> None:
        self.records[(purpose, email)] = ConfirmationCode(code=code, expires_at=expires_at)

    async def get(self, email: str, purpose: str) -> Optional[ConfirmationCode]:
        return self.records.get((purpose, email))

    async def delete(self, email: str, purpose: str) -> None:
        self.records.pop((purpose, email), None)


class RecordingNotifier(Notifier):
    def __init__(self) -> None:
        self.sent: List[tuple] = []
        self.fail = False

    async def send_code(self, email: str, code: str, purpose: str) -> None:
        if self.fail:
            raise ConnectionError("smtp unavailable")
        self.sent.append((email, code, purpose))


@pytest.fixture
def user_store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def code_store() -> InMemoryCodeStore:
    return InMemoryCodeStore()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def service(user_store, code_store, notifier) -> UserService:
    return UserService(user_store, code_store, notifier)


@pytest.fixture
def alice_payload() -> UserCreate:
    return UserCreate(name="Alice", username="alice", email="alice@x.com", password="Secret!1")
