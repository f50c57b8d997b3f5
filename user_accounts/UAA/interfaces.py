"""
Capability interfaces the account service depends on.

``UserService`` only sees these contracts, so persistence, code storage and
notification backends can be swapped without touching orchestration logic.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from .models import User
from .schemas import ConfirmationCode

CONFIRM_EMAIL = "confirm_email"
RESET_PASSWORD = "reset_password"


class UserStore(ABC):
    """Persistence boundary for ``User`` records."""

    @abstractmethod
    async def create(self, user: User) -> User: ...

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]: ...

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]: ...

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    async def get_by_name_or_username(self, name_or_username: str) -> List[User]: ...

    @abstractmethod
    async def get_all(self) -> List[User]: ...

    @abstractmethod
    async def update(self, user_id: str, fields: Dict[str, Any]) -> User:
        """Apply ``fields`` to the user; raises ``UserNotFoundError`` for an unknown id."""

    @abstractmethod
    async def delete(self, user_id: str) -> None: ...

    @abstractmethod
    async def update_password(self, user_id: str, hashed_password: str) -> None: ...

    @abstractmethod
    async def confirm_email(self, user_id: str) -> None: ...


class CodeStore(ABC):
    """
    Short-lived one-time codes, one live slot per (purpose, email).

    ``put`` overwrites whatever code the slot held before.
    """

    @abstractmethod
    async def put(self, email: str, purpose: str, code: str, expires_at: datetime) -> None: ...

    @abstractmethod
    async def get(self, email: str, purpose: str) -> Optional[ConfirmationCode]: ...

    @abstractmethod
    async def delete(self, email: str, purpose: str) -> None: ...


class Notifier(ABC):
    """Delivers a one-time code to an e-mail address. Failures propagate."""

    @abstractmethod
    async def send_code(self, email: str, code: str, purpose: str) -> None: ...
