# user_accounts/UAA/models.py
from sqlmodel import SQLModel, Field, Column
from datetime import datetime, timezone
import uuid
from sqlalchemy import String, DateTime

from .schemas import UserRead, UserInfoRead


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    __tablename__ = "user"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), sa_column=Column(String(36), primary_key=True))
    name: str = Field(sa_column=Column(String(75), nullable=False))
    username: str = Field(sa_column=Column(String(255), unique=True, index=True, nullable=False))
    email: str = Field(sa_column=Column(String(255), unique=True, index=True, nullable=False))
    hashed_password: str = Field(sa_column=Column(String(255), nullable=False))
    email_confirmed: bool = Field(default=False)
    two_factor_auth_active: bool = Field(default=False)
    created_at: datetime = Field(default_factory=_utcnow, sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(default_factory=_utcnow, sa_column=Column(DateTime(timezone=True), nullable=False))

    def to_read(self) -> UserRead:
        return UserRead(
            id=self.id,
            name=self.name,
            email=self.email,
            username=self.username,
            is_email_confirmed=self.email_confirmed,
            created_at=self.created_at,
            last_modified=self.updated_at,
        )

    def to_info(self) -> UserInfoRead:
        return UserInfoRead(name=self.name, username=self.username)
