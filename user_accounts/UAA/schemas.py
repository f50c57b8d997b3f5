# user_accounts/UAA/schemas.py
from pydantic import AfterValidator, BaseModel, EmailStr, Field, StringConstraints, field_validator
from typing import Annotated
from datetime import datetime

from .utils import assert_password_policy, normalize_email


Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=75)]
UpdateUsername = Annotated[str, StringConstraints(strip_whitespace=True, min_length=6, max_length=75)]
# one spelling per mailbox: storage, lookups and code keys all see the lowercased form
Email = Annotated[EmailStr, AfterValidator(normalize_email)]


class UserCreate(BaseModel):
    name: Name
    username: Name
    email: Email
    password: str

    @field_validator("password")
    @classmethod
    def _password_policy(cls, v: str) -> str:
        assert_password_policy(v)
        return v

class UserUpdate(BaseModel):
    name: Name
    email: Email
    username: UpdateUsername

class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)

class UpdatePasswordRequest(BaseModel):
    current: str
    new: str

    @field_validator("current", "new")
    @classmethod
    def _password_policy(cls, v: str) -> str:
        assert_password_policy(v)
        return v

class ResetPasswordRequest(BaseModel):
    new: str
    confirm: str

    @field_validator("new", "confirm")
    @classmethod
    def _password_policy(cls, v: str) -> str:
        assert_password_policy(v)
        return v

class RequestCode(BaseModel):
    email: Email

class ConfirmCodeRequest(BaseModel):
    email: Email
    code: str = Field(min_length=1)

class UserRead(BaseModel):
    id: str
    name: str
    email: str
    username: str
    is_email_confirmed: bool
    created_at: datetime
    last_modified: datetime

class UserInfoRead(BaseModel):
    name: str
    username: str

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int

class ResetToken(BaseModel):
    reset_token: str
    token_type: str = "reset"
    expires_in: int

class ConfirmationCode(BaseModel):
    code: str
    expires_at: datetime
