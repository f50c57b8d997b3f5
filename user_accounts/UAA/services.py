# user_accounts/UAA/services.py
from typing import List
from datetime import datetime, timedelta, timezone
import structlog

from .models import User
from .interfaces import UserStore, CodeStore, Notifier, CONFIRM_EMAIL, RESET_PASSWORD
from .schemas import (
    ConfirmCodeRequest,
    LoginRequest,
    ResetPasswordRequest,
    ResetToken,
    Token,
    UpdatePasswordRequest,
    UserCreate,
    UserInfoRead,
    UserRead,
    UserUpdate,
)
from .errors import (
    InvalidOTPError,
    OTPNotFoundError,
    PasswordMismatchError,
    SameEmailError,
    SendConfirmationCodeError,
    UserAlreadyRegisteredError,
    UserIDMismatchError,
    UsernameTakenError,
    UserNotFoundError,
    InvalidInputError,
)
from . import utils

logger = structlog.get_logger(__name__)


class UserService:
    def __init__(self, repo: UserStore, codes: CodeStore, notifier: Notifier):
        self.repo = repo
        self.codes = codes
        self.notifier = notifier

    async def _get_or_404(self, user_id: str) -> User:
        user = await self.repo.get_by_id(user_id)
        if not user:
            logger.debug("user_not_found", user_id=user_id)
            raise UserNotFoundError()
        return user

    # --- registration / profile ---
    async def register_user(self, user_in: UserCreate) -> UserRead:
        utils.assert_password_policy(user_in.password)
        email = utils.normalize_email(user_in.email)
        username = user_in.username.strip()

        if await self.repo.get_by_email(email):
            logger.debug("register_email_exists", email=email)
            raise UserAlreadyRegisteredError()
        if await self.repo.get_by_username(username):
            logger.debug("register_username_exists", username=username)
            raise UsernameTakenError()

        user = User(
            name=user_in.name.strip(),
            username=username,
            email=email,
            hashed_password=utils.hash_password(user_in.password),
        )
        created = await self.repo.create(user)
        logger.info("user_registered", user_id=created.id, email=created.email)
        return created.to_read()

    async def get_user(self, user_id: str) -> UserRead:
        return (await self._get_or_404(user_id)).to_read()

    async def get_user_by_email(self, email: str) -> UserRead:
        user = await self.repo.get_by_email(utils.normalize_email(email))
        if not user:
            raise UserNotFoundError()
        return user.to_read()

    async def get_user_by_username(self, username: str) -> UserRead:
        user = await self.repo.get_by_username(username)
        if not user:
            raise UserNotFoundError()
        return user.to_read()

    async def search_users(self, name_or_username: str) -> List[UserInfoRead]:
        users = await self.repo.get_by_name_or_username(name_or_username)
        return [u.to_info() for u in users]

    async def list_users(self) -> List[UserRead]:
        return [u.to_read() for u in await self.repo.get_all()]

    async def update_user(self, user_id: str, user_in: UserUpdate) -> UserRead:
        user = await self._get_or_404(user_id)
        email = utils.normalize_email(user_in.email)
        if email == user.email:
            raise SameEmailError()

        other = await self.repo.get_by_email(email)
        if other and other.id != user_id:
            raise UserAlreadyRegisteredError()
        other = await self.repo.get_by_username(user_in.username)
        if other and other.id != user_id:
            raise UsernameTakenError()

        updated = await self.repo.update(
            user_id,
            {"name": user_in.name, "email": email, "username": user_in.username},
        )
        logger.info("user_updated", user_id=user_id)
        return updated.to_read()

    async def delete_user(self, user_id: str) -> None:
        await self.repo.delete(user_id)
        logger.info("user_deleted", user_id=user_id)

    # --- login ---
    async def authenticate_user(self, login: LoginRequest) -> Token:
        user = await self.repo.get_by_username(login.username)
        if not user:
            logger.debug("auth_failed_unknown_username", username=login.username)
            raise UserNotFoundError()

        if not utils.verify_password(login.password, user.hashed_password):
            logger.info("auth_failed_wrong_password", user_id=user.id)
            raise PasswordMismatchError()

        access = utils.create_access_token(user.id)
        logger.info("auth_success", user_id=user.id, jti=access["jti"])
        return Token(access_token=access["token"], expires_in=access["exp"])

    # --- passwords ---
    async def update_password(self, user_id: str, payload: UpdatePasswordRequest) -> None:
        user = await self._get_or_404(user_id)
        if not utils.verify_password(payload.current, user.hashed_password):
            logger.info("password_update_wrong_current", user_id=user_id)
            raise PasswordMismatchError()
        utils.assert_password_policy(payload.new)

        await self.repo.update_password(user_id, utils.hash_password(payload.new))
        logger.info("password_updated", user_id=user_id)

    async def reset_password(self, user_id: str, payload: ResetPasswordRequest) -> None:
        if payload.new != payload.confirm:
            raise InvalidInputError("new password and confirmation do not match")
        utils.assert_password_policy(payload.new)
        await self._get_or_404(user_id)

        await self.repo.update_password(user_id, utils.hash_password(payload.new))
        logger.info("password_reset", user_id=user_id)

    # --- one-time codes ---
    async def send_confirmation_code(self, email: str, purpose: str = CONFIRM_EMAIL) -> str:
        """
        Issue a fresh code for ``purpose`` and mail it to ``email``.

        The code is stored before the notifier runs and stays stored if sending
        fails; asking again overwrites it. Returns the code for callers that
        echo it in development.
        """
        email = utils.normalize_email(email)
        user = await self.repo.get_by_email(email)
        if not user:
            logger.debug("otp_request_unknown_email", email=email, purpose=purpose)
            raise UserNotFoundError()

        code = utils.generate_otp()
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=utils.OTP_TTL_SECONDS)
        await self.codes.put(email, purpose, code, expires_at)

        try:
            await self.notifier.send_code(email, code, purpose)
        except Exception as e:
            logger.exception("otp_email_send_failed", user_id=user.id, purpose=purpose, error=str(e))
            raise SendConfirmationCodeError() from e
        logger.info("otp_sent", user_id=user.id, purpose=purpose)
        return code

    async def request_password_reset(self, email: str) -> str:
        return await self.send_confirmation_code(email, RESET_PASSWORD)

    async def _consume_code(self, payload: ConfirmCodeRequest, purpose: str) -> User:
        """
        Check ``payload.code`` against the live code for (purpose, email) and
        return the owner of that same email. The record is left in place.
        """
        email = utils.normalize_email(payload.email)
        record = await self.codes.get(email, purpose)
        if not record:
            logger.info("otp_missing", email=email, purpose=purpose)
            raise OTPNotFoundError()

        if datetime.now(timezone.utc) > record.expires_at:
            logger.info("otp_expired", email=email, purpose=purpose)
            raise InvalidOTPError()
        if not utils.codes_match(record.code, payload.code):
            logger.info("otp_mismatch", email=email, purpose=purpose)
            raise InvalidOTPError()

        user = await self.repo.get_by_email(email)
        if not user:
            raise UserNotFoundError()
        return user

    async def confirm_email(self, payload: ConfirmCodeRequest) -> None:
        user = await self._consume_code(payload, CONFIRM_EMAIL)
        await self.repo.confirm_email(user.id)
        await self.codes.delete(user.email, CONFIRM_EMAIL)
        logger.info("email_confirmed", user_id=user.id)

    async def confirm_reset_password_code(self, payload: ConfirmCodeRequest) -> ResetToken:
        user = await self._consume_code(payload, RESET_PASSWORD)
        await self.codes.delete(user.email, RESET_PASSWORD)
        reset = utils.create_reset_token(user.id)
        logger.info("reset_code_verified", user_id=user.id, jti=reset["jti"])
        return ResetToken(reset_token=reset["token"], expires_in=reset["exp"])

    # --- authorization ---
    @staticmethod
    def check_user_id_match(id_from_token: str, target_id: str) -> None:
        if id_from_token != target_id:
            logger.warning("user_id_mismatch", token_user_id=id_from_token, target_user_id=target_id)
            raise UserIDMismatchError()
